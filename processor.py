import os
from pathlib import Path

from loguru import logger

from cache import ChecksumCache
from constants import CLI_PATH_ENV, CLI_PATHS, NOT_FOUND_MESSAGE, BatchKind
from exceptions import BinaryNotFoundError, ConfigurationError
from models import OptimizeResult, Partition
from optimizer import run_directory, run_files
from settings import Config, Task, TaskOptions
from utils import aisdir, aisfile, alistdir


def locate_cli(candidates: list[Path] | None = None) -> Path:
    """在固定的几个安装位置中查找 ImageOptim-CLI"""
    if candidates is None:
        candidates = list(CLI_PATHS)
        if override := os.getenv(CLI_PATH_ENV):
            candidates.insert(0, Path(override))
    for candidate in candidates:
        if candidate.exists():
            return candidate.resolve()
    raise BinaryNotFoundError(NOT_FOUND_MESSAGE)


async def partition(sources: list[str], root: Path) -> Partition:
    """把路径按文件、目录分开并转为绝对路径，两者都不是的丢弃"""
    result = Partition()
    for source in sources:
        path = (root / source).resolve()
        if await aisfile(path):
            result.files.append(path)
        elif await aisdir(path):
            result.directories.append(path)
        else:
            logger.warning("Source {} is neither a file nor a directory, skipped.", source)
    return result


async def expand_directories(directories: list[Path]) -> list[Path]:
    """只展开一层，子目录被忽略"""
    files = []
    for directory in directories:
        files.extend([path for path in await alistdir(directory) if await aisfile(path)])
    return files


async def process_files(files: list[Path], options: TaskOptions, cli_path: Path) -> OptimizeResult:
    cache = None
    if options.cache:
        cache = ChecksumCache(options.cache)
        files = await cache.filter(files)
        if not files:
            return OptimizeResult(returncode=0)
    result = (await run_files(files, options, cli_path)).raise_for_status()
    logger.info("ImageOptim done!")
    if cache:
        await cache.store(files)
    return result


async def process_directories(directories: list[Path], options: TaskOptions, cli_path: Path) -> OptimizeResult:
    if options.expand_directories:
        if not (files := await expand_directories(directories)):
            return OptimizeResult(returncode=0)
        return await process_files(files, options, cli_path)
    # 直接交给优化器处理整个目录，此时无法使用缓存
    result = OptimizeResult(returncode=0)
    for directory in directories:
        result = (await run_directory(directory, options, cli_path)).raise_for_status()
    return result


async def process_batch(
    kind: BatchKind, sources: list[str], options: TaskOptions, cli_path: Path, root: Path
) -> OptimizeResult | None:
    """处理文件组中的一类路径，没有该类路径时直接返回 None"""
    batch = await partition(sources, root)
    if kind is BatchKind.FILE:
        if not batch.files:
            return None
        return await process_files(batch.files, options, cli_path)
    if not batch.directories:
        return None
    return await process_directories(batch.directories, options, cli_path)


async def run_task(task: Task, options: TaskOptions, cli_path: Path, root: Path | None = None) -> list[OptimizeResult]:
    """依次处理每个文件组的文件和目录，上一批完成后才开始下一批，任意一批失败即中止"""
    root = root or Path.cwd()
    if options.cache:
        options = options.model_copy(update={"cache": (root / options.cache).resolve()})
    results = []
    for group in task.groups:
        for kind in (BatchKind.FILE, BatchKind.DIR):
            if (result := await process_batch(kind, group.src, options, cli_path, root)) is not None:
                results.append(result)
    return results


async def run_tasks(config: Config, names: list[str] | None = None, root: Path | None = None) -> None:
    names = names or list(config.tasks)
    if unknown := [name for name in names if name not in config.tasks]:
        raise ConfigurationError(f"Unknown task: {', '.join(unknown)}")
    cli_path = locate_cli()
    for name in names:
        task = config.tasks[name]
        logger.info("Running task {}...", name)
        await run_task(task, config.options_for(task), cli_path, root)
        logger.info("Task {} processed successfully.", name)
