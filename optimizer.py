import asyncio
import contextlib
import shlex
from asyncio import create_subprocess_exec, create_subprocess_shell
from asyncio.subprocess import DEVNULL, PIPE, Process
from pathlib import Path

from loguru import logger

from constants import OPTIMIZER_COMMAND
from models import OptimizeResult
from settings import TaskOptions


def cli_flags(options: TaskOptions) -> list[str]:
    """根据任务选项生成命令行开关"""
    flags = []
    if options.quit_after:
        flags.append("--quit")
    if options.image_alpha:
        flags.append("--image-alpha")
    if options.jpeg_mini:
        flags.append("--jpeg-mini")
    return flags


def directory_command(directory: Path, options: TaskOptions) -> str:
    return " ".join([OPTIMIZER_COMMAND, *cli_flags(options), "--directory", shlex.quote(str(directory))])


async def stream_output(process: Process) -> None:
    """逐行转发子进程的标准输出，不做缓冲"""
    async for line in process.stdout:
        logger.info("{}", line.decode(errors="replace").rstrip("\n"))


async def feed_input(process: Process, data: bytes) -> None:
    # 优化器提前退出时写入会失败，结果仍以退出码为准
    with contextlib.suppress(BrokenPipeError, ConnectionResetError):
        process.stdin.write(data)
        await process.stdin.drain()
    process.stdin.close()


async def run_directory(directory: Path, options: TaskOptions, cli_path: Path) -> OptimizeResult:
    process = await create_subprocess_shell(
        directory_command(directory, options), stdin=DEVNULL, stdout=PIPE, cwd=cli_path
    )
    await stream_output(process)
    return OptimizeResult.from_returncode(await process.wait())


async def run_files(files: list[Path], options: TaskOptions, cli_path: Path) -> OptimizeResult:
    """文件列表通过标准输入传给优化器，每行一个路径；写入的同时读取输出，避免管道写满后互相等待"""
    process = await create_subprocess_exec(
        OPTIMIZER_COMMAND, *cli_flags(options), stdin=PIPE, stdout=PIPE, cwd=cli_path
    )
    data = ("\n".join(str(file) for file in files) + "\n").encode()
    await asyncio.gather(feed_input(process, data), stream_output(process))
    return OptimizeResult.from_returncode(await process.wait())
