from pathlib import Path

from loguru import logger

from utils import acopy, amakedirs, md5_file


class ChecksumCache:
    """以文件内容 md5 命名的缓存目录，每个条目是某个文件优化后的内容

    条目写入后不再改写，也不会被清理。
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        # 本轮待优化文件 -> 优化前计算出的缓存路径
        self.pending: dict[Path, Path] = {}

    def entry_path(self, checksum: str) -> Path:
        return self.directory / checksum

    async def ensure(self) -> None:
        await amakedirs(self.directory, exist_ok=True)

    async def filter(self, files: list[Path]) -> list[Path]:
        """命中缓存的文件直接用缓存内容覆盖，返回剩下仍需优化的文件"""
        await self.ensure()
        self.pending = {}
        remaining = []
        for file in files:
            entry = self.entry_path(md5_file(file))
            if entry.exists():
                logger.info("From cache file {}", file.name)
                await acopy(entry, file)
            else:
                self.pending[file] = entry
                remaining.append(file)
        return remaining

    async def store(self, files: list[Path]) -> None:
        """优化成功后，把文件以优化前的 md5 为名存入缓存"""
        for file in files:
            entry = self.pending.pop(file, None)
            if entry is None or entry.exists():
                continue
            logger.info("Add to cache {}", file.name)
            await acopy(file, entry)
