import hashlib
from pathlib import Path

import aiofiles
from aiofiles.base import AiofilesContextManager
from aiofiles.os import listdir, makedirs
from aiofiles.ospath import isdir, isfile

from constants import COPY_CHUNK_SIZE, HASH_BUFFER_SIZE


def md5_file(path: Path) -> str:
    """分块读取整个文件计算 md5，同步执行，保证与后续的过滤顺序一致"""
    digest = hashlib.md5()
    with open(path, "rb") as f:
        while chunk := f.read(HASH_BUFFER_SIZE):
            digest.update(chunk)
    return digest.hexdigest()


async def acopy(source: Path, target: Path) -> None:
    async with aopen(source, "rb") as src, aopen(target, "wb") as dst:
        while chunk := await src.read(COPY_CHUNK_SIZE):
            await dst.write(chunk)


async def aisfile(path: Path) -> bool:
    return await isfile(path)


async def aisdir(path: Path) -> bool:
    return await isdir(path)


async def alistdir(path: Path) -> list[Path]:
    return [path / name for name in sorted(await listdir(path))]


async def amakedirs(path: Path, exist_ok=False) -> None:
    await makedirs(path, exist_ok=exist_ok)


def aopen(path: Path, mode: str = "r", **kwargs) -> AiofilesContextManager:
    return aiofiles.open(path, mode, **kwargs)
