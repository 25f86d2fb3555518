from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

from constants import FAILURE_MESSAGE
from exceptions import OptimizerExitError


class ConfigCheck(IntEnum):
    VALID = 1
    DEPRECATED_SHAPE = 2  # files 里出现了字符串


@dataclass(frozen=True)
class OptimizeResult:
    """一次优化器调用的结果，退出码为 0 即成功"""

    returncode: int
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @staticmethod
    def from_returncode(returncode: int) -> "OptimizeResult":
        if returncode == 0:
            return OptimizeResult(returncode=0)
        return OptimizeResult(returncode=returncode, message=FAILURE_MESSAGE)

    def raise_for_status(self) -> "OptimizeResult":
        if not self.ok:
            raise OptimizerExitError(self.message or FAILURE_MESSAGE, returncode=self.returncode)
        return self


@dataclass
class Partition:
    """一个文件组拆分出的两类绝对路径"""

    files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)
