import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel

from constants import DEFAULT_CONFIG_PATH, DEPRECATED_CONFIG_MESSAGE
from exceptions import ConfigurationError
from models import ConfigCheck

RESERVED_KEYS = ("options", "files")


class TaskOptions(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    jpeg_mini: bool = False  # 是否同时运行 JPEGmini.app
    image_alpha: bool = False  # 是否同时运行 ImageAlpha.app
    quit_after: bool = False  # 运行结束后是否退出这些 app
    cache: Path | None = None  # 缓存目录，为空则不使用缓存
    expand_directories: bool = True  # 目录展开为文件后走文件模式，否则使用 --directory


class FileGroup(BaseModel):
    src: list[str] = Field(default_factory=list)


class Task(BaseModel):
    src: list[str] | None = None
    files: list[FileGroup] | None = None
    options: TaskOptions = Field(default_factory=TaskOptions)

    @property
    def groups(self) -> list[FileGroup]:
        """files 优先，否则 src 作为唯一的文件组"""
        if self.files is not None:
            return self.files
        return [FileGroup(src=self.src or [])]


class Config(BaseModel):
    options: TaskOptions = Field(default_factory=TaskOptions)
    tasks: dict[str, Task] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_tasks(cls, data: Any) -> Any:
        # 配置文件是扁平的：除 options 外所有对象类型的值都是任务
        if not isinstance(data, dict) or "tasks" in data:
            return data
        return {
            "options": data.get("options", {}),
            "tasks": {
                key: value for key, value in data.items() if isinstance(value, dict) and key not in RESERVED_KEYS
            },
        }

    @model_serializer(mode="wrap")
    def flatten_tasks(self, handler) -> dict[str, Any]:
        data = handler(self)
        return {"options": data.get("options", {}), **data.get("tasks", {})}

    def options_for(self, task: Task) -> TaskOptions:
        """任务中显式给出的选项逐项覆盖全局选项"""
        overrides = {name: getattr(task.options, name) for name in task.options.model_fields_set}
        return self.options.model_copy(update=overrides)

    @staticmethod
    def load(path: Path | None = None) -> "Config":
        if not path:
            path = DEFAULT_CONFIG_PATH
        try:
            with path.open("r") as f:
                raw = json.load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load config file: {path}") from e
        if check_config(raw) is ConfigCheck.DEPRECATED_SHAPE:
            raise ConfigurationError(DEPRECATED_CONFIG_MESSAGE)
        try:
            return Config.model_validate(raw)
        except Exception as e:
            raise ConfigurationError(f"Invalid config file: {path}") from e

    def save(self, path: Path | None = None) -> "Config":
        if not path:
            path = DEFAULT_CONFIG_PATH
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w") as f:
                f.write(self.model_dump_json(indent=4, by_alias=True, exclude_unset=True))
            return self
        except Exception as e:
            raise ConfigurationError(f"Failed to save config file: {path}") from e


def check_config(raw: Any) -> ConfigCheck:
    """检查旧版配置：files 中直接写字符串路径的写法已不再支持"""
    if not isinstance(raw, dict):
        return ConfigCheck.VALID
    candidates = [raw] + [
        value for key, value in raw.items() if isinstance(value, dict) and key not in RESERVED_KEYS
    ]
    for candidate in candidates:
        members = candidate.get("files")
        if isinstance(members, list) and any(isinstance(member, str) for member in members):
            return ConfigCheck.DEPRECATED_SHAPE
    return ConfigCheck.VALID


def init_settings(path: Path | None = None) -> Config:
    if not path:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        # 配置文件不存在的情况下，写入空的默认值
        Config().save(path)
    return Config.load(path)
