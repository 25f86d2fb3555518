import os
from enum import Enum
from pathlib import Path


def get_base(dir_name: str) -> Path:
    path = (
        Path(base)
        if (base := os.getenv(f"{dir_name.upper()}_PATH"))
        else Path(__file__).parent / dir_name
    )
    path.mkdir(parents=True, exist_ok=True)
    return path


DEFAULT_CONFIG_PATH = get_base("config") / "config.json"

OPTIMIZER_COMMAND = "./imageOptim"

CLI_PATH_ENV = "IMAGEOPTIM_CLI_PATH"

# 依次尝试的安装位置，相对于本项目所在目录
CLI_PATHS = [
    Path(__file__).parent / "node_modules" / "imageoptim-cli" / "bin",
    Path(__file__).parent.parent / "imageoptim-cli" / "bin",
]

ISSUES_PAGE = "https://github.com/JamieMason/grunt-imageoptim/issues/new"

PROJECT_PAGE = "https://github.com/JamieMason/grunt-imageoptim"

FAILURE_MESSAGE = "ImageOptim-CLI exited with a failure status"

NOT_FOUND_MESSAGE = f"Unable to locate ImageOptim-CLI. Please raise issue at {ISSUES_PAGE}"

DEPRECATED_CONFIG_MESSAGE = (
    "\nThe task configuration changed to bring full support for file groups.\n"
    'In most cases all this means is renaming the "files" property to "src", but '
    f"updated examples can be found at {PROJECT_PAGE}."
)

HASH_BUFFER_SIZE = 8192

COPY_CHUNK_SIZE = 40960


class BatchKind(str, Enum):
    FILE = "file"
    DIR = "dir"
