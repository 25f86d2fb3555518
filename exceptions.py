class ImageOptimError(Exception):
    """所有可预期错误的基类，由 entry 统一记录并以非零状态退出"""


class ConfigurationError(ImageOptimError):
    pass


class BinaryNotFoundError(ImageOptimError):
    pass


class OptimizerExitError(ImageOptimError):
    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
