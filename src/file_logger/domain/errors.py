"""
日志管道错误定义
"""

from typing import Any


class FileLoggerError(Exception):
    """日志管道基础错误"""

    def __init__(
        self,
        message: str,
        code: str = "FILE_LOGGER_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class AppendError(FileLoggerError):
    """日志追加写入错误（致命）"""

    fatal = True

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="APPEND_ERROR", details=details)
        self.path = path


class RotationError(FileLoggerError):
    """日志轮转错误"""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="ROTATION_ERROR", details=details)
        self.path = path


class CompressionError(FileLoggerError):
    """压缩错误"""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="COMPRESSION_ERROR", details=details)
        self.path = path


class DeliveryError(FileLoggerError):
    """投递错误"""

    def __init__(
        self,
        message: str,
        artifact_name: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="DELIVERY_ERROR", details=details)
        self.artifact_name = artifact_name
        self.status_code = status_code


class InvalidArgumentError(FileLoggerError):
    """参数错误"""

    def __init__(
        self,
        message: str,
        argument: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="INVALID_ARGUMENT", details=details)
        self.argument = argument


class ConfigError(FileLoggerError):
    """配置错误"""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code="CONFIG_ERROR", details=details)
        self.config_key = config_key
