"""
领域模型

包含枚举、数据模型和错误定义。
"""

from file_logger.domain.enums import ConsoleStream, DeliveryStatus, RotatorState
from file_logger.domain.errors import (
    AppendError,
    CompressionError,
    ConfigError,
    DeliveryError,
    FileLoggerError,
    InvalidArgumentError,
    RotationError,
)
from file_logger.domain.models import (
    CompressedArtifact,
    DeliveryEntry,
    DeliveryResult,
    RotationResult,
)

__all__ = [
    # Enums
    "ConsoleStream",
    "DeliveryStatus",
    "RotatorState",
    # Models
    "CompressedArtifact",
    "DeliveryEntry",
    "DeliveryResult",
    "RotationResult",
    # Errors
    "FileLoggerError",
    "AppendError",
    "RotationError",
    "CompressionError",
    "DeliveryError",
    "InvalidArgumentError",
    "ConfigError",
]
