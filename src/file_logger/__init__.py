"""
file-logger

捕获进程控制台输出并持久化到本地日志文件，定期轮转、压缩归档，
并以至少一次的语义投递到远程通知渠道（渠道未就绪时先缓冲）。

快速开始:
    from file_logger import FileLoggerConfig, LogPipeline

    pipeline = LogPipeline(FileLoggerConfig(channel_id="667741905228136459", bot_token="..."))
    await pipeline.start()
    await pipeline.log("server started", {"players": 42})

    async with pipeline.error_boundary():
        await run_host()
"""

from file_logger.config import FileLoggerConfig
from file_logger.delivery import DeliveryQueue, DiscordChannel, NotificationChannel, Notifier
from file_logger.domain import (
    AppendError,
    CompressedArtifact,
    CompressionError,
    ConfigError,
    DeliveryError,
    DeliveryResult,
    DeliveryStatus,
    FileLoggerError,
    InvalidArgumentError,
    RotationError,
    RotationResult,
)
from file_logger.logs import CaptureHooks, LogAppender, LogFacade, LogRotator, compress, format_values
from file_logger.pipeline import LogPipeline
from file_logger.plugins import FileLoggerPlugin

__all__ = [
    # Config
    "FileLoggerConfig",
    # Pipeline
    "LogPipeline",
    "FileLoggerPlugin",
    # Logs
    "format_values",
    "LogAppender",
    "LogFacade",
    "CaptureHooks",
    "LogRotator",
    "compress",
    # Delivery
    "DeliveryQueue",
    "Notifier",
    "NotificationChannel",
    "DiscordChannel",
    # Models
    "CompressedArtifact",
    "DeliveryResult",
    "DeliveryStatus",
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
__version__ = "0.1.0"
