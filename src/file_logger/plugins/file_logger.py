"""
文件日志插件

把日志管道接入宿主生命周期。
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from file_logger.config import FileLoggerConfig
from file_logger.delivery.channels.base import NotificationChannel
from file_logger.domain.models import DeliveryResult
from file_logger.pipeline import LogPipeline
from file_logger.plugins.base import PluginBase


class FileLoggerPlugin(PluginBase):
    """
    文件日志插件

    mount()：安装捕获、挂载时轮转、启动定时轮转
    unmount()：停止轮转、等待在途投递、卸载捕获
    """

    description = "Persists console output to a rotating log file and ships archives to a channel."
    default_enabled = True
    options_specification = {
        "channelID": {
            "required": True,
            "description": "The ID of the channel to send log messages to.",
            "default": "",
            "example": "667741905228136459",
        },
        "logPath": {
            "required": False,
            "description": "Path of the active log file.",
            "default": "squadjs-logs/squadjs.log",
        },
        "maxLogFiles": {
            "required": False,
            "description": "Number of rotated log files to keep.",
            "default": 10,
        },
        "rotateInterval": {
            "required": False,
            "description": "Seconds between scheduled rotations, 0 to rotate only on mount.",
            "default": 0,
        },
    }

    def __init__(
        self,
        options: Mapping[str, Any] | FileLoggerConfig | None = None,
        channel: NotificationChannel | None = None,
        **pipeline_kwargs: Any,
    ):
        if isinstance(options, FileLoggerConfig):
            self.config = options
        else:
            self.config = FileLoggerConfig.from_options(options)
        self.pipeline = LogPipeline(self.config, channel=channel, **pipeline_kwargs)

    @property
    def name(self) -> str:
        return "FileLogger"

    @property
    def mounted(self) -> bool:
        return self.pipeline.started

    async def mount(self) -> None:
        await self.pipeline.start()
        logger.info(f"[{self.name}] Mounted")

    async def unmount(self) -> None:
        await self.pipeline.stop()
        logger.info(f"[{self.name}] Unmounted")

    async def set_ready(self) -> list[DeliveryResult]:
        """宿主在通道连接建立后调用"""
        return await self.pipeline.set_ready()
