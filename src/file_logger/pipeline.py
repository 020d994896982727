"""
日志管道

串联 捕获 -> 格式化 -> 追加写入（持续）
以及 轮转 -> 压缩 -> 投递队列 -> 通知（按需）。
"""

import contextlib
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from file_logger.common.logging import setup_logging
from file_logger.config import FileLoggerConfig
from file_logger.delivery.channels.base import NotificationChannel
from file_logger.delivery.channels.discord import DiscordChannel
from file_logger.delivery.notifier import Notifier
from file_logger.delivery.queue import DeliveryQueue
from file_logger.domain.errors import AppendError, CompressionError, RotationError
from file_logger.domain.models import DeliveryResult, RotationResult
from file_logger.logs.appender import LogAppender
from file_logger.logs.capture import CaptureHooks, ConsoleSink, LogFacade
from file_logger.logs.compressor import compress
from file_logger.logs.rotator import LogRotator
from file_logger.utils.time import format_duration, now_ms


class LogPipeline:
    """
    日志管道

    组件按依赖顺序构建，外部只需调用 start()/stop()/set_ready()。
    """

    def __init__(
        self,
        config: FileLoggerConfig,
        channel: NotificationChannel | None = None,
        on_fatal: Callable[[AppendError], None] | None = None,
        stdout=None,
        stderr=None,
    ):
        """
        初始化日志管道

        Args:
            config: 管道配置
            channel: 通知渠道，为空时按配置创建 DiscordChannel
            on_fatal: 日志写入失败的处理函数
            stdout: 控制台 stdout（默认 sys.stdout）
            stderr: 控制台 stderr（默认 sys.stderr）
        """
        self.config = config

        self.appender = LogAppender(config.log_file, encoding=config.encoding)

        sinks = [ConsoleSink(stdout=stdout, stderr=stderr)] if config.echo_console else []
        self.facade = LogFacade(sinks=sinks, on_fatal=on_fatal)
        self.hooks = CaptureHooks(
            self.facade,
            self.appender,
            max_depth=config.max_depth,
            capture_loguru=config.capture_loguru,
            loguru_level=config.capture_level,
        )

        self.channel = channel or DiscordChannel.from_config(config)
        self.notifier = Notifier(
            self.channel,
            title=config.embed_title,
            color=config.embed_color,
            source_id=config.source_id,
        )
        self.queue = DeliveryQueue(
            self.notifier,
            max_attempts=config.max_retries,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            max_queue_size=config.max_queue_size,
        )
        self.rotator = LogRotator(
            self.appender,
            max_archives=config.max_archives,
            on_archived=self.ship,
        )

        self._started = False
        self._diagnostics_handler: int | None = None

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """启动管道：安装捕获钩子、挂载时轮转、启动定时轮转、排空已就绪的队列"""
        if self._started:
            return

        if self.config.diagnostics_level:
            self._diagnostics_handler = setup_logging(
                level=self.config.diagnostics_level,
                replace=False,
            )

        self.hooks.install()
        try:
            if self.config.rotate_on_mount:
                await self._rotate_on_mount()
            await self.rotator.start(self.config.rotate_interval)
            await self.queue.drain()
        except Exception:
            await self.rotator.stop()
            self.hooks.uninstall()
            self._remove_diagnostics()
            raise

        self._started = True
        logger.info(f"[pipeline] 日志管道已启动: {self.appender.path}")

    async def stop(self) -> None:
        """停止管道：停止轮转、等待在途投递、卸载钩子、关闭渠道"""
        if not self._started:
            return

        await self.rotator.stop()
        await self.rotator.wait_pending()
        await self.hooks.complete()
        self.hooks.uninstall()
        await self.channel.close()

        self._started = False
        logger.info("[pipeline] 日志管道已停止")
        self._remove_diagnostics()

    async def _rotate_on_mount(self) -> None:
        """挂载时轮转，重命名失败只记录不中断启动"""
        try:
            await self.rotate()
        except RotationError as e:
            logger.error(f"[pipeline] 挂载时轮转失败: {e.message}")

    def _remove_diagnostics(self) -> None:
        if self._diagnostics_handler is None:
            return
        with contextlib.suppress(ValueError):
            logger.remove(self._diagnostics_handler)
        self._diagnostics_handler = None

    async def set_ready(self) -> list[DeliveryResult]:
        """通道就绪，排空投递队列"""
        return await self.queue.set_ready()

    async def rotate(self) -> RotationResult:
        """手动触发轮转"""
        return await self.rotator.rotate()

    async def ship(self, archive_path: Path) -> DeliveryResult | None:
        """
        压缩并投递一个归档

        Returns:
            投递结果；压缩失败时为 None
        """
        start = now_ms()
        try:
            artifact = await compress(archive_path, level=self.config.compression_level)
        except CompressionError as e:
            logger.error(f"[pipeline] 压缩归档失败: {e.message}")
            return None

        result = await self.queue.notify(artifact.name, artifact.data)
        logger.debug(
            f"[pipeline] 归档处理完成: {artifact.name}, "
            f"status={result.status.value}, 耗时={format_duration(now_ms() - start)}"
        )
        return result

    async def wait_idle(self) -> None:
        """等待所有后台归档处理完成"""
        await self.rotator.wait_pending()

    async def log(self, *values: Any) -> None:
        await self.facade.log(*values)

    async def error(self, *values: Any) -> None:
        await self.facade.error(*values)

    async def report_exception(self, exc: BaseException, *context: Any) -> None:
        await self.facade.report_exception(exc, *context)

    def error_boundary(self):
        """顶层错误边界，见 CaptureHooks.error_boundary"""
        return self.hooks.error_boundary()

    def get_stats(self) -> dict:
        """获取统计信息"""
        return {
            "started": self._started,
            "capture_installed": self.hooks.installed,
            "appender": self.appender.get_stats(),
            "rotator": self.rotator.get_stats(),
            "delivery": self.queue.get_stats(),
        }
