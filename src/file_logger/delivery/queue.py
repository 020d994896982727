"""
投递队列

通道就绪前缓冲压缩产物，就绪后严格按 FIFO 顺序逐个投递。

策略:
1. 未就绪时 notify() 入队后立即返回
2. set_ready() 翻转就绪标志并排空队列
3. 所有投递经同一把锁串行执行，保证顺序
4. 单个条目失败时指数退避重试，重试耗尽后丢弃并上报
5. 配置了 max_queue_size 时，溢出丢弃最旧条目
"""

import asyncio
import time
from collections import deque

from loguru import logger

from file_logger.delivery.backoff import BackoffConfig, ExponentialBackoff
from file_logger.delivery.notifier import Notifier
from file_logger.domain.enums import DeliveryStatus
from file_logger.domain.errors import DeliveryError, InvalidArgumentError
from file_logger.domain.models import DeliveryEntry, DeliveryResult
from file_logger.utils.time import format_duration


class DeliveryQueue:
    """投递队列"""

    def __init__(
        self,
        notifier: Notifier,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        max_queue_size: int = 0,
    ):
        """
        初始化投递队列

        Args:
            notifier: 产物通知器
            max_attempts: 每个条目的最大尝试次数
            base_delay: 首次重试等待（秒）
            max_delay: 重试等待上限（秒）
            max_queue_size: 队列上限，0 表示不限
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self._notifier = notifier
        self._backoff_config = BackoffConfig(
            base_delay=base_delay,
            max_delay=max_delay,
            max_retries=max_attempts - 1,
        )
        self._max_queue_size = max_queue_size

        self._queue: deque[DeliveryEntry] = deque()
        self._ready = False
        self._send_lock = asyncio.Lock()

        # 统计
        self._delivered = 0
        self._failed = 0
        self._dropped = 0

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def pending(self) -> int:
        return len(self._queue)

    def pending_names(self) -> list[str]:
        return [entry.artifact_name for entry in self._queue]

    async def notify(self, artifact_name: str, data: bytes) -> DeliveryResult:
        """
        投递或入队

        Args:
            artifact_name: 产物文件名
            data: 产物数据

        Returns:
            QUEUED（未就绪）、DELIVERED 或 FAILED

        Raises:
            InvalidArgumentError: 名称为空或数据为 None
        """
        if not artifact_name:
            raise InvalidArgumentError("artifact_name 不能为空", argument="artifact_name")
        if data is None:
            raise InvalidArgumentError("data 不能为 None", argument="data")

        entry = DeliveryEntry(artifact_name=artifact_name, data=bytes(data))

        if not self._ready:
            self._enqueue(entry)
            return DeliveryResult(artifact_name, DeliveryStatus.QUEUED)

        async with self._send_lock:
            return await self._deliver(entry)

    async def set_ready(self) -> list[DeliveryResult]:
        """标记通道就绪并排空队列"""
        if not self._ready:
            self._ready = True
            logger.info(f"[delivery] 通道已就绪，待投递 {len(self._queue)} 个")
        return await self.drain()

    async def drain(self) -> list[DeliveryResult]:
        """按 FIFO 顺序排空队列（仅在就绪后执行）"""
        results: list[DeliveryResult] = []
        if not self._ready:
            return results

        async with self._send_lock:
            while self._queue:
                entry = self._queue[0]
                waited = format_duration((time.time() - entry.enqueued_at) * 1000)
                logger.debug(f"[delivery] 开始投递: {entry.artifact_name} (排队 {waited})")
                result = await self._deliver(entry)
                # 投递完成或放弃后才出队
                if self._queue and self._queue[0] is entry:
                    self._queue.popleft()
                results.append(result)
        return results

    def _enqueue(self, entry: DeliveryEntry) -> None:
        if self._max_queue_size and len(self._queue) >= self._max_queue_size:
            dropped = self._queue.popleft()
            self._dropped += 1
            logger.warning(f"[delivery] 队列已满，丢弃最旧产物: {dropped.artifact_name}")

        self._queue.append(entry)
        logger.debug(f"[delivery] 通道未就绪，已入队: {entry.artifact_name} (队列={len(self._queue)})")

    async def _deliver(self, entry: DeliveryEntry) -> DeliveryResult:
        """投递单个条目（带有界重试）"""
        backoff = ExponentialBackoff(self._backoff_config)
        last_error: DeliveryError | None = None

        while True:
            entry.attempts += 1
            try:
                await self._notifier.deliver(entry.artifact_name, entry.data)
                self._delivered += 1
                return DeliveryResult(
                    entry.artifact_name,
                    DeliveryStatus.DELIVERED,
                    attempts=entry.attempts,
                )
            except DeliveryError as e:
                last_error = e

            if not backoff.should_retry():
                break

            retry_after = float(last_error.details.get("retry_after") or 0)
            logger.warning(
                f"[delivery] 投递 {entry.artifact_name} 失败 (attempt {entry.attempts}): "
                f"{last_error.message}, 准备重试"
            )
            await backoff.wait(minimum=retry_after)

        self._failed += 1
        logger.error(
            f"[delivery] 投递 {entry.artifact_name} 失败，已放弃 "
            f"(attempts={entry.attempts}): {last_error.message}"
        )
        return DeliveryResult(
            entry.artifact_name,
            DeliveryStatus.FAILED,
            attempts=entry.attempts,
            error=last_error.message,
        )

    def get_stats(self) -> dict:
        """获取统计信息"""
        return {
            "ready": self._ready,
            "pending": len(self._queue),
            "delivered": self._delivered,
            "failed": self._failed,
            "dropped": self._dropped,
        }
