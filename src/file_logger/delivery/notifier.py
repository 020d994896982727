"""
产物通知器

先发送一条元数据消息（标题、颜色、时间、来源），再发送压缩附件。
"""

from typing import Any

from loguru import logger

from file_logger.delivery.channels.base import NotificationChannel
from file_logger.domain.errors import DeliveryError
from file_logger.utils.time import now_iso


class Notifier:
    """产物通知器"""

    def __init__(
        self,
        channel: NotificationChannel,
        title: str = "Log file rotated",
        color: int = 0x3498DB,
        source_id: str = "file-logger",
    ):
        self._channel = channel
        self._title = title
        self._color = color
        self._source_id = source_id

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    def build_embed(self, artifact_name: str, size_bytes: int) -> dict[str, Any]:
        """构建元数据消息"""
        return {
            "title": self._title,
            "description": f"`{artifact_name}` ({size_bytes} bytes)",
            "color": self._color,
            "timestamp": now_iso(),
            "footer": {"text": self._source_id},
        }

    async def deliver(self, artifact_name: str, data: bytes) -> None:
        """
        投递一个产物

        Raises:
            DeliveryError: 任一发送步骤失败
        """
        embed = self.build_embed(artifact_name, len(data))
        try:
            await self._channel.send_message(embed)
            await self._channel.send_file(artifact_name, data)
        except DeliveryError:
            raise
        except Exception as e:
            raise DeliveryError(
                f"[{self._channel.channel_name}] 投递异常: {e}",
                artifact_name=artifact_name,
            ) from e

        logger.info(f"[{self._channel.channel_name}] 日志已投递: {artifact_name} ({len(data)} bytes)")
