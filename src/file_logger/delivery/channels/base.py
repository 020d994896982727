"""通知渠道基类"""

from abc import ABC, abstractmethod
from typing import Any


class NotificationChannel(ABC):
    """
    通知渠道抽象基类

    日志管道只依赖两个发送原语：元数据消息和二进制附件。
    发送失败时抛出 DeliveryError。
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """渠道名称"""
        pass

    @abstractmethod
    async def send_message(self, embed: dict[str, Any]) -> None:
        """发送元数据消息"""
        pass

    @abstractmethod
    async def send_file(self, file_name: str, data: bytes) -> None:
        """发送附件"""
        pass

    async def close(self) -> None:
        """释放连接资源"""
        return None
