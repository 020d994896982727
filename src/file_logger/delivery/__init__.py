"""
投递模块

- 投递队列（就绪前缓冲、就绪后 FIFO 排空）
- 产物通知器（元数据消息 + 附件）
- 通知渠道（Discord）
"""

from file_logger.delivery.backoff import BackoffConfig, ExponentialBackoff
from file_logger.delivery.channels import DiscordChannel, NotificationChannel
from file_logger.delivery.notifier import Notifier
from file_logger.delivery.queue import DeliveryQueue

__all__ = [
    "BackoffConfig",
    "ExponentialBackoff",
    "NotificationChannel",
    "DiscordChannel",
    "Notifier",
    "DeliveryQueue",
]
