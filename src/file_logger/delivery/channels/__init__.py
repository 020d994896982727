"""通知渠道"""

from file_logger.delivery.channels.base import NotificationChannel
from file_logger.delivery.channels.discord import DiscordChannel

__all__ = ["NotificationChannel", "DiscordChannel"]
