"""
日志管道枚举定义
"""

from enum import Enum


class RotatorState(str, Enum):
    """轮转器状态"""

    IDLE = "idle"                # 空闲
    ROTATING = "rotating"        # 轮转中


class DeliveryStatus(str, Enum):
    """投递状态"""

    QUEUED = "queued"            # 通道未就绪，已入队
    DELIVERED = "delivered"      # 投递成功
    FAILED = "failed"            # 重试耗尽，已丢弃


class ConsoleStream(str, Enum):
    """控制台输出流"""

    STDOUT = "stdout"
    STDERR = "stderr"
