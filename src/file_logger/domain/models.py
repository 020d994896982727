"""
日志管道数据模型
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from file_logger.domain.enums import DeliveryStatus


@dataclass(frozen=True)
class CompressedArtifact:
    """
    压缩产物

    只存在于内存中，由 Notifier 消费一次或进入投递队列。
    """
    name: str
    data: bytes
    source_path: str = ""
    original_size: int = 0

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def ratio(self) -> float:
        if not self.original_size:
            return 0.0
        return self.size_bytes / self.original_size


@dataclass
class DeliveryEntry:
    """投递队列条目"""
    artifact_name: str
    data: bytes
    enqueued_at: float = field(default_factory=time.time)
    attempts: int = 0


@dataclass
class DeliveryResult:
    """投递结果"""
    artifact_name: str
    status: DeliveryStatus
    attempts: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status == DeliveryStatus.DELIVERED

    def to_dict(self) -> dict[str, Any]:
        return {
            "artifact_name": self.artifact_name,
            "status": self.status.value,
            "attempts": self.attempts,
            "error": self.error,
        }


@dataclass
class RotationResult:
    """轮转结果"""
    archive_path: Path | None = None
    deleted: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def rotated(self) -> bool:
        return self.archive_path is not None
