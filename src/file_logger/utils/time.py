"""
时间工具
"""

import time
from datetime import UTC, datetime


def now_ms() -> int:
    """当前时间戳（毫秒）"""
    return int(time.time() * 1000)


def now_iso() -> str:
    """当前时间 ISO 格式（UTC，毫秒精度，Z 结尾）"""
    return to_iso(datetime.now(UTC))


def to_iso(dt: datetime) -> str:
    """格式化为 ISO-8601，例如 2026-10-18T08:30:01.123Z"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def filesystem_timestamp(dt: datetime | None = None) -> str:
    """文件名安全的时间戳（':' 和 '.' 替换为 '-'）"""
    iso = to_iso(dt or datetime.now(UTC))
    return iso.replace(":", "-").replace(".", "-")


def format_duration(ms: float) -> str:
    """格式化持续时间"""
    if ms < 1000:
        return f"{ms:.0f}ms"
    elif ms < 60000:
        return f"{ms/1000:.1f}s"
    elif ms < 3600000:
        return f"{ms/60000:.1f}m"
    else:
        return f"{ms/3600000:.1f}h"
