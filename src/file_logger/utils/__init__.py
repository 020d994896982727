"""
工具模块
"""

from file_logger.utils.time import filesystem_timestamp, format_duration, now_iso, now_ms, to_iso

__all__ = [
    "filesystem_timestamp",
    "format_duration",
    "now_iso",
    "now_ms",
    "to_iso",
]
