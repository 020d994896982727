"""
日志模块

提供完整的本地日志链路：
- 格式化任意值为一行文本
- 追加写入活动日志文件
- 门面与捕获钩子
- 轮转与保留清理
- gzip 压缩
"""

from file_logger.logs.appender import LogAppender
from file_logger.logs.capture import CaptureHooks, ConsoleSink, FileSink, LogFacade, OutputSink
from file_logger.logs.compressor import compress
from file_logger.logs.formatter import format_exception, format_values, render_value, strip_ansi
from file_logger.logs.rotator import LogRotator, select_evictions, sort_archives

__all__ = [
    # Formatter
    "format_values",
    "format_exception",
    "render_value",
    "strip_ansi",
    # Appender
    "LogAppender",
    # Capture
    "LogFacade",
    "CaptureHooks",
    "ConsoleSink",
    "FileSink",
    "OutputSink",
    # Rotator
    "LogRotator",
    "select_evictions",
    "sort_archives",
    # Compressor
    "compress",
]
