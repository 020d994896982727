"""
插件

宿主插件生命周期适配。
"""

from file_logger.plugins.base import PluginBase
from file_logger.plugins.file_logger import FileLoggerPlugin

__all__ = ["PluginBase", "FileLoggerPlugin"]
