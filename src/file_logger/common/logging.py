"""日志配置模块

提供管道自身诊断日志（verbose 通道）的初始化和敏感信息脱敏。
"""

import re
import sys
from typing import Any

from loguru import logger

# 日志格式
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# 敏感字段模式（用于脱敏）
SENSITIVE_PATTERNS = [
    # 授权头
    (
        re.compile(
            r'(Authorization)["\']?\s*[:=]\s*["\']?(Bot\s+|Bearer\s+)?([a-zA-Z0-9_\-\.]{20,})["\']?',
            re.IGNORECASE,
        ),
        r"\1=***REDACTED***",
    ),
    # 令牌
    (
        re.compile(
            r'(token|bot_token)["\']?\s*[:=]\s*["\']?([a-zA-Z0-9_\-\.]{20,})["\']?',
            re.IGNORECASE,
        ),
        r"\1=***REDACTED***",
    ),
    # Webhook URL 中的令牌
    (
        re.compile(r"(/webhooks/\d+/)([a-zA-Z0-9_\-]+)"),
        r"\1***",
    ),
]


def sanitize_log_message(message: str) -> str:
    """对日志消息进行敏感信息脱敏"""
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    return sanitized


class SanitizingFilter:
    """日志脱敏过滤器"""

    def __call__(self, record: dict[str, Any]) -> bool:
        if "message" in record:
            record["message"] = sanitize_log_message(record["message"])
        return True


def setup_logging(level: str = "INFO", colorize: bool = True, replace: bool = True) -> int:
    """初始化诊断日志，包含敏感信息脱敏

    Args:
        level: 日志级别
        replace: 是否先移除已有的 sink（嵌入宿主时传 False）

    Returns:
        控制台 sink 的 handler id
    """
    if replace:
        logger.remove()

    handler_id = logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=colorize,
        filter=SanitizingFilter(),
    )

    logger.debug(f"诊断日志初始化完成: level={level}, sanitize=True")
    return handler_id
