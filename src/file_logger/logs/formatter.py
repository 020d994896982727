"""
日志格式化器

将任意数量、任意类型的值渲染为一行确定性文本：
- 字符串去除 ANSI 颜色码后原样输出
- 其他值渲染为有深度限制、可检测循环引用的 JSON 结构
- 换行符转义为 \\n，一条日志只占一行
- 单个值渲染失败只替换该值，整行永不抛错
"""

import dataclasses
import math
import re
import traceback
from collections import deque
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from pathlib import PurePath
from typing import Any

from file_logger.utils.json import dumps

CIRCULAR_MARKER = "[Circular]"
OBJECT_MARKER = "[Object]"
ARRAY_MARKER = "[Array]"
UNRENDERABLE_MARKER = "[Unrenderable]"

DEFAULT_MAX_DEPTH = 4

# CSI 序列（颜色、光标控制等）和 OSC 序列
ANSI_PATTERN = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")

_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 64 - 1


def strip_ansi(text: str) -> str:
    """去除 ANSI 转义序列"""
    return ANSI_PATTERN.sub("", text)


def format_values(*values: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    将多个值格式化为一行

    Args:
        values: 任意值
        max_depth: 嵌套结构最大渲染深度

    Returns:
        以单个空格连接的渲染结果
    """
    tokens = []
    for value in values:
        try:
            tokens.append(render_value(value, max_depth=max_depth))
        except Exception:
            tokens.append(UNRENDERABLE_MARKER)
    return " ".join(tokens)


def render_value(value: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """渲染单个值（结果不含换行）"""
    if isinstance(value, str):
        return escape_line_breaks(strip_ansi(value))

    tree = _to_tree(value, 0, max_depth, set())
    if isinstance(tree, str):
        return escape_line_breaks(tree)
    return dumps(tree)


def escape_line_breaks(text: str) -> str:
    """转义换行，保证一条日志只占一行"""
    return text.replace("\r", "\\r").replace("\n", "\\n")


def format_exception(exc: BaseException) -> str:
    """格式化异常及其堆栈"""
    text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return strip_ansi(text.rstrip())


def _render_exception(exc: BaseException) -> str:
    message = strip_ansi(str(exc))
    name = type(exc).__name__
    return f"{name}: {message}" if message else name


def _to_tree(value: Any, depth: int, max_depth: int, ancestors: set[int]) -> Any:
    """转换为可 JSON 序列化的结构"""
    if value is None or isinstance(value, bool):
        return value

    if isinstance(value, int):
        if _INT_MIN <= value <= _INT_MAX:
            return value
        return str(value)

    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)

    if isinstance(value, str):
        return strip_ansi(value)

    if isinstance(value, (bytes, bytearray)):
        return strip_ansi(bytes(value).decode("utf-8", errors="replace"))

    if isinstance(value, BaseException):
        return _render_exception(value)

    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    if isinstance(value, Enum):
        return _to_tree(value.value, depth, max_depth, ancestors)

    if isinstance(value, PurePath):
        return str(value)

    ident = id(value)
    if ident in ancestors:
        return CIRCULAR_MARKER

    if isinstance(value, Mapping):
        if depth >= max_depth:
            return OBJECT_MARKER
        return _walk_mapping(value.items(), depth, max_depth, ancestors, ident)

    if isinstance(value, (list, tuple, deque)):
        if depth >= max_depth:
            return ARRAY_MARKER
        return _walk_sequence(list(value), depth, max_depth, ancestors, ident)

    if isinstance(value, (set, frozenset)):
        if depth >= max_depth:
            return ARRAY_MARKER
        return _walk_sequence(sorted(value, key=repr), depth, max_depth, ancestors, ident)

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if depth >= max_depth:
            return OBJECT_MARKER
        items = ((f.name, getattr(value, f.name)) for f in dataclasses.fields(value))
        return _walk_mapping(items, depth, max_depth, ancestors, ident)

    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict) and attrs and not isinstance(value, type):
        if depth >= max_depth:
            return OBJECT_MARKER
        return _walk_mapping(attrs.items(), depth, max_depth, ancestors, ident)

    return strip_ansi(str(value))


def _walk_mapping(items, depth: int, max_depth: int, ancestors: set[int], ident: int) -> dict:
    ancestors.add(ident)
    try:
        return {
            strip_ansi(str(key)): _to_tree(item, depth + 1, max_depth, ancestors)
            for key, item in items
        }
    finally:
        ancestors.discard(ident)


def _walk_sequence(items: list, depth: int, max_depth: int, ancestors: set[int], ident: int) -> list:
    ancestors.add(ident)
    try:
        return [_to_tree(item, depth + 1, max_depth, ancestors) for item in items]
    finally:
        ancestors.discard(ident)
