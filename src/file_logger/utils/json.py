"""
JSON 工具
"""

from typing import Any

import ujson


def dumps(obj: Any, **kwargs) -> str:
    """JSON 序列化（保留非 ASCII 字符，不转义 '/'）"""
    kwargs.setdefault("ensure_ascii", False)
    kwargs.setdefault("escape_forward_slashes", False)
    return ujson.dumps(obj, **kwargs)


def loads(s: str | bytes) -> Any:
    """JSON 反序列化"""
    return ujson.loads(s)
