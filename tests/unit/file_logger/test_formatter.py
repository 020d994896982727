"""
日志格式化器单元测试
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from file_logger.logs.formatter import (
    ARRAY_MARKER,
    CIRCULAR_MARKER,
    OBJECT_MARKER,
    UNRENDERABLE_MARKER,
    format_exception,
    format_values,
    render_value,
    strip_ansi,
)


class _Broken:
    __slots__ = ()

    def __str__(self):
        raise RuntimeError("cannot render")


class _Color(Enum):
    RED = "red"


@dataclass
class _Player:
    name: str
    score: int


class TestStripAnsi:
    """ANSI 去除测试"""

    def test_strip_color_codes(self):
        """测试去除颜色码"""
        assert strip_ansi("\u001b[31mhello\u001b[0m") == "hello"

    def test_plain_text_untouched(self):
        """测试普通文本不变"""
        assert strip_ansi("plain [text]") == "plain [text]"


class TestFormatValues:
    """多值格式化测试"""

    def test_strings_joined_by_space(self):
        """测试字符串以空格连接"""
        assert format_values("server", "started") == "server started"

    def test_ansi_stripped_from_string(self):
        """测试字符串去除 ANSI"""
        assert format_values("\u001b[31mhello\u001b[0m") == "hello"

    def test_mixed_values(self):
        """测试混合类型"""
        line = format_values("players", 42, {"map": "Narva"}, [1, 2], None, True)
        assert line == 'players 42 {"map":"Narva"} [1,2] null true'

    def test_empty_values(self):
        """测试无参数"""
        assert format_values() == ""

    def test_cycle_marker(self):
        """测试循环引用标记"""
        obj = {"name": "x"}
        obj["self"] = obj

        assert format_values(obj) == '{"name":"x","self":"[Circular]"}'
        assert CIRCULAR_MARKER in format_values(obj)

    def test_list_cycle_marker(self):
        """测试列表循环引用"""
        items = [1]
        items.append(items)

        assert format_values(items) == '[1,"[Circular]"]'

    def test_shared_reference_not_circular(self):
        """测试共享引用不算循环"""
        shared = [1]
        assert format_values({"a": shared, "b": shared}) == '{"a":[1],"b":[1]}'

    def test_depth_limit(self):
        """测试深度限制"""
        nested = {"a": {"b": {"c": {"d": {"e": 1}}}}}
        assert format_values(nested) == '{"a":{"b":{"c":{"d":"[Object]"}}}}'

        nested_list = [[[[[1]]]]]
        assert format_values(nested_list) == f'[[[["{ARRAY_MARKER}"]]]]'

    def test_custom_depth(self):
        """测试自定义深度"""
        assert format_values({"a": {"b": 1}}, max_depth=1) == f'{{"a":"{OBJECT_MARKER}"}}'

    def test_unrenderable_value_replaced(self):
        """测试单个值渲染失败只替换该值"""
        assert format_values("a", _Broken(), "b") == f"a {UNRENDERABLE_MARKER} b"

    def test_exception_value(self):
        """测试异常值"""
        assert format_values(ValueError("bad input")) == "ValueError: bad input"

    def test_nested_exception(self):
        """测试嵌套在结构中的异常"""
        assert format_values({"error": KeyError("k")}) == "{\"error\":\"KeyError: 'k'\"}"

    def test_dataclass_enum_path(self):
        """测试数据类、枚举和路径"""
        assert format_values(_Player("alice", 3)) == '{"name":"alice","score":3}'
        assert format_values(_Color.RED) == "red"
        assert format_values(PurePosixPath("/var/log/x.log")) == "/var/log/x.log"

    def test_non_finite_float(self):
        """测试非有限浮点数"""
        assert format_values(float("nan"), float("inf")) == "nan inf"

    def test_huge_int(self):
        """测试超范围整数"""
        assert format_values(2 ** 80) == str(2 ** 80)

    def test_line_breaks_escaped(self):
        """测试换行被转义，一条日志只占一行"""
        assert format_values("a\nb", "c") == "a\\nb c"
        assert format_values("windows\r\nline") == "windows\\r\\nline"
        assert "\n" not in format_values(ValueError("first\nsecond"))

    def test_traceback_single_line(self):
        """测试堆栈作为日志值时只占一行"""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            line = format_values("[ERROR]", format_exception(e))

        assert "\n" not in line
        assert line.startswith("[ERROR] Traceback (most recent call last):\\n")
        assert line.endswith("RuntimeError: boom")

    def test_deterministic(self):
        """测试输出确定"""
        value = {"b": {1, 3, 2}, "a": (1, "x")}
        assert format_values(value) == format_values(value)


class TestRenderValue:
    """单值渲染测试"""

    def test_object_with_attributes(self):
        """测试普通对象按属性渲染"""

        class Server:
            def __init__(self):
                self.host = "127.0.0.1"
                self.port = 7787

        assert render_value(Server()) == '{"host":"127.0.0.1","port":7787}'

    def test_bytes(self):
        """测试字节串"""
        assert render_value(b"raw") == "raw"


class TestFormatException:
    """异常格式化测试"""

    def test_traceback_included(self):
        """测试包含堆栈"""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            text = format_exception(e)

        assert text.startswith("Traceback")
        assert text.endswith("RuntimeError: boom")
