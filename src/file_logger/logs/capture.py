"""
控制台输出捕获

不修改任何进程级内置对象，而是提供显式的日志门面（LogFacade）：
- 调用方通过门面输出日志，门面分发到多个 sink（控制台/文件）
- CaptureHooks 负责安装/卸载文件 sink 和 loguru sink，二者严格对称
- error_boundary 作为宿主入口的顶层错误边界，转发未捕获异常
"""

import asyncio
import contextlib
import sys
from collections.abc import AsyncIterator, Callable
from typing import Any, Protocol

from loguru import logger

from file_logger.domain.enums import ConsoleStream
from file_logger.domain.errors import AppendError
from file_logger.logs.appender import LogAppender
from file_logger.logs.formatter import DEFAULT_MAX_DEPTH, format_exception, format_values

ERROR_TAG = "[ERROR]"

# 本包自身的诊断日志不回写用户日志文件
_PACKAGE = "file_logger"


class OutputSink(Protocol):
    """输出接收器协议"""

    async def emit(self, stream: ConsoleStream, values: tuple[Any, ...]) -> None:
        """输出一组值"""
        ...


class ConsoleSink:
    """
    控制台接收器

    保持原始控制台行为：值原样打印到 stdout/stderr。
    """

    def __init__(self, stdout=None, stderr=None):
        self._stdout = stdout
        self._stderr = stderr

    async def emit(self, stream: ConsoleStream, values: tuple[Any, ...]) -> None:
        if stream == ConsoleStream.STDERR:
            target = self._stderr or sys.stderr
        else:
            target = self._stdout or sys.stdout
        print(*values, file=target, flush=True)


class FileSink:
    """
    文件接收器

    格式化后追加到活动日志文件，stderr 的内容加 [ERROR] 标记。
    """

    def __init__(self, appender: LogAppender, max_depth: int = DEFAULT_MAX_DEPTH):
        self._appender = appender
        self._max_depth = max_depth

    def submit(self, stream: ConsoleStream, values: tuple[Any, ...]) -> asyncio.Future:
        """格式化并同步入队，返回写入结果"""
        if stream == ConsoleStream.STDERR:
            values = (ERROR_TAG, *values)
        line = format_values(*values, max_depth=self._max_depth)
        return self._appender.submit(line)

    async def emit(self, stream: ConsoleStream, values: tuple[Any, ...]) -> None:
        await self.submit(stream, values)

    async def flush(self) -> None:
        await self._appender.flush()


class LogFacade:
    """
    日志门面

    宿主显式使用的日志接口，替代对全局 console 的替换。
    """

    def __init__(
        self,
        sinks: list[OutputSink] | None = None,
        on_fatal: Callable[[AppendError], None] | None = None,
    ):
        """
        初始化日志门面

        Args:
            sinks: 初始接收器列表（按顺序分发）
            on_fatal: 文件写入失败时的处理函数；为空时异常向调用方传播
        """
        self._sinks: list[OutputSink] = list(sinks or [])
        self._on_fatal = on_fatal

    @property
    def sinks(self) -> list[OutputSink]:
        return list(self._sinks)

    def add_sink(self, sink: OutputSink) -> None:
        """添加接收器"""
        if sink not in self._sinks:
            self._sinks.append(sink)

    def remove_sink(self, sink: OutputSink) -> None:
        """移除接收器"""
        if sink in self._sinks:
            self._sinks.remove(sink)

    async def log(self, *values: Any) -> None:
        """普通输出"""
        await self._dispatch(ConsoleStream.STDOUT, values)

    async def error(self, *values: Any) -> None:
        """错误输出"""
        await self._dispatch(ConsoleStream.STDERR, values)

    async def report_exception(self, exc: BaseException, *context: Any) -> None:
        """上报异常（含堆栈）"""
        await self.error(*context, format_exception(exc))

    def handle_fatal(self, error: AppendError) -> None:
        """处理致命写入错误"""
        if self._on_fatal is None:
            raise error
        self._on_fatal(error)

    async def _dispatch(self, stream: ConsoleStream, values: tuple[Any, ...]) -> None:
        for sink in list(self._sinks):
            try:
                await sink.emit(stream, values)
            except AppendError as e:
                self.handle_fatal(e)
            except Exception as e:
                logger.error(f"[capture] 输出到 sink 失败: {e}")


class CaptureHooks:
    """
    捕获钩子

    install() 将文件 sink 挂到门面上，并在 loguru 上注册一个同步 sink，
    使宿主通过 loguru 输出的日志同样落盘。uninstall() 完整撤销两者。
    """

    def __init__(
        self,
        facade: LogFacade,
        appender: LogAppender,
        max_depth: int = DEFAULT_MAX_DEPTH,
        capture_loguru: bool = True,
        loguru_level: str | int = "INFO",
    ):
        self._facade = facade
        self._file_sink = FileSink(appender, max_depth=max_depth)
        self._capture_loguru = capture_loguru
        self._loguru_level = loguru_level
        self._handler_id: int | None = None
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def facade(self) -> LogFacade:
        return self._facade

    def install(self) -> None:
        """安装捕获（幂等）"""
        if self._installed:
            return

        self._facade.add_sink(self._file_sink)
        if self._capture_loguru:
            self._handler_id = logger.add(
                self._loguru_sink,
                level=self._loguru_level,
                format="{message}",
                filter=self._loguru_filter,
                catch=True,
            )
        self._installed = True
        logger.debug("[capture] 捕获钩子已安装")

    def uninstall(self) -> None:
        """卸载捕获，恢复原始行为"""
        if not self._installed:
            return

        self._facade.remove_sink(self._file_sink)
        if self._handler_id is not None:
            with contextlib.suppress(ValueError):
                logger.remove(self._handler_id)
            self._handler_id = None
        self._installed = False
        logger.debug("[capture] 捕获钩子已卸载")

    @contextlib.asynccontextmanager
    async def error_boundary(self) -> AsyncIterator[None]:
        """
        顶层错误边界

        未捕获的异常先以 [ERROR] 标记写入日志，再原样抛出。
        """
        try:
            yield
        except Exception as e:
            await self._facade.report_exception(e)
            raise

    async def complete(self) -> None:
        """等待已提交的日志全部落盘"""
        await self._file_sink.flush()

    @staticmethod
    def _loguru_filter(record: dict[str, Any]) -> bool:
        name = record.get("name") or ""
        return name.split(".", 1)[0] != _PACKAGE

    def _loguru_sink(self, message) -> None:
        """
        loguru 同步 sink

        在调用时同步入队，保证与门面输出的相对顺序。
        事件循环之外产生的记录不落盘。
        """
        record = message.record
        stream = ConsoleStream.STDERR if record["level"].no >= 40 else ConsoleStream.STDOUT

        values: tuple[Any, ...] = (record["message"],)
        exception = record["exception"]
        if exception is not None and exception.value is not None:
            values = (*values, format_exception(exception.value))

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return

        future = self._file_sink.submit(stream, values)
        future.add_done_callback(self._on_loguru_written)

    def _on_loguru_written(self, future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if isinstance(error, AppendError):
            self._facade.handle_fatal(error)
