"""
日志追加写入器

只追加不改写，每行格式为 ``[<timestamp>] <line>``。

写入顺序：
1. submit() 在调用时同步取时间戳并进入 FIFO 队列
2. 单个写入任务持有单写者锁，按入队顺序落盘
3. 轮转器持有同一把锁重命名，重命名后的写入进入新文件
"""

import asyncio
from collections import deque
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from file_logger.domain.errors import AppendError
from file_logger.utils.time import now_iso


class LogAppender:
    """
    日志追加写入器

    负责活动日志文件的唯一写入。无论来自门面还是 loguru，
    所有写入都经过同一个 FIFO 队列，落盘顺序即调用顺序。
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding
        self._lock = asyncio.Lock()

        self._queue: deque[tuple[str, asyncio.Future]] = deque()
        self._writer: asyncio.Task | None = None

        # 统计
        self._lines_written = 0
        self._bytes_written = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def lock(self) -> asyncio.Lock:
        """单写者锁"""
        return self._lock

    @property
    def lines_written(self) -> int:
        return self._lines_written

    @property
    def pending(self) -> int:
        return len(self._queue)

    def submit(self, line: str) -> asyncio.Future:
        """
        提交一行日志（同步入队）

        需要在运行中的事件循环内调用。

        Returns:
            完成时结果为实际写入的文本；写入失败时异常为 AppendError
        """
        loop = asyncio.get_running_loop()
        content = f"[{now_iso()}] {line}\n"
        future = loop.create_future()
        self._queue.append((content, future))

        if self._writer is None or self._writer.done():
            self._writer = loop.create_task(self._drain())
        return future

    async def append(self, line: str) -> str:
        """
        追加一行日志

        Args:
            line: 已格式化的日志内容

        Returns:
            实际写入的文本（含时间戳和换行）

        Raises:
            AppendError: 目录创建或写入失败
        """
        return await self.submit(line)

    async def flush(self) -> None:
        """等待已提交的写入全部落盘"""
        while self._writer is not None and not self._writer.done():
            await asyncio.shield(self._writer)

    async def _drain(self) -> None:
        async with self._lock:
            while self._queue:
                content, future = self._queue.popleft()
                try:
                    await self._write(content)
                except AppendError as e:
                    if not future.done():
                        future.set_exception(e)
                    continue
                if not future.done():
                    future.set_result(content)

    async def _write(self, content: str) -> None:
        try:
            await aiofiles.os.makedirs(self._path.parent, exist_ok=True)
            async with aiofiles.open(self._path, "a", encoding=self._encoding) as f:
                await f.write(content)
        except OSError as e:
            logger.critical(f"[appender] 写入日志文件失败: {self._path}: {e}")
            raise AppendError(
                f"写入日志文件失败: {e}",
                path=str(self._path),
                details={"errno": e.errno},
            ) from e

        self._lines_written += 1
        self._bytes_written += len(content.encode(self._encoding))

    def get_stats(self) -> dict:
        """获取统计信息"""
        return {
            "path": str(self._path),
            "lines_written": self._lines_written,
            "bytes_written": self._bytes_written,
            "pending": len(self._queue),
        }
