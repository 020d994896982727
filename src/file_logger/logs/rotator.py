"""
日志轮转器

将活动日志文件重命名为带时间戳的归档文件，并按保留数量清理最旧的归档。

状态机：IDLE -> (触发) -> ROTATING -> IDLE
触发方式：手动调用 rotate() 或 start() 启动的定时轮转
"""

import asyncio
import re
from collections.abc import Awaitable, Callable
from pathlib import Path

import aiofiles.os
from loguru import logger

from file_logger.domain.enums import RotatorState
from file_logger.domain.errors import RotationError
from file_logger.domain.models import RotationResult
from file_logger.logs.appender import LogAppender
from file_logger.utils.time import filesystem_timestamp

# filesystem_timestamp() 的输出形式，例如 2026-10-18T08-30-01-123Z
_TIMESTAMP_PATTERN = r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z"

ArchiveCallback = Callable[[Path], Awaitable[None]]


def sort_archives(archives: list[tuple[Path, float]]) -> list[tuple[Path, float]]:
    """按创建时间升序排序，时间相同按文件名排序"""
    return sorted(archives, key=lambda item: (item[1], item[0].name))


def select_evictions(archives: list[tuple[Path, float]], keep: int) -> list[Path]:
    """
    选出需要删除的归档

    Args:
        archives: (路径, 创建时间) 列表
        keep: 保留数量

    Returns:
        需要删除的路径（最旧的在前）
    """
    excess = len(archives) - keep
    if excess <= 0:
        return []
    return [path for path, _ in sort_archives(archives)[:excess]]


class LogRotator:
    """
    日志轮转器

    轮转流程：
    1. 计算归档文件名 <base>_<timestamp><ext>
    2. 持有写入锁重命名活动文件（不存在则跳过）
    3. 枚举目录下所有归档，按创建时间排序
    4. 删除超出保留数量的最旧归档（单个失败不影响其余）
    5. 后台将新归档交给下游（压缩、投递），不等待结果
    """

    def __init__(
        self,
        appender: LogAppender,
        max_archives: int = 10,
        on_archived: ArchiveCallback | None = None,
    ):
        """
        初始化轮转器

        Args:
            appender: 活动文件的写入器（共享其单写者锁）
            max_archives: 归档保留数量
            on_archived: 新归档产生后的回调
        """
        if max_archives < 1:
            raise ValueError(f"max_archives must be >= 1, got {max_archives}")

        self._appender = appender
        self._max_archives = max_archives
        self._on_archived = on_archived

        path = appender.path
        self._log_dir = path.parent
        self._base = path.stem
        self._ext = path.suffix
        self._archive_pattern = re.compile(
            rf"^{re.escape(self._base)}_{_TIMESTAMP_PATTERN}(?:_\d+)?{re.escape(self._ext)}$"
        )

        # 状态
        self._state = RotatorState.IDLE
        self._rotate_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

        # 定时轮转
        self._task: asyncio.Task | None = None
        self._running = False
        self._interval = 0.0

        # 统计
        self._rotations = 0
        self._deleted = 0

    @property
    def state(self) -> RotatorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_archive(self, name: str) -> bool:
        """是否为本轮转器产生的归档文件名"""
        return bool(self._archive_pattern.match(name))

    async def rotate(self) -> RotationResult:
        """
        执行一次轮转

        Returns:
            轮转结果；活动文件不存在时 archive_path 为 None

        Raises:
            RotationError: 重命名失败
        """
        async with self._rotate_lock:
            self._state = RotatorState.ROTATING
            try:
                result = RotationResult()

                async with self._appender.lock:
                    if not await aiofiles.os.path.exists(self._appender.path):
                        logger.debug(f"[rotator] 活动日志不存在，跳过轮转: {self._appender.path}")
                        return result

                    archive_path = await self._next_archive_path()
                    try:
                        await aiofiles.os.rename(self._appender.path, archive_path)
                    except OSError as e:
                        raise RotationError(
                            f"重命名日志文件失败: {e}",
                            path=str(self._appender.path),
                        ) from e

                result.archive_path = archive_path
                self._rotations += 1
                logger.info(f"[rotator] 日志已轮转: {archive_path.name}")

                await self._enforce_retention(result)
                self._dispatch(archive_path)
                return result
            finally:
                self._state = RotatorState.IDLE

    async def list_archives(self) -> list[tuple[Path, float]]:
        """列出目录下所有归档及其创建时间"""
        try:
            names = await aiofiles.os.listdir(self._log_dir)
        except FileNotFoundError:
            return []

        archives = []
        for name in names:
            if not self.is_archive(name):
                continue
            path = self._log_dir / name
            try:
                stat = await aiofiles.os.stat(path)
            except FileNotFoundError:
                continue
            created = getattr(stat, "st_birthtime", None) or stat.st_ctime
            archives.append((path, created))
        return archives

    async def start(self, interval: float) -> None:
        """
        启动定时轮转

        Args:
            interval: 轮转间隔（秒），<= 0 时不启动
        """
        if self._running:
            return
        if interval <= 0:
            logger.debug("[rotator] 未配置轮转间隔，仅支持手动轮转")
            return

        self._interval = interval
        self._running = True
        self._task = asyncio.create_task(self._rotate_loop())
        logger.info(f"[rotator] 定时轮转已启动: 间隔={interval}s, 保留={self._max_archives}")

    async def stop(self) -> None:
        """停止定时轮转"""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def wait_pending(self) -> None:
        """等待所有后台下游任务完成"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _rotate_loop(self) -> None:
        """轮转循环"""
        while self._running:
            try:
                await asyncio.sleep(self._interval)
                await self.rotate()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"[rotator] 定时轮转失败: {e}")

    async def _next_archive_path(self) -> Path:
        """计算不冲突的归档路径"""
        stamp = filesystem_timestamp()
        candidate = self._log_dir / f"{self._base}_{stamp}{self._ext}"
        counter = 0
        while await aiofiles.os.path.exists(candidate):
            counter += 1
            candidate = self._log_dir / f"{self._base}_{stamp}_{counter:03d}{self._ext}"
        return candidate

    async def _enforce_retention(self, result: RotationResult) -> None:
        """清理超出保留数量的归档"""
        archives = await self.list_archives()
        for path in select_evictions(archives, self._max_archives):
            try:
                await aiofiles.os.remove(path)
                result.deleted.append(path)
                self._deleted += 1
                logger.debug(f"[rotator] 已删除过期归档: {path.name}")
            except OSError as e:
                result.errors.append(f"{path.name}: {e}")
                logger.warning(f"[rotator] 删除归档失败: {path.name}: {e}")

    def _dispatch(self, archive_path: Path) -> None:
        """后台交给下游处理"""
        if self._on_archived is None:
            return
        task = asyncio.create_task(self._run_callback(archive_path))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_callback(self, archive_path: Path) -> None:
        try:
            await self._on_archived(archive_path)
        except Exception as e:
            logger.error(f"[rotator] 归档后处理失败: {archive_path.name}: {e}")

    def get_stats(self) -> dict:
        """获取统计信息"""
        return {
            "state": self._state.value,
            "rotations": self._rotations,
            "deleted": self._deleted,
            "pending": len(self._pending),
            "running": self._running,
            "interval": self._interval,
        }
