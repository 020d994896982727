"""file_logger 单元测试辅助"""

from typing import Any

import pytest

from file_logger.config import FileLoggerConfig
from file_logger.delivery.channels.base import NotificationChannel
from file_logger.domain.errors import DeliveryError


class RecordingChannel(NotificationChannel):
    """记录所有发送调用的内存渠道"""

    def __init__(self, fail_on: set[str] | None = None, transient_failures: int = 0):
        self.events: list[tuple[str, Any]] = []
        self.messages: list[dict[str, Any]] = []
        self.files: list[tuple[str, bytes]] = []
        self.attempts: dict[str, int] = {}
        self.closed = False
        self._fail_on = fail_on or set()
        self._transient_failures = transient_failures

    @property
    def channel_name(self) -> str:
        return "recording"

    async def send_message(self, embed: dict[str, Any]) -> None:
        self.events.append(("message", embed["description"]))
        self.messages.append(embed)

    async def send_file(self, file_name: str, data: bytes) -> None:
        self.attempts[file_name] = self.attempts.get(file_name, 0) + 1
        if file_name in self._fail_on:
            raise DeliveryError(f"rejected {file_name}", artifact_name=file_name, status_code=500)
        if self._transient_failures > 0:
            self._transient_failures -= 1
            raise DeliveryError(f"temporary failure {file_name}", artifact_name=file_name, status_code=503)
        self.events.append(("file", file_name))
        self.files.append((file_name, data))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def make_channel():
    return RecordingChannel


@pytest.fixture
def make_config(tmp_path):
    """构建指向临时目录的配置"""

    def _make(**overrides: Any) -> FileLoggerConfig:
        data: dict[str, Any] = {
            "log_path": str(tmp_path / "logs" / "server.log"),
            "channel_id": "667741905228136459",
            "echo_console": False,
            "retry_base_delay": 0,
            "retry_max_delay": 0,
        }
        data.update(overrides)
        return FileLoggerConfig.from_options(data)

    return _make
