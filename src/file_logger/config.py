"""
日志管道配置模块

配置作为显式值在构造时传入管道，支持从宿主插件选项或 YAML 文件加载。
"""

import socket
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from file_logger.domain.errors import ConfigError

DEFAULT_LOG_PATH = str(Path("squadjs-logs") / "squadjs.log")


def _default_source_id() -> str:
    """默认来源标识（主机名）"""
    try:
        return socket.gethostname() or "file-logger"
    except OSError:
        return "file-logger"


class FileLoggerConfig(BaseModel):
    """日志管道配置"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # === 文件配置 ===
    log_path: str = Field(default=DEFAULT_LOG_PATH)
    encoding: str = Field(default="utf-8")

    # === 轮转配置 ===
    max_archives: int = Field(default=10, ge=1, alias="maxLogFiles")
    rotate_interval: float = Field(default=0.0, ge=0)    # 秒，0 表示仅挂载时轮转
    rotate_on_mount: bool = Field(default=True)

    # === 格式化与压缩 ===
    max_depth: int = Field(default=4, ge=1)
    compression_level: int = Field(default=6, ge=1, le=9)
    echo_console: bool = Field(default=True)
    capture_loguru: bool = Field(default=True)
    capture_level: str = Field(default="INFO")
    diagnostics_level: str = Field(default="")    # 非空时在 stderr 输出脱敏的诊断日志

    # === 通知渠道 ===
    channel_id: str = Field(default="", alias="channelID")
    bot_token: str = Field(default="")
    api_base_url: str = Field(default="https://discord.com/api/v10")
    request_timeout: float = Field(default=30.0, gt=0)
    source_id: str = Field(default_factory=_default_source_id)
    embed_title: str = Field(default="Log file rotated")
    embed_color: int = Field(default=0x3498DB, ge=0, le=0xFFFFFF)

    # === 投递重试 ===
    max_retries: int = Field(default=3, ge=1)
    retry_base_delay: float = Field(default=1.0, ge=0)
    retry_max_delay: float = Field(default=30.0, ge=0)
    max_queue_size: int = Field(default=0, ge=0)        # 0 表示不限

    @field_validator("log_path")
    @classmethod
    def _validate_log_path(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("log_path 不能为空")
        if not Path(value).suffix:
            raise ValueError(f"log_path 需要带扩展名: {value}")
        return value

    @property
    def log_file(self) -> Path:
        return Path(self.log_path)

    @property
    def log_dir(self) -> Path:
        return self.log_file.parent

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **overrides: Any) -> "FileLoggerConfig":
        """
        从宿主插件选项构建配置

        Args:
            options: 插件选项（支持 channelID 这类驼峰键）
            overrides: 覆盖项（蛇形键）

        Raises:
            ConfigError: 配置校验失败
        """
        data: dict[str, Any] = dict(options or {})
        data.update(overrides)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            key = ".".join(str(p) for p in first.get("loc", ())) or None
            raise ConfigError(f"配置无效: {e}", config_key=key) from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> "FileLoggerConfig":
        """
        从 YAML 文件加载配置

        Raises:
            ConfigError: 文件不存在、解析失败或校验失败
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"配置文件不存在: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"配置文件解析失败: {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"配置文件格式错误，应为映射: {path}")

        return cls.from_options(data)
