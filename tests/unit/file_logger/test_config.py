"""
配置与通用工具单元测试
"""

import re
from datetime import UTC, datetime
from pathlib import Path

import pytest
from loguru import logger

from file_logger.common.logging import sanitize_log_message, setup_logging
from file_logger.config import DEFAULT_LOG_PATH, FileLoggerConfig
from file_logger.domain.errors import ConfigError
from file_logger.utils.time import filesystem_timestamp, format_duration, now_iso, to_iso


class TestFileLoggerConfig:
    """配置测试"""

    def test_defaults(self):
        """测试默认值"""
        config = FileLoggerConfig()

        assert config.log_path == DEFAULT_LOG_PATH
        assert config.log_file == Path("squadjs-logs") / "squadjs.log"
        assert config.log_dir == Path("squadjs-logs")
        assert config.max_archives == 10
        assert config.rotate_on_mount is True
        assert config.max_depth == 4
        assert config.source_id

    def test_plugin_options(self):
        """测试宿主插件选项（驼峰键）"""
        config = FileLoggerConfig.from_options(
            {
                "channelID": "667741905228136459",
                "logPath": "/srv/logs/server.log",
                "maxLogFiles": 3,
                "rotateInterval": 3600,
                "unknownOption": True,
            }
        )

        assert config.channel_id == "667741905228136459"
        assert config.log_path == "/srv/logs/server.log"
        assert config.max_archives == 3
        assert config.rotate_interval == 3600

    def test_overrides(self):
        """测试覆盖项"""
        config = FileLoggerConfig.from_options({"maxLogFiles": 3}, max_archives=5)
        assert config.max_archives == 5

    def test_invalid_max_archives(self):
        """测试非法保留数量"""
        with pytest.raises(ConfigError) as exc_info:
            FileLoggerConfig.from_options({"maxLogFiles": 0})
        assert exc_info.value.code == "CONFIG_ERROR"
        assert exc_info.value.config_key

    @pytest.mark.parametrize("log_path", ["", "   ", "logs/server"])
    def test_invalid_log_path(self, log_path):
        """测试非法日志路径"""
        with pytest.raises(ConfigError):
            FileLoggerConfig.from_options({"logPath": log_path})

    def test_frozen(self):
        """测试配置不可变"""
        config = FileLoggerConfig()
        with pytest.raises(Exception):
            config.max_archives = 3

    def test_from_yaml(self, tmp_path):
        """测试从 YAML 加载"""
        path = tmp_path / "file_logger.yaml"
        path.write_text(
            "channelID: '42'\nlogPath: logs/app.log\nmaxLogFiles: 2\nretry_base_delay: 0.5\n",
            encoding="utf-8",
        )

        config = FileLoggerConfig.from_yaml(path)

        assert config.channel_id == "42"
        assert config.log_path == "logs/app.log"
        assert config.max_archives == 2
        assert config.retry_base_delay == 0.5

    def test_from_yaml_empty(self, tmp_path):
        """测试空 YAML 使用默认值"""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert FileLoggerConfig.from_yaml(path).max_archives == 10

    def test_from_yaml_missing(self, tmp_path):
        """测试 YAML 文件不存在"""
        with pytest.raises(ConfigError):
            FileLoggerConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_not_mapping(self, tmp_path):
        """测试 YAML 内容不是映射"""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            FileLoggerConfig.from_yaml(path)

    def test_from_yaml_invalid(self, tmp_path):
        """测试 YAML 解析失败"""
        path = tmp_path / "broken.yaml"
        path.write_text("channelID: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            FileLoggerConfig.from_yaml(path)


class TestTimeUtils:
    """时间工具测试"""

    def test_to_iso(self):
        """测试 ISO 格式"""
        dt = datetime(2026, 10, 18, 8, 30, 1, 123456, tzinfo=UTC)
        assert to_iso(dt) == "2026-10-18T08:30:01.123Z"

    def test_naive_datetime_treated_as_utc(self):
        """测试无时区时间按 UTC 处理"""
        assert to_iso(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05.000Z"

    def test_now_iso(self):
        """测试当前时间格式"""
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", now_iso())

    def test_filesystem_timestamp(self):
        """测试文件名时间戳"""
        dt = datetime(2026, 10, 18, 8, 30, 1, 123000, tzinfo=UTC)
        stamp = filesystem_timestamp(dt)

        assert stamp == "2026-10-18T08-30-01-123Z"
        assert ":" not in stamp

    def test_format_duration(self):
        """测试持续时间格式化"""
        assert format_duration(250) == "250ms"
        assert format_duration(2500) == "2.5s"
        assert format_duration(90000) == "1.5m"


class TestSanitize:
    """脱敏测试"""

    def test_authorization_redacted(self):
        """测试授权头脱敏"""
        message = "Authorization: Bot MTAxNTk4NjE0NDQ0Mjk4MjQ1.GxYz12.abcdefghijk"
        sanitized = sanitize_log_message(message)

        assert "MTAxNTk4NjE0NDQ0Mjk4MjQ1" not in sanitized
        assert "REDACTED" in sanitized

    def test_webhook_token_redacted(self):
        """测试 webhook 令牌脱敏"""
        message = "POST https://discord.com/api/webhooks/123456/secretTokenValue"
        assert sanitize_log_message(message) == "POST https://discord.com/api/webhooks/123456/***"

    def test_plain_message_untouched(self):
        """测试普通消息不变"""
        assert sanitize_log_message("rotated server.log") == "rotated server.log"

    def test_setup_logging_sanitizes(self, capsys):
        """测试诊断日志输出经过脱敏"""
        handler_id = setup_logging(level="DEBUG", colorize=False)
        try:
            logger.info("Authorization: Bot MTAxNTk4NjE0NDQ0Mjk4MjQ1.GxYz12.abcdefghijk")
        finally:
            logger.remove(handler_id)

        err = capsys.readouterr().err
        assert "REDACTED" in err
        assert "MTAxNTk4NjE0NDQ0Mjk4MjQ1" not in err
