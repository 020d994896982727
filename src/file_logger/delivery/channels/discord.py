"""Discord 通知渠道"""

from typing import Any

import httpx
from loguru import logger

from file_logger.config import FileLoggerConfig
from file_logger.delivery.channels.base import NotificationChannel
from file_logger.domain.errors import ConfigError, DeliveryError
from file_logger.utils.json import dumps

USER_AGENT = "DiscordBot (file-logger, 0.1.0)"


class DiscordChannel(NotificationChannel):
    """
    Discord 通知渠道

    通过 REST API 向指定频道发送 embed 消息和附件：
        POST {api_base_url}/channels/{channel_id}/messages
    """

    def __init__(
        self,
        channel_id: str,
        bot_token: str = "",
        api_base_url: str = "https://discord.com/api/v10",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        初始化 Discord 渠道

        Args:
            channel_id: 目标频道 ID
            bot_token: Bot 令牌
            api_base_url: API 基础地址
            timeout: 请求超时（秒）
            client: 外部提供的 httpx 客户端（不负责关闭）
            transport: 自定义传输层（测试用）
        """
        if not channel_id:
            raise ConfigError("Discord 渠道需要 channel_id", config_key="channel_id")

        self.channel_id = str(channel_id)
        self._bot_token = bot_token
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: FileLoggerConfig, **kwargs: Any) -> "DiscordChannel":
        return cls(
            channel_id=config.channel_id,
            bot_token=config.bot_token,
            api_base_url=config.api_base_url,
            timeout=config.request_timeout,
            **kwargs,
        )

    @property
    def channel_name(self) -> str:
        return "discord"

    @property
    def messages_url(self) -> str:
        return f"{self._api_base_url}/channels/{self.channel_id}/messages"

    async def send_message(self, embed: dict[str, Any]) -> None:
        """发送 embed 消息"""
        await self._post(json={"embeds": [embed]}, label="embed")

    async def send_file(self, file_name: str, data: bytes) -> None:
        """发送附件"""
        payload = {"attachments": [{"id": 0, "filename": file_name}]}
        await self._post(
            data={"payload_json": dumps(payload)},
            files={"files[0]": (file_name, data, "application/gzip")},
            label=file_name,
        )

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"User-Agent": USER_AGENT}
            if self._bot_token:
                headers["Authorization"] = f"Bot {self._bot_token}"
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=headers,
                transport=self._transport,
            )
            self._owns_client = True
        return self._client

    async def _post(self, label: str, **kwargs: Any) -> None:
        client = self._get_client()
        try:
            response = await client.post(self.messages_url, **kwargs)
        except httpx.TimeoutException as e:
            raise DeliveryError(f"[{self.channel_name}] 发送超时: {label}", artifact_name=label) from e
        except httpx.RequestError as e:
            raise DeliveryError(f"[{self.channel_name}] 请求异常: {e}", artifact_name=label) from e

        if response.status_code in (200, 201, 204):
            return

        details: dict[str, Any] = {"response": response.text[:200]}
        if response.status_code == 429:
            try:
                details["retry_after"] = float(response.json().get("retry_after", 0))
            except (ValueError, AttributeError, TypeError):
                pass

        logger.warning(
            f"[{self.channel_name}] 发送失败: HTTP {response.status_code}, "
            f"响应: {details['response']}"
        )
        raise DeliveryError(
            f"[{self.channel_name}] 发送失败: HTTP {response.status_code}",
            artifact_name=label,
            status_code=response.status_code,
            details=details,
        )
