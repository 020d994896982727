"""
指数退避

投递失败时的有界重试等待。
"""

import asyncio
import random
from dataclasses import dataclass


@dataclass
class BackoffConfig:
    """退避配置"""
    base_delay: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: float = 0.1
    max_retries: int = 2


class ExponentialBackoff:
    """单个条目的重试退避（每个条目新建一个实例）"""

    def __init__(self, config: BackoffConfig | None = None):
        self._config = config or BackoffConfig()
        self._delay = self._config.base_delay
        self._retries = 0

    def should_retry(self) -> bool:
        return self._retries < self._config.max_retries

    def next_delay(self, minimum: float = 0.0) -> float:
        """计算下一次等待时间并推进状态"""
        spread = 1.0 + (random.random() * 2 - 1) * self._config.jitter
        delay = max(self._delay * spread, minimum)

        self._retries += 1
        self._delay = min(self._delay * self._config.multiplier, self._config.max_delay)
        return delay

    async def wait(self, minimum: float = 0.0) -> float:
        """等待并返回实际等待时间，minimum 用于服务端要求的 retry_after"""
        delay = self.next_delay(minimum)
        await asyncio.sleep(delay)
        return delay
