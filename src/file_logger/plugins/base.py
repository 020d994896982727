"""
插件基类

宿主负责插件的注册与选项解析，插件只需实现挂载/卸载。
"""

from abc import ABC, abstractmethod
from typing import Any


class PluginBase(ABC):
    """
    插件基类

    宿主生命周期：
    1. 构造（传入已解析的选项）
    2. mount()：开始工作
    3. unmount()：撤销 mount() 的全部副作用
    """

    description: str = ""
    default_enabled: bool = False
    options_specification: dict[str, dict[str, Any]] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """插件名称"""
        pass

    @abstractmethod
    async def mount(self) -> None:
        """挂载插件"""
        pass

    @abstractmethod
    async def unmount(self) -> None:
        """卸载插件"""
        pass
