"""
插件基类 - 所有插件的父类
Plugin base - parent of all plugins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from DiscordNexus.plugin.handle import RuntimeHandle
    from DiscordNexus.plugin.manifest import PluginManifest


@runtime_checkable
class PluginCapability(Protocol):
    """
    插件能力接口 - 加载时检查
    Plugin capability interface - checked at load time.
    """

    def on_enable(self, runtime: RuntimeHandle) -> Any: ...

    def on_disable(self) -> Any: ...


class Plugin:
    """
    插件基类 - 用户插件继承此类
    Plugin base - user plugins inherit from this.

    生命周期：
    1. __init__(manifest) - 构造
    2. on_enable(runtime) - 激活时调用，可注册命令和监听器
    3. on_disable() - 停用时调用

    也可以用 hooks.py 中的装饰器声明监听器和命令，
    它们会在 on_enable 之前注册。
    """

    def __init__(self, manifest: PluginManifest) -> None:
        self._manifest = manifest
        self._runtime: RuntimeHandle | None = None

    @property
    def manifest(self) -> PluginManifest:
        """获取插件清单 / Get the plugin manifest."""
        return self._manifest

    @property
    def name(self) -> str:
        """插件名 / Plugin name."""
        return self._manifest.name

    @property
    def runtime(self) -> RuntimeHandle:
        """运行时句柄，激活后可用 / Runtime handle, available once activated."""
        if self._runtime is None:
            raise RuntimeError(f"插件 {self.name} 尚未激活")
        return self._runtime

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(f"DiscordNexus.plugin.{self.name}")

    def attach(self, runtime: RuntimeHandle) -> None:
        """由加载器在激活前调用 / Called by the loader before activation."""
        self._runtime = runtime

    async def on_enable(self, runtime: RuntimeHandle) -> None:
        """
        激活时调用
        Called on activation.
        """
        pass

    async def on_disable(self) -> None:
        """
        停用时调用
        Called on deactivation.
        """
        pass
