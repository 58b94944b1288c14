"""
异常类型 - 运行时抛出的所有异常
Exception types raised by the runtime.
"""

from __future__ import annotations


class NexusError(Exception):
    """所有运行时异常的基类 / Base class for runtime errors."""


class ConfigError(NexusError):
    """配置无法读取或缺少必需项 / Configuration is unreadable or incomplete."""


class ManifestError(NexusError):
    """插件清单缺失或无效 / Plugin manifest is missing or invalid."""


class PluginStateError(NexusError):
    """非法的插件生命周期状态迁移 / Illegal plugin lifecycle transition."""


class PluginLoadError(NexusError):
    """
    插件加载失败的记录
    Record of a plugin that failed to load or activate.
    """

    def __init__(self, identifier: str, directory: str, error: str) -> None:
        super().__init__(f"{identifier}: {error}")
        self.identifier = identifier
        self.directory = directory
        self.error = error
