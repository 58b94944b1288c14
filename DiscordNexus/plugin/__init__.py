"""
插件系统 - 插件是 DiscordNexus 的扩展机制
Plugin system - plugins are the extension mechanism of DiscordNexus.

插件目录中包含清单文件（plugin.yml）和入口模块，
激活时通过 RuntimeHandle 注册命令和事件监听器。
A plugin directory holds a manifest (plugin.yml) and an entry module; on
activation the plugin registers commands and listeners via its RuntimeHandle.
"""

from DiscordNexus.plugin.base import Plugin, PluginCapability
from DiscordNexus.plugin.handle import RuntimeHandle
from DiscordNexus.plugin.hooks import autocomplete, command, listener
from DiscordNexus.plugin.loader import PluginLoader
from DiscordNexus.plugin.manifest import PluginManifest
from DiscordNexus.plugin.state import PluginDescriptor, PluginState

__all__ = [
    "Plugin",
    "PluginCapability",
    "PluginDescriptor",
    "PluginLoader",
    "PluginManifest",
    "PluginState",
    "RuntimeHandle",
    "autocomplete",
    "command",
    "listener",
]
