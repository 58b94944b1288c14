"""
配置模块 - 管理运行时配置
Config module - manages runtime configuration.
"""

from DiscordNexus.config.defaults import build_default_config
from DiscordNexus.config.manager import ConfigManager

__all__ = ["ConfigManager", "build_default_config"]
