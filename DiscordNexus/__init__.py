"""
DiscordNexus - 可扩展的 Discord 插件运行时
DiscordNexus - an extensible plugin runtime for Discord.
"""

__app_name__ = "DiscordNexus"
__version__ = "1.2.0"

# 开发版本会在启动时打印警告
IS_DEVELOPMENT_BUILD = False
