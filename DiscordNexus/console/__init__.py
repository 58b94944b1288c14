"""
控制台 - 操作员命令输入
Console - operator command input.
"""

from DiscordNexus.console.reader import ConsoleReader

__all__ = ["ConsoleReader"]
