"""
命令系统 - 命令描述符与命令表
Command system - command descriptors and the command table.
"""

from DiscordNexus.command.descriptor import (
    CommandDescriptor,
    CommandOption,
    OptionType,
)
from DiscordNexus.command.table import CommandTable

__all__ = ["CommandDescriptor", "CommandOption", "CommandTable", "OptionType"]
