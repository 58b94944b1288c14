"""
命令描述符 - 描述一个已注册的命令
Command descriptor - describes a registered command.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field


class OptionType(IntEnum):
    """Discord 应用命令选项类型 / Discord application command option types."""

    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


class CommandOption(BaseModel):
    """
    命令选项 - 斜杠命令的一个参数
    Command option - one argument of a slash command.
    """

    name: str = Field(min_length=1, max_length=32)
    description: str = Field(default="-", min_length=1, max_length=100)
    type: OptionType = OptionType.STRING
    required: bool = False
    autocomplete: bool = False

    def to_payload(self) -> dict[str, Any]:
        """转为 Discord API 负载 / Convert to a Discord API payload."""
        payload = self.model_dump()
        payload["type"] = int(self.type)
        return payload


@dataclass
class CommandDescriptor:
    """
    命令描述符
    Command descriptor.

    execute 的签名为 (invoker, invocation, options)，
    autocomplete 的签名为 (invocation)，返回候选项序列。
    """

    name: str
    execute: Callable[..., Any]
    description: str = ""
    # 是否仅限管理员
    administrator: bool = False
    autocomplete: Callable[..., Any] | None = None
    options: list[CommandOption] = field(default_factory=list)
    # 注册该命令的插件标识
    owner: str = ""

    def to_payload(self) -> dict[str, Any]:
        """转为 Discord 应用命令负载 / Convert to an application command payload."""
        return {
            "name": self.name,
            "description": self.description or self.name,
            "type": 1,
            "options": [option.to_payload() for option in self.options],
        }
