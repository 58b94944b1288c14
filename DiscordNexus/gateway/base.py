"""
事件源接口 - 运行时对外部消息平台的全部假设
Event source interface - everything the runtime assumes about the platform.

具体平台（Discord）需要实现这个接口；运行时只通过它订阅事件、
识别命令交互和建立连接。
A concrete platform (Discord) implements this interface; the runtime only
uses it to subscribe to events, recognise command interactions and connect.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from DiscordNexus.event.base import Event

if TYPE_CHECKING:
    from DiscordNexus.command.table import CommandTable


@dataclass(frozen=True)
class CommandInvocation:
    """
    命令调用 - 与平台无关的命令交互视图
    Command invocation - a platform-neutral view of a command interaction.
    """

    command_name: str
    invoker_id: str
    # 平台原生的用户对象
    invoker: Any = None
    options: dict[str, Any] = field(default_factory=dict)
    is_autocomplete: bool = False
    # 自动补全时正在输入的值
    focused_value: str = ""
    # 平台原生的交互对象
    raw: Any = None
    reply_fn: Callable[[str, bool], Awaitable[None]] | None = None
    autocomplete_fn: Callable[[Sequence[Any]], Awaitable[None]] | None = None

    async def reply(self, content: str, ephemeral: bool = False) -> None:
        """回复调用者 / Reply to the invoker."""
        if self.reply_fn is not None:
            await self.reply_fn(content, ephemeral)

    async def send_autocomplete(self, choices: Sequence[Any]) -> None:
        """返回自动补全候选项 / Send autocomplete choices."""
        if self.autocomplete_fn is not None:
            await self.autocomplete_fn(choices)


@runtime_checkable
class EventSource(Protocol):
    """
    事件源协议
    Event source protocol.
    """

    @property
    def user(self) -> Any:
        """已登录的机器人用户，未登录时为 None / Logged-in bot user or None."""
        ...

    def event_kinds(self) -> Iterable[str]:
        """列出可能发出的所有事件名 / List every kind the source can emit."""
        ...

    def on(self, kind: str, callback: Callable[..., Awaitable[None]]) -> None:
        """订阅事件 / Subscribe a callback to a kind."""
        ...

    def as_invocation(self, envelope: Event) -> CommandInvocation | None:
        """若信封是命令交互则转换，否则返回 None / Convert a command interaction."""
        ...

    async def publish_commands(self, table: CommandTable) -> None:
        """向平台发布命令表 / Publish the command table to the platform."""
        ...

    async def connect(self, token: str) -> None:
        """登录并保持连接直到关闭 / Log in and stay connected until closed."""
        ...

    async def close(self) -> None:
        """断开连接 / Disconnect."""
        ...
