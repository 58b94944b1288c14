"""
内置事件 - Discord 网关事件的类型化信封
Built-in events - typed envelopes for Discord gateway events.

事件名与 py-cord 的 on_<name> 回调一致。
Kinds follow py-cord's on_<name> listener names.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from DiscordNexus.event.base import Event
from DiscordNexus.event.registry import EventRegistry

# 事件名 -> 信封类
BUILTIN_EVENTS: dict[str, type[Event]] = {}


def builtin_event(kind: str) -> Callable[[type[Event]], type[Event]]:
    """将信封类登记为内置事件 / Record an envelope class as a built-in event."""

    def decorator(cls: type[Event]) -> type[Event]:
        BUILTIN_EVENTS[kind] = cls
        return cls

    return decorator


def default_registry() -> EventRegistry:
    """
    创建包含所有内置事件的注册表
    Create a registry holding every built-in event.
    """
    registry = EventRegistry()
    for kind, cls in BUILTIN_EVENTS.items():
        registry.register(kind, cls)
    return registry


# ── 连接状态 ──


@builtin_event("ready")
@dataclass(frozen=True)
class ReadyEvent(Event):
    """客户端已就绪 / Client is ready."""


@builtin_event("connect")
@dataclass(frozen=True)
class ConnectEvent(Event):
    """已连接到网关 / Connected to the gateway."""


@builtin_event("disconnect")
@dataclass(frozen=True)
class DisconnectEvent(Event):
    """与网关断开 / Disconnected from the gateway."""


@builtin_event("resumed")
@dataclass(frozen=True)
class ResumedEvent(Event):
    """会话已恢复 / Session resumed."""


# ── 消息 ──


@builtin_event("message")
@dataclass(frozen=True)
class MessageEvent(Event):
    """收到消息 / Message received."""

    @property
    def message(self) -> Any:
        return self.arg(0)


@builtin_event("message_edit")
@dataclass(frozen=True)
class MessageEditEvent(Event):
    """消息被编辑 / Message edited."""

    @property
    def before(self) -> Any:
        return self.arg(0)

    @property
    def after(self) -> Any:
        return self.arg(1)


@builtin_event("message_delete")
@dataclass(frozen=True)
class MessageDeleteEvent(Event):
    """消息被删除 / Message deleted."""

    @property
    def message(self) -> Any:
        return self.arg(0)


@builtin_event("reaction_add")
@dataclass(frozen=True)
class ReactionAddEvent(Event):
    """添加表情回应 / Reaction added."""

    @property
    def reaction(self) -> Any:
        return self.arg(0)

    @property
    def user(self) -> Any:
        return self.arg(1)


@builtin_event("reaction_remove")
@dataclass(frozen=True)
class ReactionRemoveEvent(Event):
    """移除表情回应 / Reaction removed."""

    @property
    def reaction(self) -> Any:
        return self.arg(0)

    @property
    def user(self) -> Any:
        return self.arg(1)


# ── 交互 ──


@builtin_event("interaction")
@dataclass(frozen=True)
class InteractionEvent(Event):
    """收到交互（斜杠命令、自动补全等） / Interaction created."""

    @property
    def interaction(self) -> Any:
        return self.arg(0)


# ── 服务器与成员 ──


@builtin_event("member_join")
@dataclass(frozen=True)
class MemberJoinEvent(Event):
    """成员加入 / Member joined."""

    @property
    def member(self) -> Any:
        return self.arg(0)


@builtin_event("member_remove")
@dataclass(frozen=True)
class MemberRemoveEvent(Event):
    """成员离开 / Member left."""

    @property
    def member(self) -> Any:
        return self.arg(0)


@builtin_event("member_update")
@dataclass(frozen=True)
class MemberUpdateEvent(Event):
    """成员资料更新 / Member updated."""

    @property
    def before(self) -> Any:
        return self.arg(0)

    @property
    def after(self) -> Any:
        return self.arg(1)


@builtin_event("guild_join")
@dataclass(frozen=True)
class GuildJoinEvent(Event):
    """机器人加入服务器 / Bot joined a guild."""

    @property
    def guild(self) -> Any:
        return self.arg(0)


@builtin_event("guild_remove")
@dataclass(frozen=True)
class GuildRemoveEvent(Event):
    """机器人离开服务器 / Bot left a guild."""

    @property
    def guild(self) -> Any:
        return self.arg(0)


@builtin_event("voice_state_update")
@dataclass(frozen=True)
class VoiceStateUpdateEvent(Event):
    """语音状态变化 / Voice state changed."""

    @property
    def member(self) -> Any:
        return self.arg(0)

    @property
    def before(self) -> Any:
        return self.arg(1)

    @property
    def after(self) -> Any:
        return self.arg(2)
