"""
事件系统 - 事件信封、注册表与绑定器
Event system - envelopes, registry and binder.
"""

from DiscordNexus.event.base import WILDCARD, Event
from DiscordNexus.event.binder import EventBinder
from DiscordNexus.event.builtin import (
    BUILTIN_EVENTS,
    InteractionEvent,
    MessageEvent,
    ReadyEvent,
    default_registry,
)
from DiscordNexus.event.registry import EventRegistry

__all__ = [
    "BUILTIN_EVENTS",
    "Event",
    "EventBinder",
    "EventRegistry",
    "InteractionEvent",
    "MessageEvent",
    "ReadyEvent",
    "WILDCARD",
    "default_registry",
]
