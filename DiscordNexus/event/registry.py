"""
事件注册表 - 事件名到信封工厂的映射
Event registry - maps event kinds to envelope factories.

工厂可以直接是 Event 子类，也可以是 "module:attr" 形式的延迟路径，
在解析时才导入。
A factory is either an Event subclass or a lazy "module:attr" path that is
imported on resolution.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable

from DiscordNexus.event.base import Event

logger = logging.getLogger(__name__)

EventFactory = Callable[..., Event]


class EventRegistry:
    """
    事件注册表
    Event registry.
    """

    def __init__(self) -> None:
        self._factories: dict[str, EventFactory | str] = {}

    def register(self, kind: str, factory: EventFactory | str) -> None:
        """注册事件工厂 / Register an envelope factory for a kind."""
        self._factories[kind] = factory

    def unregister(self, kind: str) -> None:
        """注销事件工厂 / Remove the factory of a kind."""
        self._factories.pop(kind, None)

    def resolve(self, kind: str) -> EventFactory | None:
        """
        解析事件工厂
        Resolve the envelope factory of a kind.

        未注册时返回 None；延迟路径导入失败时抛出原始异常。
        Returns None when unregistered; lazy import errors propagate.
        """
        factory = self._factories.get(kind)
        if factory is None:
            return None
        if isinstance(factory, str):
            factory = _import_path(factory)
            self._factories[kind] = factory
        return factory

    def kinds(self) -> list[str]:
        """已注册的事件名 / Registered kinds."""
        return list(self._factories)

    def __contains__(self, kind: object) -> bool:
        return kind in self._factories


def _import_path(path: str) -> EventFactory:
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"无效的工厂路径: {path!r}")
    module = importlib.import_module(module_name)
    factory = getattr(module, attr)
    if not callable(factory):
        raise TypeError(f"工厂 {path!r} 不可调用")
    return factory
