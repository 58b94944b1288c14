"""
事件绑定器 - 将事件源的所有事件绑定到运行时
Event binder - attaches the runtime to every event the source can emit.

对事件源列出的每个事件名，若注册表中存在对应工厂，就订阅一个转发监听器；
没有工厂的事件名直接跳过。绑定只在连接建立前进行一次。
For every kind the source lists, subscribes one forwarding listener when the
registry has a factory for it; kinds without one are skipped. Binding happens
once, before the connection is established.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from DiscordNexus.event.base import Event
from DiscordNexus.event.registry import EventFactory, EventRegistry

if TYPE_CHECKING:
    from DiscordNexus.gateway.base import EventSource

logger = logging.getLogger(__name__)

Forward = Callable[[Event], Awaitable[None]]


class EventBinder:
    """
    事件绑定器
    Event binder.
    """

    def __init__(self, registry: EventRegistry) -> None:
        self._registry = registry
        # 事件名 -> 已订阅的转发监听器
        self._bound: dict[str, Callable[..., Awaitable[None]]] = {}

    @property
    def bound_kinds(self) -> list[str]:
        """已绑定的事件名 / Kinds that have been bound."""
        return list(self._bound)

    def bind(self, source: EventSource, forward: Forward) -> list[str]:
        """
        绑定事件源
        Bind the event source.

        返回本次新绑定的事件名；已绑定的事件名不会重复订阅。
        Returns the kinds bound by this call; bound kinds are never rebound.
        """
        newly_bound: list[str] = []
        for kind in source.event_kinds():
            if kind in self._bound:
                continue

            try:
                factory = self._registry.resolve(kind)
            except Exception:
                logger.exception("解析事件 %s 的处理器失败，跳过", kind)
                continue

            if factory is None:
                continue

            listener = self._make_forwarder(kind, factory, forward)
            source.on(kind, listener)
            self._bound[kind] = listener
            newly_bound.append(kind)

        logger.info("已绑定 %d 个事件", len(self._bound))
        return newly_bound

    @staticmethod
    def _make_forwarder(
        kind: str, factory: EventFactory, forward: Forward
    ) -> Callable[..., Awaitable[None]]:
        async def forward_event(*args: Any) -> None:
            try:
                envelope = factory(kind=kind, args=tuple(args))
            except Exception:
                logger.exception("构建事件 %s 的信封失败", kind)
                return
            await forward(envelope)

        forward_event.__name__ = f"on_{kind}"
        return forward_event
