"""
事件信封 - 外部事件在运行时内部的统一包装
Event envelope - the uniform wrapper around any external occurrence.

信封是不可变的，只在一次分发过程中存活。
Envelopes are immutable and live for a single dispatch pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# 匹配所有事件类型的通配符
WILDCARD = "*"


@dataclass(frozen=True)
class Event:
    """
    事件基类
    Base event envelope.

    kind 为事件源给出的事件名，args 为事件源回调时传入的参数。
    kind is the event name given by the source; args are the callback arguments.
    """

    kind: str
    args: tuple[Any, ...] = field(default_factory=tuple)

    def arg(self, index: int, default: Any = None) -> Any:
        """按位置取参数 / Get a positional argument."""
        if index < len(self.args):
            return self.args[index]
        return default
