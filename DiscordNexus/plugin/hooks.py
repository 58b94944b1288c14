"""
钩子系统 - 插件通过方法装饰器声明监听器和命令
Hook system - plugins declare listeners and commands with method decorators.

装饰器只在函数上附加钩子描述符；插件激活时，加载器收集实例上的
所有钩子并通过 RuntimeHandle 注册，不存在全局注册表。
Decorators only attach hook descriptors to the function; on activation the
loader collects the instance's hooks and registers them through the
RuntimeHandle. There is no global registry.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from DiscordNexus.command.descriptor import CommandOption
from DiscordNexus.event.base import Event

HOOKS_ATTR = "_nexus_hooks"


class HookKind(str, Enum):
    """钩子类型 / Hook kind."""

    LISTENER = "listener"
    COMMAND = "command"
    AUTOCOMPLETE = "autocomplete"


@dataclass
class HookDescriptor:
    """
    钩子描述符 - 描述一个被装饰的处理器
    Hook descriptor - describes a decorated handler.
    """

    kind: HookKind
    handler: Callable[..., Any]
    # 事件名/事件类/命令名
    target: str | type[Event] = ""
    description: str = ""
    administrator: bool = False
    options: list[CommandOption] = field(default_factory=list)


def _attach(func: Callable, descriptor: HookDescriptor) -> Callable:
    hooks = getattr(func, HOOKS_ATTR, None)
    if hooks is None:
        hooks = []
        setattr(func, HOOKS_ATTR, hooks)
    hooks.append(descriptor)
    return func


def listener(kind: str | type[Event]) -> Callable[[Callable], Callable]:
    """
    事件监听器装饰器
    Event listener decorator.

    kind 可以是事件名、Event 子类或通配符 "*"。
    kind may be an event name, an Event subclass, or the "*" wildcard.
    """

    def decorator(func: Callable) -> Callable:
        return _attach(func, HookDescriptor(kind=HookKind.LISTENER, handler=func, target=kind))

    return decorator


def command(
    name: str,
    description: str = "",
    administrator: bool = False,
    options: list[CommandOption] | None = None,
) -> Callable[[Callable], Callable]:
    """
    命令装饰器 - 处理器签名为 (invoker, invocation, options)
    Command decorator - handler signature is (invoker, invocation, options).
    """

    def decorator(func: Callable) -> Callable:
        return _attach(
            func,
            HookDescriptor(
                kind=HookKind.COMMAND,
                handler=func,
                target=name,
                description=description or inspect.getdoc(func) or "",
                administrator=administrator,
                options=list(options or []),
            ),
        )

    return decorator


def autocomplete(name: str) -> Callable[[Callable], Callable]:
    """
    自动补全装饰器 - 处理器签名为 (invocation)，返回候选项
    Autocomplete decorator - handler signature is (invocation), returns choices.
    """

    def decorator(func: Callable) -> Callable:
        return _attach(
            func, HookDescriptor(kind=HookKind.AUTOCOMPLETE, handler=func, target=name)
        )

    return decorator


def collect_hooks(instance: Any) -> list[HookDescriptor]:
    """
    收集实例上的钩子，处理器绑定到实例
    Collect an instance's hooks with handlers bound to the instance.
    """
    collected: list[HookDescriptor] = []
    for attr_name, attr in inspect.getmembers(type(instance)):
        hooks = getattr(attr, HOOKS_ATTR, None)
        if not hooks:
            continue
        bound = getattr(instance, attr_name)
        collected.extend(replace(h, handler=bound) for h in hooks)
    return collected
