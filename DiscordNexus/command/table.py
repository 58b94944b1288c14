"""
命令表 - 命令名到命令描述符的映射
Command table - maps command names to command descriptors.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator
from typing import Any

from DiscordNexus.command.descriptor import CommandDescriptor

logger = logging.getLogger(__name__)


class CommandTable:
    """
    命令表
    Command table.

    同名重复注册会静默覆盖（后注册者生效）。
    Registering an existing name silently replaces it (last writer wins).
    """

    def __init__(self) -> None:
        self._commands: dict[str, CommandDescriptor] = {}

    def register(self, descriptor: CommandDescriptor) -> CommandDescriptor | None:
        """
        注册或覆盖命令，返回被覆盖的描述符
        Register or overwrite a command, returning the descriptor it replaced.
        """
        previous = self._commands.get(descriptor.name)
        self._commands[descriptor.name] = descriptor
        if previous is not None:
            logger.debug(
                "命令 %s 已被覆盖 (%s -> %s)",
                descriptor.name,
                previous.owner or "-",
                descriptor.owner or "-",
            )
        else:
            logger.debug("已注册命令: %s", descriptor.name)
        return previous

    def unregister(self, name: str, owner: str | None = None) -> bool:
        """
        注销命令
        Unregister a command.

        指定 owner 时，仅当当前描述符属于该 owner 才会移除。
        With owner given, only removes the command if that owner holds it.
        """
        descriptor = self._commands.get(name)
        if descriptor is None:
            return False
        if owner is not None and descriptor.owner != owner:
            return False
        del self._commands[name]
        return True

    def resolve(self, name: str) -> CommandDescriptor | None:
        """按名称查找命令 / Resolve a command by name."""
        return self._commands.get(name)

    async def list_for_autocomplete(self, name: str, invocation: Any) -> list[Any]:
        """
        调用命令的自动补全处理器
        Run the command's autocomplete handler.

        命令不存在或没有自动补全处理器时返回空列表。
        Returns an empty list when the command or its handler is missing.
        """
        descriptor = self._commands.get(name)
        if descriptor is None or descriptor.autocomplete is None:
            return []

        result = descriptor.autocomplete(invocation)
        if inspect.isawaitable(result):
            result = await result
        return list(result or [])

    def names(self) -> list[str]:
        """所有命令名 / All command names."""
        return list(self._commands)

    def descriptors(self) -> list[CommandDescriptor]:
        """所有命令描述符 / All command descriptors."""
        return list(self._commands.values())

    def to_payload(self) -> list[dict[str, Any]]:
        """转为 Discord 批量注册负载 / Convert to a bulk registration payload."""
        return [descriptor.to_payload() for descriptor in self._commands.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)
