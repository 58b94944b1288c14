"""
运行时句柄 - 插件在激活时获得的能力接口
Runtime handle - the capability interface a plugin receives on activation.

插件只能通过句柄访问命令表、管理员登记表和配置，
不能直接接触运行时的内部存储。
Plugins reach the command table, administrator registry and configuration
only through the handle, never through the runtime's internal storage.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from DiscordNexus.command.descriptor import CommandDescriptor, CommandOption
from DiscordNexus.event.base import WILDCARD, Event

if TYPE_CHECKING:
    from DiscordNexus.command.table import CommandTable
    from DiscordNexus.config.manager import ConfigManager
    from DiscordNexus.store.admins import AdministratorRegistry

ListenerTarget = str | type[Event]


class RuntimeHandle:
    """
    运行时句柄 - 每个插件一个
    Runtime handle - one per plugin.
    """

    def __init__(
        self,
        plugin_id: str,
        commands: CommandTable,
        admins: AdministratorRegistry,
        config: ConfigManager,
        data_directory: str,
    ) -> None:
        self._plugin_id = plugin_id
        self._commands = commands
        self._admins = admins
        self._config = config
        self._data_directory = data_directory
        self._listeners: list[tuple[ListenerTarget, Callable[..., Any]]] = []
        self._command_names: list[str] = []
        # 命令名 -> 首次注册时被覆盖的其他插件的描述符
        self._shadowed: dict[str, CommandDescriptor] = {}
        self._logger = logging.getLogger(f"DiscordNexus.plugin.{plugin_id}")

    @property
    def plugin_id(self) -> str:
        return self._plugin_id

    @property
    def data_directory(self) -> str:
        """插件的数据目录 / The plugin's data directory."""
        return self._data_directory

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def listeners(self) -> list[tuple[ListenerTarget, Callable[..., Any]]]:
        return list(self._listeners)

    @property
    def command_names(self) -> list[str]:
        """由该插件注册的命令名 / Command names registered by this plugin."""
        return list(self._command_names)

    def register_command(
        self,
        name: str | CommandDescriptor,
        execute: Callable[..., Any] | None = None,
        *,
        description: str = "",
        administrator: bool = False,
        autocomplete: Callable[..., Any] | None = None,
        options: list[CommandOption] | None = None,
    ) -> CommandDescriptor:
        """
        注册命令（同名覆盖）
        Register a command (overwrites by name).
        """
        if isinstance(name, CommandDescriptor):
            descriptor = name
            descriptor.owner = self._plugin_id
        else:
            if execute is None:
                raise TypeError("register_command 需要 execute 处理器")
            descriptor = CommandDescriptor(
                name=name,
                execute=execute,
                description=description,
                administrator=administrator,
                autocomplete=autocomplete,
                options=list(options or []),
                owner=self._plugin_id,
            )

        previous = self._commands.register(descriptor)
        if descriptor.name not in self._command_names:
            self._command_names.append(descriptor.name)
            if previous is not None and previous.owner != self._plugin_id:
                self._shadowed[descriptor.name] = previous
        return descriptor

    def shadowed(self, name: str) -> CommandDescriptor | None:
        """
        该插件注册 name 时覆盖掉的描述符
        The descriptor this plugin replaced when it first registered name.
        """
        return self._shadowed.get(name)

    def register_listener(
        self, kind: ListenerTarget, callback: Callable[..., Any]
    ) -> None:
        """
        注册事件监听器
        Register an event listener.

        kind 可以是事件名、Event 子类或通配符 "*"。
        kind may be an event name, an Event subclass, or the "*" wildcard.
        """
        self._listeners.append((kind, callback))

    def is_administrator(self, user_id: int | str) -> bool:
        """检查管理员（只读） / Check administrator status (read-only)."""
        return self._admins.is_administrator(user_id)

    def get_config(self, path: str, default: Any = None) -> Any:
        """读取配置（只读副本） / Read configuration (read-only copy)."""
        return self._config.get(path, default)

    def listeners_for(self, envelope: Event) -> list[Callable[..., Any]]:
        """匹配信封的监听器 / Listeners matching an envelope."""
        matched = []
        for target, callback in self._listeners:
            if isinstance(target, type):
                if isinstance(envelope, target):
                    matched.append(callback)
            elif target == WILDCARD or target == envelope.kind:
                matched.append(callback)
        return matched
