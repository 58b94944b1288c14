"""
控制台读取器 - 运行时从标准输入接收操作员命令
Console reader - accepts operator commands on stdin while running.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TextIO

from DiscordNexus.lang.keys import TranslationKeys

if TYPE_CHECKING:
    from DiscordNexus.kernel.runtime import NexusRuntime

logger = logging.getLogger(__name__)

HELP_TEXT = """Available commands:
  help                 Show this message
  stop                 Disable plugins and shut down
  plugins              List plugins and their state
  commands             List registered commands
  admins               List administrators
  admin add <id>       Grant administrator
  admin remove <id>    Revoke administrator"""


class ConsoleReader:
    """
    控制台读取器
    Console reader.

    阻塞的 readline 在守护线程中执行，命令本身在事件循环中执行。
    The blocking readline runs in a daemon thread; commands run on the loop.
    """

    def __init__(
        self,
        runtime: NexusRuntime,
        request_shutdown: Callable[[], None],
        stream: TextIO | None = None,
        output: Callable[[str], None] = print,
    ) -> None:
        self._runtime = runtime
        self._request_shutdown = request_shutdown
        self._stream = stream or sys.stdin
        self._output = output
        self._handlers: dict[str, Callable[[list[str]], Awaitable[None] | None]] = {
            "help": self._cmd_help,
            "stop": self._cmd_stop,
            "plugins": self._cmd_plugins,
            "commands": self._cmd_commands,
            "admins": self._cmd_admins,
            "admin": self._cmd_admin,
        }

    async def run(self) -> None:
        """读取直到输入结束 / Read until end of input."""
        loop = asyncio.get_running_loop()
        lines: asyncio.Queue[str] = asyncio.Queue()

        def pump() -> None:
            try:
                for line in iter(self._stream.readline, ""):
                    loop.call_soon_threadsafe(lines.put_nowait, line)
                loop.call_soon_threadsafe(lines.put_nowait, "")
            except RuntimeError:
                # 事件循环已关闭
                return

        # 守护线程不会阻止进程退出
        threading.Thread(target=pump, name="nexus-console", daemon=True).start()

        while True:
            line = await lines.get()
            if not line:
                return
            await self.execute(line)

    async def execute(self, line: str) -> None:
        """执行一行命令 / Execute one command line."""
        parts = line.strip().split()
        if not parts:
            return

        name, args = parts[0].lower(), parts[1:]
        handler = self._handlers.get(name)
        if handler is None:
            self._output(
                self._runtime.language.translate(
                    TranslationKeys.CONSOLE_UNKNOWN_COMMAND, name
                )
            )
            return

        try:
            result = handler(args)
            if result is not None:
                await result
        except Exception:
            logger.exception("控制台命令 %s 执行出错", name)

    def _cmd_help(self, args: list[str]) -> None:
        self._output(HELP_TEXT)

    def _cmd_stop(self, args: list[str]) -> None:
        self._request_shutdown()

    def _cmd_plugins(self, args: list[str]) -> None:
        plugins = self._runtime.loader.plugins
        if not plugins:
            self._output("No plugins loaded.")
            return
        for descriptor in plugins:
            version = descriptor.manifest.version if descriptor.manifest else "?"
            line = f"  {descriptor.identifier} v{version} [{descriptor.state.value}]"
            if descriptor.error:
                line += f" {descriptor.error}"
            self._output(line)

    def _cmd_commands(self, args: list[str]) -> None:
        for descriptor in self._runtime.commands.descriptors():
            flag = " (admin)" if descriptor.administrator else ""
            self._output(f"  /{descriptor.name}{flag} - {descriptor.owner or '-'}")

    def _cmd_admins(self, args: list[str]) -> None:
        admins = self._runtime.admins.list()
        self._output("Administrators: " + (", ".join(admins) if admins else "none"))

    def _cmd_admin(self, args: list[str]) -> None:
        if len(args) != 2 or args[0] not in ("add", "remove"):
            self._output("Usage: admin <add|remove> <id>")
            return
        action, user_id = args
        if action == "add":
            self._runtime.admins.add(user_id)
            self._output(f"Added administrator {user_id}")
        else:
            self._runtime.admins.remove(user_id)
            self._output(f"Removed administrator {user_id}")
