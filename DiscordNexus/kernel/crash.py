"""
崩溃报告 - 将未捕获的致命错误写入磁盘
Crash reporter - persists uncaught fatal errors to disk.
"""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import sys
import traceback
from datetime import datetime
from types import TracebackType
from typing import Any

from DiscordNexus import __app_name__, __version__

logger = logging.getLogger(__name__)


class CrashReporter:
    """
    崩溃报告器
    Crash reporter.

    报告只包含版本、平台和回溯信息，不包含环境变量和命令行参数。
    Reports hold version, platform and traceback only; never env or argv.
    """

    def __init__(self, directory: str = "crashdumps") -> None:
        self._directory = directory
        self._previous_hook = sys.excepthook
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous_loop_handler: Any = None

    @property
    def directory(self) -> str:
        return self._directory

    def install(self) -> None:
        """接管 sys.excepthook / Take over sys.excepthook."""
        os.makedirs(self._directory, exist_ok=True)
        self._previous_hook = sys.excepthook
        sys.excepthook = self._excepthook

    def install_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """接管事件循环的异常处理器 / Take over the loop exception handler."""
        self._loop = loop
        self._previous_loop_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._loop_exception_handler)

    def uninstall(self) -> None:
        sys.excepthook = self._previous_hook
        if self._loop is not None and not self._loop.is_closed():
            self._loop.set_exception_handler(self._previous_loop_handler)
        self._loop = None

    def write(self, exc: BaseException, context: str = "") -> str:
        """
        写入崩溃报告，返回文件路径
        Write a crash report and return its path.
        """
        os.makedirs(self._directory, exist_ok=True)
        now = datetime.now()
        path = os.path.join(
            self._directory, f"crash-{now.strftime('%Y%m%d-%H%M%S-%f')}.log"
        )
        lines = [
            f"{__app_name__} {__version__} crash report",
            f"Time: {now.isoformat()}",
            f"Python: {platform.python_version()} ({platform.python_implementation()})",
            f"Platform: {platform.platform()}",
        ]
        if context:
            lines.append(f"Context: {context}")
        lines.append("")
        lines.extend(
            line.rstrip("\n")
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        logger.critical("已写入崩溃报告: %s", path)
        return path

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            try:
                self.write(exc.with_traceback(tb), context="uncaught exception")
            except OSError:
                logger.exception("写入崩溃报告失败")
        self._previous_hook(exc_type, exc, tb)

    def _loop_exception_handler(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        exc = context.get("exception")
        if isinstance(exc, BaseException):
            try:
                self.write(exc, context=str(context.get("message", "")))
            except OSError:
                logger.exception("写入崩溃报告失败")
        loop.default_exception_handler(context)
