"""
日志系统 - 彩色控制台输出与滚动日志文件
Logging - colored console output plus a rotating log file.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import colorlog

LOG_FILE = "nexus.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# 非调试模式下这些库只记录 INFO 及以上
NOISY_LOGGERS = ("discord", "discord.gateway", "discord.http")


class LogManager:
    """
    日志管理器 - 进程内只配置一次
    Log manager - configured once per process.

    控制台级别可调，文件始终记录 DEBUG 及以上。
    The console level is adjustable; the file always records DEBUG and up.
    """

    _instance: LogManager | None = None

    def __new__(cls, *args: Any, **kwargs: Any) -> LogManager:
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._configured = False
            cls._instance = instance
        return cls._instance

    def __init__(
        self, log_dir: str | Path = "logs", level: int | str = logging.INFO
    ) -> None:
        if self._configured:
            return
        self._configured = True
        self._log_dir = Path(log_dir)
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._console = self._build_console_handler()
        self._file = self._build_file_handler(self._log_dir / LOG_FILE)

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)
        root.addHandler(self._console)
        root.addHandler(self._file)

        self.set_level(level)

    @staticmethod
    def _build_console_handler() -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            colorlog.ColoredFormatter(
                "%(log_color)s%(asctime)s | %(levelname)-8s%(reset)s | "
                "%(name)s | %(message)s",
                datefmt=DATE_FORMAT,
                log_colors=LEVEL_COLORS,
            )
        )
        return handler

    @staticmethod
    def _build_file_handler(path: Path) -> logging.Handler:
        handler = RotatingFileHandler(
            path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.setLevel(logging.DEBUG)
        return handler

    @property
    def log_file(self) -> Path:
        return self._log_dir / LOG_FILE

    def set_level(self, level: int | str) -> None:
        """
        设置控制台日志级别；DEBUG 时同时放开 py-cord 的调试日志
        Set the console log level; DEBUG also lets py-cord's debug stream through.
        """
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO
        self._console.setLevel(level)
        library_level = logging.DEBUG if level <= logging.DEBUG else logging.INFO
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(library_level)

    @classmethod
    def reset(cls) -> None:
        """移除处理器并丢弃实例 / Detach the handlers and drop the instance."""
        instance = cls._instance
        cls._instance = None
        if instance is None or not instance._configured:
            return
        root = logging.getLogger()
        for handler in (instance._console, instance._file):
            root.removeHandler(handler)
            handler.close()
