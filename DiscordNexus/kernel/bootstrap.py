"""
启动引导器 - 进程的生命周期管理
Bootstrap - process lifecycle management.

负责按正确顺序初始化所有子系统，并管理关闭流程。
Responsible for initializing all subsystems in the correct order
and managing the shutdown process.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from typing import Any

from dotenv import dotenv_values

from DiscordNexus import IS_DEVELOPMENT_BUILD
from DiscordNexus.config.defaults import CONFIG_FILE, build_default_config
from DiscordNexus.config.manager import ConfigManager
from DiscordNexus.errors import ConfigError
from DiscordNexus.gateway.base import EventSource
from DiscordNexus.kernel.crash import CrashReporter
from DiscordNexus.kernel.logging import LogManager
from DiscordNexus.kernel.runtime import NexusRuntime
from DiscordNexus.lang.keys import TranslationKeys

logger = logging.getLogger(__name__)

TOKEN_ENV = "CLIENT_TOKEN"


class Bootstrap:
    """
    引导器 - 编排整个进程的启动和关闭
    Bootstrap - orchestrates the startup and shutdown of the process.

    启动顺序：
    1. 加载配置
    2. 初始化日志系统
    3. 安装崩溃报告器
    4. 创建运行时（绑定事件、加载插件、发布命令）
    5. 连接 Discord
    6. 启动控制台读取器
    """

    def __init__(
        self,
        config_path: str = CONFIG_FILE,
        source: EventSource | None = None,
        console: bool = True,
        debug: bool = False,
    ) -> None:
        self._config_path = config_path
        self._source = source
        self._console = console
        self._debug = debug
        self.config: ConfigManager | None = None
        self.runtime: NexusRuntime | None = None
        self.crash_reporter: CrashReporter | None = None
        self._shutdown_event = asyncio.Event()
        self._tasks: list[asyncio.Task[Any]] = []
        self._connection: asyncio.Task[Any] | None = None
        self._closed = False

    async def start(self) -> None:
        """
        启动
        Start everything. Failures here are fatal and propagate.
        """
        await self._init_config()
        self._init_logging()
        self._init_crash_reporter()

        token = self._resolve_token()
        await self._init_runtime()

        assert self.runtime is not None
        self._connection = asyncio.create_task(self.runtime.connect(token))

        if self._console:
            from DiscordNexus.console.reader import ConsoleReader

            reader = ConsoleReader(self.runtime, self.request_shutdown)
            self._tasks.append(asyncio.create_task(reader.run()))

        if IS_DEVELOPMENT_BUILD:
            logger.warning(self.runtime.language.get(TranslationKeys.NEXUS_DEVBUILD))

    async def _init_config(self) -> None:
        """初始化配置 / Initialize configuration."""
        config = ConfigManager(
            defaults=build_default_config(), config_path=self._config_path
        )
        await config.load()
        self.config = config

    def _init_logging(self) -> None:
        """初始化日志 / Initialize logging."""
        assert self.config is not None
        manager = LogManager(
            log_dir=self.config.get("logging.directory", "logs"),
            level=self.config.get("logging.level", "INFO"),
        )
        if self._debug or self.config.get("server.debug", False):
            manager.set_level(logging.DEBUG)
            logger.debug("调试模式已开启")

    def _init_crash_reporter(self) -> None:
        """安装崩溃报告器 / Install the crash reporter."""
        assert self.config is not None
        reporter = CrashReporter(self.config.get("crashdumps.directory", "crashdumps"))
        reporter.install()
        reporter.install_loop(asyncio.get_running_loop())
        self.crash_reporter = reporter

    def _resolve_token(self) -> str:
        """
        令牌来源依次为 server.token、环境变量、配置文件旁的 .env
        Token sources in order: server.token, the environment, then the .env
        file next to the config file.
        """
        assert self.config is not None
        env_file = os.path.join(os.path.dirname(os.path.abspath(self._config_path)), ".env")
        token = (
            self.config.get("server.token")
            or os.environ.get(TOKEN_ENV)
            or dotenv_values(env_file).get(TOKEN_ENV)
        )
        if not token:
            raise ConfigError(
                f"缺少 Discord 令牌：请设置 server.token、环境变量或 .env 中的 {TOKEN_ENV}"
            )
        return token

    async def _init_runtime(self) -> None:
        """创建并启动运行时 / Create and start the runtime."""
        assert self.config is not None
        source = self._source
        if source is None:
            from DiscordNexus.gateway.discord_adapter import DiscordGateway

            source = DiscordGateway()

        if self.config.get("cron.enable", False):
            logger.info("定时任务开关已开启，由插件负责调度")

        self.runtime = NexusRuntime(self.config, source)
        await self.runtime.start()

    def request_shutdown(self) -> None:
        """请求关闭 / Request shutdown."""
        self._shutdown_event.set()

    async def run_forever(self) -> None:
        """
        持续运行直到收到关闭信号或连接结束
        Run until a shutdown signal arrives or the connection ends.

        连接异常结束（例如登录失败）时重新抛出该异常。
        Re-raises the error when the connection ends abnormally (e.g. login).
        """
        loop = asyncio.get_running_loop()

        # 注册系统信号（仅 Unix）
        if sys.platform != "win32":
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self.request_shutdown)

        waiter = asyncio.create_task(self._shutdown_event.wait())
        watched: set[asyncio.Task[Any]] = {waiter}
        if self._connection is not None:
            watched.add(self._connection)

        try:
            done, _ = await asyncio.wait(watched, return_when=asyncio.FIRST_COMPLETED)
            connection = self._connection
            if connection is not None and connection in done and not connection.cancelled():
                connection.result()
        finally:
            waiter.cancel()
            if sys.platform != "win32":
                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.remove_signal_handler(sig)
            await self.shutdown()

    async def shutdown(self) -> None:
        """
        优雅关闭
        Graceful shutdown: disable plugins, disconnect, cancel tasks.
        """
        if self._closed:
            return
        self._closed = True

        if self.runtime is not None:
            timeout = None
            if self.config is not None:
                timeout = self.config.get("plugins.disable_timeout")
            await self.runtime.shutdown(
                timeout=float(timeout) if timeout is not None else None
            )

        tasks = list(self._tasks)
        if self._connection is not None:
            tasks.append(self._connection)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        if self.crash_reporter is not None:
            self.crash_reporter.uninstall()

        logger.info("DiscordNexus 已完全关闭")
