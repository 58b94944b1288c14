"""
运行时 - 插件生命周期与事件/命令分发的组合根
Runtime - composition root of plugin lifecycle and event/command dispatch.

运行时拥有管理员登记表、命令表、插件加载器和事件绑定器，
并按顺序初始化它们。每个事件先广播给所有插件，若是命令交互，
再交给交互路由器处理。
The runtime owns the administrator registry, command table, plugin loader
and event binder, and initializes them in order. Every envelope is broadcast
to all plugins first; command interactions are then routed.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from DiscordNexus.command.table import CommandTable
from DiscordNexus.event.base import Event
from DiscordNexus.event.binder import EventBinder
from DiscordNexus.event.builtin import ReadyEvent, default_registry
from DiscordNexus.event.registry import EventRegistry
from DiscordNexus.kernel.dispatch import DispatchResult, InteractionRouter
from DiscordNexus.lang.keys import TranslationKeys
from DiscordNexus.lang.language import Language
from DiscordNexus.plugin.loader import PluginLoader
from DiscordNexus.store.admins import AdministratorRegistry

if TYPE_CHECKING:
    from DiscordNexus.config.manager import ConfigManager
    from DiscordNexus.gateway.base import EventSource

logger = logging.getLogger(__name__)


class NexusRuntime:
    """
    运行时 - 进程启动时创建一次，显式传给需要它的组件
    Runtime - built once at process start and passed explicitly where needed.
    """

    def __init__(
        self,
        config: ConfigManager,
        source: EventSource,
        admins: AdministratorRegistry | None = None,
        registry: EventRegistry | None = None,
        language: Language | None = None,
    ) -> None:
        self.config = config
        self.source = source
        self.admins = admins or AdministratorRegistry.from_file(
            config.get("administrators.file", "administrators.txt")
        )
        self.language = language or Language(config.get("server.language", "eng"))
        self.commands = CommandTable()
        self.binder = EventBinder(registry or default_registry())
        self.loader = PluginLoader(
            self.commands,
            self.admins,
            config,
            data_directory=config.get("plugins.data_directory", "plugin_data"),
        )
        self.router = InteractionRouter(self.commands, self.admins, self.language)
        self._started = False

    async def start(self) -> None:
        """
        初始化：绑定事件 -> 加载插件 -> 发布命令
        Initialize: bind events -> load plugins -> publish commands.

        必须在建立连接之前调用，且只会执行一次。
        Must run before connecting; only runs once.
        """
        if self._started:
            return
        self._started = True

        logger.info(self.language.get(TranslationKeys.NEXUS_LOADING_CONFIGURATION))

        self.binder.bind(self.source, self.broadcast)

        os.makedirs(self.config.get("plugins.data_directory", "plugin_data"), exist_ok=True)
        await self.loader.load_plugins(self.config.get("plugins.directory", "plugins"))

        if self.config.get("server.publish_commands", True):
            await self.source.publish_commands(self.commands)

    async def broadcast(self, envelope: Event) -> DispatchResult | None:
        """
        分发一个事件
        Dispatch one envelope: broadcast to plugins, then route commands.
        """
        if isinstance(envelope, ReadyEvent):
            user = self.source.user
            logger.info(
                self.language.translate(
                    TranslationKeys.NEXUS_LOGIN_INFO,
                    getattr(user, "name", user),
                )
            )

        await self.loader.call_event(envelope)

        try:
            invocation = self.source.as_invocation(envelope)
        except Exception:
            logger.exception("解析 %s 事件中的命令交互失败", envelope.kind)
            return None

        if invocation is None:
            return None
        return await self.router.route(invocation)

    async def connect(self, token: str) -> None:
        """连接事件源，直到连接关闭 / Connect the source until it closes."""
        await self.source.connect(token)

    async def shutdown(self, timeout: float | None = None) -> None:
        """
        停用所有插件并断开连接
        Disable every plugin, then disconnect.
        """
        logger.info(self.language.get(TranslationKeys.NEXUS_SHUTDOWN))
        await self.loader.disable_plugins(timeout)
        try:
            await self.source.close()
        except Exception:
            logger.exception("关闭事件源时出错")
