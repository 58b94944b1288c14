"""
插件加载器 - 发现、激活、广播和停用插件
Plugin loader - discovers, activates, broadcasts to and disables plugins.

一个插件失败（清单无效、导入出错、激活抛异常、监听器抛异常）
只影响它自己，不会阻止其他插件。
A failing plugin (bad manifest, import error, activation or listener
exception) only affects itself and never blocks the others.
"""

from __future__ import annotations

import asyncio
import importlib.util
import inspect
import logging
import os
import sys
from types import ModuleType
from typing import TYPE_CHECKING, Any

from DiscordNexus.errors import ManifestError, PluginLoadError
from DiscordNexus.event.base import Event
from DiscordNexus.plugin.base import Plugin, PluginCapability
from DiscordNexus.plugin.handle import RuntimeHandle
from DiscordNexus.plugin.hooks import HookKind, collect_hooks
from DiscordNexus.plugin.manifest import PluginManifest
from DiscordNexus.plugin.state import PluginDescriptor, PluginState

if TYPE_CHECKING:
    from DiscordNexus.command.table import CommandTable
    from DiscordNexus.config.manager import ConfigManager
    from DiscordNexus.store.admins import AdministratorRegistry

logger = logging.getLogger(__name__)

MODULE_PREFIX = "nexus_plugin_"


class PluginLoader:
    """
    插件加载器
    Plugin loader.
    """

    def __init__(
        self,
        commands: CommandTable,
        admins: AdministratorRegistry,
        config: ConfigManager,
        data_directory: str = "plugin_data",
    ) -> None:
        self._commands = commands
        self._admins = admins
        self._config = config
        self._data_directory = data_directory
        # 按发现顺序保存的所有插件
        self._plugins: dict[str, PluginDescriptor] = {}
        # 成功激活的插件，按激活顺序
        self._activation_order: list[PluginDescriptor] = []
        self._load_errors: list[PluginLoadError] = []

    @property
    def plugins(self) -> list[PluginDescriptor]:
        """所有插件描述符（发现顺序） / All descriptors in discovery order."""
        return list(self._plugins.values())

    @property
    def active_plugins(self) -> list[PluginDescriptor]:
        """激活中的插件（激活顺序） / Active plugins in activation order."""
        return [d for d in self._activation_order if d.is_active]

    @property
    def load_errors(self) -> list[PluginLoadError]:
        return list(self._load_errors)

    def get_plugin(self, identifier: str) -> PluginDescriptor | None:
        return self._plugins.get(identifier)

    async def load_plugins(self, directory: str) -> list[PluginDescriptor]:
        """
        加载目录中的所有插件
        Load every plugin bundle found in a directory.

        按目录名排序依次加载；返回本次发现的描述符。
        Bundles are loaded in sorted name order; returns the descriptors found.
        """
        if not os.path.isdir(directory):
            os.makedirs(directory, exist_ok=True)
            logger.info("插件目录不存在，已创建: %s", directory)
            return []

        found: list[PluginDescriptor] = []
        for entry in sorted(os.listdir(directory)):
            bundle_dir = os.path.join(directory, entry)
            if not os.path.isdir(bundle_dir) or entry.startswith((".", "__")):
                continue
            found.append(await self._load_bundle(bundle_dir))

        active = sum(1 for d in found if d.is_active)
        logger.info("已加载 %d 个插件 (%d 个失败)", active, len(found) - active)
        return found

    async def _load_bundle(self, bundle_dir: str) -> PluginDescriptor:
        descriptor = PluginDescriptor(
            identifier=os.path.basename(bundle_dir), directory=bundle_dir
        )

        try:
            manifest = PluginManifest.from_directory(bundle_dir)
            descriptor.identifier = manifest.name
            descriptor.manifest = manifest
            if manifest.name in self._plugins:
                raise ManifestError(f"插件标识重复: {manifest.name}")
            plugin_cls = self._import_entry(manifest, bundle_dir)
            descriptor.instance = self._instantiate(plugin_cls, manifest)
        except Exception as exc:
            self._fail(descriptor, exc)
            self._register(descriptor)
            return descriptor

        self._register(descriptor)
        await self._activate(descriptor)
        return descriptor

    def _register(self, descriptor: PluginDescriptor) -> None:
        # 标识重复时保留先加载的插件
        if descriptor.identifier not in self._plugins:
            self._plugins[descriptor.identifier] = descriptor

    def _import_entry(self, manifest: PluginManifest, bundle_dir: str) -> type:
        module = self._import_module(manifest, bundle_dir)
        plugin_cls = getattr(module, manifest.entry_class, None)
        if not isinstance(plugin_cls, type):
            raise ManifestError(
                f"入口 {manifest.main} 中找不到类 {manifest.entry_class}"
            )
        if not issubclass(plugin_cls, Plugin) and not _implements_capability(plugin_cls):
            raise ManifestError(
                f"入口类 {manifest.main} 未实现 on_enable/on_disable"
            )
        return plugin_cls

    def _import_module(self, manifest: PluginManifest, bundle_dir: str) -> ModuleType:
        relative = manifest.entry_module.replace(".", os.sep)
        module_path = os.path.join(bundle_dir, f"{relative}.py")
        search_locations = None
        if not os.path.exists(module_path):
            # 尝试 __init__.py
            module_path = os.path.join(bundle_dir, relative, "__init__.py")
            search_locations = [os.path.dirname(module_path)]
        if not os.path.exists(module_path):
            raise ManifestError(f"找不到入口模块 {manifest.entry_module}")

        # 允许插件导入同目录下的其他模块
        if bundle_dir not in sys.path:
            sys.path.insert(0, bundle_dir)

        module_name = f"{MODULE_PREFIX}{manifest.name.replace('.', '_').replace('-', '_')}"
        spec = importlib.util.spec_from_file_location(
            module_name, module_path, submodule_search_locations=search_locations
        )
        if spec is None or spec.loader is None:
            raise ManifestError(f"无法导入入口模块 {module_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module

    @staticmethod
    def _instantiate(plugin_cls: type, manifest: PluginManifest) -> Any:
        if issubclass(plugin_cls, Plugin):
            return plugin_cls(manifest)
        return plugin_cls()

    async def _activate(self, descriptor: PluginDescriptor) -> None:
        """
        激活插件：DISCOVERED -> ACTIVATING -> ACTIVE
        Activate a plugin: DISCOVERED -> ACTIVATING -> ACTIVE.
        """
        descriptor.advance(PluginState.ACTIVATING)

        data_dir = os.path.join(self._data_directory, descriptor.identifier)
        handle = RuntimeHandle(
            plugin_id=descriptor.identifier,
            commands=self._commands,
            admins=self._admins,
            config=self._config,
            data_directory=data_dir,
        )
        descriptor.handle = handle
        instance = descriptor.instance

        try:
            os.makedirs(data_dir, exist_ok=True)
            if isinstance(instance, Plugin):
                instance.attach(handle)
            self._register_hooks(instance, handle)
            await _maybe_await(instance.on_enable(handle))
        except Exception as exc:
            self._withdraw_commands(descriptor)
            self._fail(descriptor, exc)
            return

        descriptor.advance(PluginState.ACTIVE)
        self._activation_order.append(descriptor)
        manifest = descriptor.manifest
        logger.info(
            "已激活插件: %s v%s (%d 个命令, %d 个监听器)",
            descriptor.identifier,
            manifest.version if manifest else "?",
            len(handle.command_names),
            len(handle.listeners),
        )

    @staticmethod
    def _register_hooks(instance: Any, handle: RuntimeHandle) -> None:
        hooks = collect_hooks(instance)
        completers = {
            h.target: h.handler for h in hooks if h.kind == HookKind.AUTOCOMPLETE
        }
        for h in hooks:
            if h.kind == HookKind.LISTENER:
                handle.register_listener(h.target, h.handler)
            elif h.kind == HookKind.COMMAND:
                handle.register_command(
                    str(h.target),
                    h.handler,
                    description=h.description,
                    administrator=h.administrator,
                    autocomplete=completers.get(h.target),
                    options=h.options,
                )

    def _fail(self, descriptor: PluginDescriptor, exc: BaseException) -> None:
        descriptor.advance(PluginState.FAILED)
        descriptor.error = f"{type(exc).__name__}: {exc}"
        self._load_errors.append(
            PluginLoadError(descriptor.identifier, descriptor.directory, descriptor.error)
        )
        if isinstance(exc, ManifestError):
            logger.error("插件 %s 加载失败: %s", descriptor.identifier, exc)
        else:
            logger.error(
                "插件 %s 加载失败", descriptor.identifier, exc_info=exc
            )

    def _withdraw_commands(self, descriptor: PluginDescriptor) -> None:
        """
        撤回插件的命令，并恢复被它覆盖的、仍然激活的插件的命令
        Withdraw a plugin's commands, restoring those it shadowed from plugins
        that are still active.
        """
        handle = descriptor.handle
        if handle is None:
            return
        for name in handle.command_names:
            if not self._commands.unregister(name, owner=descriptor.identifier):
                continue
            previous = handle.shadowed(name)
            if previous is None:
                continue
            owner = self._plugins.get(previous.owner)
            if previous.owner and (owner is None or not owner.is_active):
                continue
            self._commands.register(previous)
            logger.debug("已恢复 %s 的命令 %s", previous.owner or "-", name)

    async def call_event(self, envelope: Event) -> None:
        """
        向所有激活的插件广播事件
        Broadcast an envelope to every active plugin, in activation order.

        单个监听器出错只记录日志，不影响后续监听器。
        A failing listener is logged and never stops the others.
        """
        for descriptor in list(self._activation_order):
            if not descriptor.is_active or descriptor.handle is None:
                continue
            for callback in descriptor.handle.listeners_for(envelope):
                try:
                    await _maybe_await(callback(envelope))
                except Exception:
                    logger.exception(
                        "插件 %s 的监听器处理 %s 时出错",
                        descriptor.identifier,
                        envelope.kind,
                    )

    async def disable_plugins(self, timeout: float | None = None) -> None:
        """
        按激活的逆序停用所有插件
        Disable every active plugin in reverse activation order.

        timeout 限制每个 on_disable 的等待时间；重复调用不会有任何效果。
        timeout bounds each on_disable; calling this twice is a no-op.
        """
        for descriptor in reversed(self._activation_order):
            if not descriptor.is_active:
                continue
            descriptor.advance(PluginState.DEACTIVATING)
            try:
                result = descriptor.instance.on_disable()
                if inspect.isawaitable(result):
                    await asyncio.wait_for(result, timeout)
            except asyncio.TimeoutError:
                logger.error(
                    "插件 %s 停用超时 (%.1f 秒)", descriptor.identifier, timeout
                )
            except Exception:
                logger.exception("插件 %s 停用时出错", descriptor.identifier)
            finally:
                self._withdraw_commands(descriptor)
                descriptor.advance(PluginState.DISABLED)
            logger.info("已停用插件: %s", descriptor.identifier)


def _implements_capability(cls: type) -> bool:
    return all(
        callable(getattr(cls, name, None)) for name in ("on_enable", "on_disable")
    ) and issubclass(cls, PluginCapability)


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
