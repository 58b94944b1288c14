"""
插件描述符 - 插件的生命周期状态
Plugin descriptor - lifecycle state of a plugin.

状态只能前进：
DISCOVERED -> ACTIVATING -> ACTIVE -> DEACTIVATING -> DISABLED
DISCOVERED/ACTIVATING -> FAILED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from DiscordNexus.errors import PluginStateError

if TYPE_CHECKING:
    from DiscordNexus.plugin.handle import RuntimeHandle
    from DiscordNexus.plugin.manifest import PluginManifest


class PluginState(str, Enum):
    """插件状态 / Plugin state."""

    DISCOVERED = "discovered"
    ACTIVATING = "activating"
    ACTIVE = "active"
    DEACTIVATING = "deactivating"
    DISABLED = "disabled"
    FAILED = "failed"


_TRANSITIONS: dict[PluginState, frozenset[PluginState]] = {
    PluginState.DISCOVERED: frozenset({PluginState.ACTIVATING, PluginState.FAILED}),
    PluginState.ACTIVATING: frozenset({PluginState.ACTIVE, PluginState.FAILED}),
    PluginState.ACTIVE: frozenset({PluginState.DEACTIVATING}),
    PluginState.DEACTIVATING: frozenset({PluginState.DISABLED}),
    PluginState.DISABLED: frozenset(),
    PluginState.FAILED: frozenset(),
}


@dataclass
class PluginDescriptor:
    """
    插件描述符 - 仅由插件加载器修改
    Plugin descriptor - only ever mutated by the plugin loader.
    """

    identifier: str
    directory: str
    manifest: PluginManifest | None = None
    instance: Any = None
    handle: RuntimeHandle | None = None
    state: PluginState = PluginState.DISCOVERED
    error: str = ""

    def advance(self, state: PluginState) -> None:
        """
        迁移到新状态
        Move to a new state, raising PluginStateError on illegal transitions.
        """
        if state not in _TRANSITIONS[self.state]:
            raise PluginStateError(
                f"插件 {self.identifier} 不能从 {self.state.value} 迁移到 {state.value}"
            )
        self.state = state

    @property
    def is_active(self) -> bool:
        return self.state is PluginState.ACTIVE
