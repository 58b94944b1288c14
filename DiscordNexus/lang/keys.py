"""
翻译键 - 运行时使用的所有文本键
Translation keys used by the runtime.
"""

from __future__ import annotations

from enum import Enum


class TranslationKeys(str, Enum):
    """翻译键 / Translation keys."""

    NEXUS_LOADING_CONFIGURATION = "nexus.loading_configuration"
    NEXUS_LOGIN_INFO = "nexus.login_info"
    NEXUS_DEVBUILD = "nexus.devbuild"
    NEXUS_SHUTDOWN = "nexus.shutdown"
    COMMAND_NOT_ADMINISTRATOR = "command.not_administrator"
    CONSOLE_UNKNOWN_COMMAND = "console.unknown_command"
