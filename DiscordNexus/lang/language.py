"""
语言 - 简易翻译表
Language - minimal translation tables.
"""

from __future__ import annotations

import logging
from typing import Any

from DiscordNexus.lang.keys import TranslationKeys

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "eng"

_TABLES: dict[str, dict[str, str]] = {
    "eng": {
        TranslationKeys.NEXUS_LOADING_CONFIGURATION.value: "Loading configuration...",
        TranslationKeys.NEXUS_LOGIN_INFO.value: "Logged in as {0}",
        TranslationKeys.NEXUS_DEVBUILD.value: (
            "You are running a development build, expect bugs and breaking changes."
        ),
        TranslationKeys.NEXUS_SHUTDOWN.value: "Shutting down...",
        TranslationKeys.COMMAND_NOT_ADMINISTRATOR.value: (
            "You must be an administrator to use this command."
        ),
        TranslationKeys.CONSOLE_UNKNOWN_COMMAND.value: (
            "Unknown command \"{0}\". Type \"help\" for a list of commands."
        ),
    },
    "spa": {
        TranslationKeys.NEXUS_LOADING_CONFIGURATION.value: "Cargando configuración...",
        TranslationKeys.NEXUS_LOGIN_INFO.value: "Sesión iniciada como {0}",
        TranslationKeys.NEXUS_DEVBUILD.value: (
            "Estás usando una versión de desarrollo, puede contener errores."
        ),
        TranslationKeys.NEXUS_SHUTDOWN.value: "Apagando...",
        TranslationKeys.COMMAND_NOT_ADMINISTRATOR.value: (
            "Debes ser administrador para usar este comando."
        ),
        TranslationKeys.CONSOLE_UNKNOWN_COMMAND.value: (
            "Comando desconocido \"{0}\". Escribe \"help\" para ver los comandos."
        ),
    },
}


class Language:
    """
    语言
    Language.

    未知语言回退到英语，未知键原样返回。
    Unknown languages fall back to English; unknown keys are returned as-is.
    """

    def __init__(self, code: str = DEFAULT_LANGUAGE) -> None:
        if code not in _TABLES:
            logger.warning("不支持的语言 %s，使用 %s", code, DEFAULT_LANGUAGE)
            code = DEFAULT_LANGUAGE
        self._code = code
        self._table = _TABLES[code]
        self._fallback = _TABLES[DEFAULT_LANGUAGE]

    @property
    def code(self) -> str:
        return self._code

    @staticmethod
    def available() -> list[str]:
        """可用语言 / Available languages."""
        return list(_TABLES)

    def get(self, key: TranslationKeys | str) -> str:
        """获取翻译文本 / Get the translated text."""
        key_str = key.value if isinstance(key, TranslationKeys) else key
        return self._table.get(key_str) or self._fallback.get(key_str) or key_str

    def translate(self, key: TranslationKeys | str, *params: Any) -> str:
        """获取带参数的翻译文本 / Get the translated text with parameters."""
        return self.get(key).format(*params)
