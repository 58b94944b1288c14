"""
配置管理器 - nexus.yml 的读取与默认值合并
Config manager - reads nexus.yml and fills in missing defaults.
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Any

import yaml

from DiscordNexus.config.defaults import CONFIG_FILE
from DiscordNexus.errors import ConfigError

logger = logging.getLogger(__name__)

_MISSING = object()

# 必须为数字的配置项
NUMERIC_KEYS = ("plugins.disable_timeout",)


class ConfigManager:
    """
    配置管理器
    Config manager.

    - 点分隔的嵌套键（如 "server.token"）
    - 文件中缺少的键用默认值补齐，已有值不会被覆盖
    - 文件不存在时写出一份默认配置
    """

    def __init__(
        self,
        defaults: dict[str, Any] | None = None,
        config_path: str = CONFIG_FILE,
    ) -> None:
        self._defaults = copy.deepcopy(defaults or {})
        self._data: dict[str, Any] = {}
        self._path = config_path

    @property
    def path(self) -> str:
        return self._path

    async def load(self) -> None:
        """
        读取配置文件
        Read the config file.

        文件无法解析、顶层不是映射或类型不对时抛出 ConfigError。
        Raises ConfigError on parse errors, a non-mapping document or bad types.
        """
        if not os.path.exists(self._path):
            logger.info("配置文件 %s 不存在，已写出默认配置", self._path)
            self._write(self._defaults)
            data: Any = {}
        else:
            data = self._read()

        _merge_missing(data, self._defaults)
        self._validate(data)
        self._data = data

    def _read(self) -> dict[str, Any]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"无法读取配置文件 {self._path}: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"配置文件 {self._path} 顶层必须是映射")
        logger.info("已读取配置文件 %s", self._path)
        return data

    def _write(self, data: dict[str, Any]) -> None:
        os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)

    @staticmethod
    def _validate(data: dict[str, Any]) -> None:
        for key in NUMERIC_KEYS:
            value = _lookup(data, key)
            if value is _MISSING or value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"配置项 {key} 必须是数字，当前为 {value!r}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        读取配置项的副本；键不存在或值为空时返回 default
        Get a copy of a value; default when the key is missing or null.
        """
        value = _lookup(self._data, key)
        if value is _MISSING or value is None:
            return default
        return copy.deepcopy(value)

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


def _lookup(data: dict[str, Any], key: str) -> Any:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _merge_missing(target: dict[str, Any], defaults: dict[str, Any]) -> None:
    """递归补齐缺少的键 / Recursively fill in missing keys."""
    for key, value in defaults.items():
        if key not in target:
            target[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(target[key], dict):
            _merge_missing(target[key], value)
