"""
插件清单 - 描述插件的元数据
Plugin manifest - describes plugin metadata.
"""

from __future__ import annotations

import json
import os

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from DiscordNexus.errors import ManifestError

# 按顺序查找的清单文件名
MANIFEST_FILES = ("plugin.yml", "plugin.yaml", "plugin.json")


class PluginManifest(BaseModel):
    """
    插件清单 - 从 plugin.yml 或 plugin.json 加载
    Plugin manifest - loaded from plugin.yml or plugin.json.
    """

    # 插件标识（唯一）
    name: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    # 入口，格式为 "module:Class"，模块相对于插件目录
    main: str = Field(pattern=r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")
    version: str = "0.1.0"
    description: str = ""
    author: str = ""
    # 插件目录路径
    directory: str = ""

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_str(cls, value: object) -> object:
        # YAML 会把 1.0 解析为浮点数
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @property
    def entry_module(self) -> str:
        return self.main.partition(":")[0]

    @property
    def entry_class(self) -> str:
        return self.main.partition(":")[2]

    @classmethod
    def from_directory(cls, directory: str) -> PluginManifest:
        """
        从插件目录加载清单
        Load the manifest of a plugin directory.

        清单缺失或无效时抛出 ManifestError。
        Raises ManifestError when the manifest is missing or invalid.
        """
        for filename in MANIFEST_FILES:
            path = os.path.join(directory, filename)
            if os.path.exists(path):
                return cls.from_file(path)
        raise ManifestError(f"{directory} 中没有插件清单")

    @classmethod
    def from_file(cls, path: str) -> PluginManifest:
        """从清单文件加载 / Load from a manifest file."""
        try:
            with open(path, encoding="utf-8") as f:
                if path.endswith(".json"):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ManifestError(f"无法读取清单 {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ManifestError(f"清单 {path} 顶层必须是映射")

        data["directory"] = os.path.dirname(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ManifestError(f"清单 {path} 无效: {exc}") from exc
