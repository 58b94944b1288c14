"""
默认配置 - 运行时的所有默认配置值
Default configuration - all default configuration values of the runtime.
"""

from __future__ import annotations

from typing import Any

CONFIG_FILE = "nexus.yml"


def build_default_config() -> dict[str, Any]:
    """
    构建默认配置
    Build the default configuration.
    """
    return {
        "server": {
            "debug": False,
            "language": "eng",
            # 留空时读取环境变量 CLIENT_TOKEN
            "token": "",
            "publish_commands": True,
        },
        # 定时任务开关（运行时本身不实现调度）
        "cron": {
            "enable": False,
        },
        "plugins": {
            "directory": "plugins",
            "data_directory": "plugin_data",
            # 每个插件 on_disable 的最长等待秒数
            "disable_timeout": 10,
        },
        "administrators": {
            "file": "administrators.txt",
        },
        "crashdumps": {
            "directory": "crashdumps",
        },
        "logging": {
            "directory": "logs",
            "level": "INFO",
        },
    }
