"""
内核模块 - 运行时的组合根与进程生命周期
Kernel module - the runtime composition root and process lifecycle.

包含运行时、交互路由、启动引导、日志和崩溃报告。
Contains the runtime, interaction router, bootstrap, logging and crash reports.
"""

from DiscordNexus.kernel.bootstrap import Bootstrap
from DiscordNexus.kernel.dispatch import DispatchResult, InteractionRouter, InteractionState
from DiscordNexus.kernel.runtime import NexusRuntime

__all__ = [
    "Bootstrap",
    "DispatchResult",
    "InteractionRouter",
    "InteractionState",
    "NexusRuntime",
]
