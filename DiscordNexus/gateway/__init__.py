"""
网关 - 事件源接口与 Discord 适配器
Gateway - the event source interface and the Discord adapter.
"""

from DiscordNexus.gateway.base import CommandInvocation, EventSource

__all__ = ["CommandInvocation", "EventSource"]
