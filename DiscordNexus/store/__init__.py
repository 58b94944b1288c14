"""
本地存储 - 持久化列表与管理员登记表
Local storage - persisted lists and the administrator registry.
"""

from DiscordNexus.store.admins import AdministratorRegistry
from DiscordNexus.store.persisted_list import PersistedList

__all__ = ["AdministratorRegistry", "PersistedList"]
