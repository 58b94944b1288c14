"""
管理员登记表 - 拥有特权命令权限的用户
Administrator registry - users allowed to run privileged commands.
"""

from __future__ import annotations

import logging

from DiscordNexus.store.persisted_list import PersistedList

logger = logging.getLogger(__name__)


class AdministratorRegistry:
    """
    管理员登记表
    Administrator registry.

    每次操作前都会重新读取文件。
    The backing file is re-read before every operation.
    """

    def __init__(self, records: PersistedList) -> None:
        self._records = records

    @classmethod
    def from_file(cls, path: str) -> AdministratorRegistry:
        """从文件创建 / Create from a file path."""
        return cls(PersistedList(path))

    def is_administrator(self, user_id: int | str) -> bool:
        """是否为管理员 / Whether the user is an administrator."""
        self._records.reload()
        return str(user_id) in self._records

    def add(self, user_id: int | str) -> None:
        """添加管理员 / Add an administrator."""
        self._records.reload()
        self._records.append(str(user_id))
        logger.info("已添加管理员: %s", user_id)

    def remove(self, user_id: int | str) -> int:
        """
        移除管理员的所有记录，返回移除的数量
        Remove every occurrence of the user, returning how many were removed.
        """
        self._records.reload()
        target = str(user_id)
        removed = self._records.filter(lambda item: item != target)
        logger.info("已移除管理员: %s (%d 条记录)", user_id, removed)
        return removed

    def list(self) -> list[str]:
        """列出管理员（去重，保持插入顺序） / List administrators, de-duplicated."""
        self._records.reload()
        return list(dict.fromkeys(self._records.get_all()))
