"""
持久化列表 - 每行一个条目的文本文件
Persisted list - a text file holding one item per line.

每次修改都会立即刷写到磁盘。
Every mutation is flushed to disk before the call returns.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class PersistedList:
    """
    持久化列表
    Persisted list backed by a flat text file.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._items: list[str] = []
        self.reload()

    @property
    def path(self) -> str:
        """文件路径 / Backing file path."""
        return self._path

    def reload(self) -> None:
        """
        从磁盘重新读取
        Re-read the backing file. A missing file is created empty.
        """
        if not os.path.exists(self._path):
            os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
            with open(self._path, "w", encoding="utf-8"):
                pass
            self._items = []
            return

        with open(self._path, encoding="utf-8") as f:
            self._items = [line.strip() for line in f if line.strip()]

    def get_all(self) -> list[str]:
        """获取所有条目的副本 / Get a copy of all items."""
        return list(self._items)

    def set_all(self, items: Iterable[str]) -> None:
        """替换所有条目（不刷写） / Replace all items without flushing."""
        self._items = [str(item) for item in items]

    def append(self, item: str) -> None:
        """追加条目并刷写 / Append an item and flush."""
        self._items.append(str(item))
        self.save()

    def filter(self, predicate: Callable[[str], bool]) -> int:
        """
        保留满足条件的条目并刷写，返回移除的数量
        Keep items matching predicate, flush, and return how many were removed.
        """
        before = len(self._items)
        self._items = [item for item in self._items if predicate(item)]
        self.save()
        return before - len(self._items)

    def save(self) -> None:
        """
        原子写入磁盘
        Atomically write the list to disk.
        """
        directory = os.path.dirname(os.path.abspath(self._path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write("\n".join(self._items))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError:
            logger.exception("写入文件失败: %s", self._path)
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def __contains__(self, item: object) -> bool:
        return str(item) in self._items

    def __len__(self) -> int:
        return len(self._items)
