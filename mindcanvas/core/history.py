"""Bounded snapshot undo/redo history."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..model.node import Node

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True)
class HistoryRecord:
    action: str
    node_id: Optional[str]
    before: Node
    after: Node


class History:
    """
    Each record holds deep copies of the tree before and after one mutation.
    Recording after an undo drops the redo branch; the oldest record is
    dropped once the limit is reached.
    """

    def __init__(self, limit: int = MAX_HISTORY) -> None:
        self.limit = limit
        self._records: list[HistoryRecord] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._records)

    @property
    def can_undo(self) -> bool:
        return self._index >= 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._records) - 1

    def record(self, action: str, node_id: Optional[str], before: Node, after: Node) -> None:
        del self._records[self._index + 1:]
        self._records.append(HistoryRecord(action, node_id, before.clone(), after.clone()))
        if len(self._records) > self.limit:
            self._records.pop(0)
        self._index = len(self._records) - 1
        logger.debug("History: %s %s (%d records)", action, node_id, len(self._records))

    def undo(self) -> Optional[Node]:
        """Tree state before the current record (a fresh copy), or None."""
        if not self.can_undo:
            return None
        record = self._records[self._index]
        self._index -= 1
        return record.before.clone()

    def redo(self) -> Optional[Node]:
        if not self.can_redo:
            return None
        self._index += 1
        return self._records[self._index].after.clone()

    def clear(self) -> None:
        self._records.clear()
        self._index = -1
