"""Snapshot-based undo/redo history.

Every mutating operation pushes the pre-mutation snapshot. The undo stack is bounded and evicts
its oldest entry first; any new entry clears the redo stack (linear history).
"""

from __future__ import annotations

from collections import deque

from outliner.logging import get_logger
from outliner.models.snapshot import EditorSnapshot

logger = get_logger(__name__)


class HistoryManager:
    """Bounded undo stack plus an unbounded redo stack."""

    def __init__(self, limit: int = 200) -> None:
        self.limit = max(1, limit)
        self._undo: deque[EditorSnapshot] = deque()
        self._redo: list[EditorSnapshot] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo_depth(self) -> int:
        return len(self._undo)

    def redo_depth(self) -> int:
        return len(self._redo)

    def push(self, snapshot: EditorSnapshot) -> None:
        """Record a pre-mutation snapshot and invalidate redo."""

        self._undo.append(snapshot)
        if len(self._undo) > self.limit:
            self._undo.popleft()
            logger.info("History limit %d reached; oldest entry evicted", self.limit)
        self._redo.clear()

    def undo(self, current: EditorSnapshot) -> EditorSnapshot | None:
        """Pop the latest undo entry, parking `current` on the redo stack."""

        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._redo.append(current)
        return snapshot

    def redo(self, current: EditorSnapshot) -> EditorSnapshot | None:
        """Pop the latest redo entry, parking `current` on the undo stack."""

        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(current)
        return snapshot

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
