"""Linear undo/redo history for host edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(slots=True)
class UndoEntry:
    """Snapshot pair of the shadow (source) text around one accepted edit."""

    label: str
    before_text: str
    after_text: str
    cursor_before: int
    cursor_after: int


class UndoTimeline:
    """Linear undo/redo history; pushing after an undo drops the redo tail."""

    def __init__(self, *, limit: int = 500) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1
        self._limit = limit

    def push(self, entry: UndoEntry) -> None:
        if entry.before_text == entry.after_text:
            return
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(entry)
        if len(self._entries) > self._limit:
            self._entries.pop(0)
        self._index = len(self._entries) - 1

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]

    def __len__(self) -> int:
        return len(self._entries)
