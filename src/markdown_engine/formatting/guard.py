"""Scoped re-entrancy guard for formatting-triggered mutations."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import List


class ReentrancyGuard(AbstractContextManager["ReentrancyGuard"]):
    """Held for the duration of a ``with`` block, released on every exit path.

    Nested acquisition is allowed; each exit restores the state seen on entry.
    """

    def __init__(self) -> None:
        self._held = False
        self._saved: List[bool] = []

    @property
    def held(self) -> bool:
        return self._held

    def __enter__(self) -> "ReentrancyGuard":
        self._saved.append(self._held)
        self._held = True
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._held = self._saved.pop() if self._saved else False
        return False


__all__ = ["ReentrancyGuard"]
