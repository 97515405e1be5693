"""Event bus and host delegate protocol used by ``EditorSession``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Protocol

from markdown_engine.buffer import TextRange

if TYPE_CHECKING:  # pragma: no cover
    from .session import EditorSession

TEXT_CHANGED = "text.changed"
SELECTION_CHANGED = "selection.changed"
FOCUS_GAINED = "focus.gained"
FOCUS_LOST = "focus.lost"
EDIT_INTERCEPTED = "edit.intercepted"
UNDO = "session.undo"
REDO = "session.redo"

ALL_EVENTS = (
    TEXT_CHANGED,
    SELECTION_CHANGED,
    FOCUS_GAINED,
    FOCUS_LOST,
    EDIT_INTERCEPTED,
    UNDO,
    REDO,
)


class EditorBus:
    """Minimal publish/subscribe channel between the session and its hosts."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


class EditorDelegate(Protocol):
    """Host object the session reports to. Held weakly by the session."""

    def did_change(self, session: "EditorSession") -> None:
        ...

    def should_change_text(
        self, session: "EditorSession", target: TextRange, text: str
    ) -> bool:
        ...


__all__ = [
    "ALL_EVENTS",
    "EDIT_INTERCEPTED",
    "FOCUS_GAINED",
    "FOCUS_LOST",
    "REDO",
    "SELECTION_CHANGED",
    "TEXT_CHANGED",
    "UNDO",
    "EditorBus",
    "EditorDelegate",
]
