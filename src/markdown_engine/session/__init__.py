"""Host-facing editor session, event bus and delegate protocol."""

from .events import (
    ALL_EVENTS,
    EDIT_INTERCEPTED,
    FOCUS_GAINED,
    FOCUS_LOST,
    REDO,
    SELECTION_CHANGED,
    TEXT_CHANGED,
    UNDO,
    EditorBus,
    EditorDelegate,
)
from .session import EditorSession, EditTransaction

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
    "EditorSession",
    "EditTransaction",
]
