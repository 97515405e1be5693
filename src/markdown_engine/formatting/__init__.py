"""Cursor-aware formatting: theme, guard, bullet substitution and the engine."""

from .bullets import LIST_MARKERS, BulletSubstitutor, MarkerState
from .engine import FormattingEngine
from .guard import ReentrancyGuard
from .theme import BULLET, EditorTheme

__all__ = [
    "BULLET",
    "LIST_MARKERS",
    "BulletSubstitutor",
    "EditorTheme",
    "FormattingEngine",
    "MarkerState",
    "ReentrancyGuard",
]
