"""List-marker substitution: ``-``/``*``/``+`` <-> bullet glyph per list item."""

from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Dict, Optional

from markdown_engine.buffer import MarkdownDocument, MutationMode, TextRange
from markdown_engine.parsing import Token, TokenKind
from markdown_engine.runtime import telemetry

from .guard import ReentrancyGuard
from .theme import BULLET

LIST_MARKERS = frozenset("-*+")


class MarkerState(str, Enum):
    RAW = "raw"
    BULLETED = "bulleted"


class BulletSubstitutor:
    """Swaps one marker character in the live buffer, never in the shadow buffer.

    Every swap runs under ``guard`` with ``MutationMode.PRESENTATION`` so the
    formatting engine ignores the resulting edit notification.
    """

    def __init__(
        self,
        document: MarkdownDocument,
        guard: ReentrancyGuard,
        *,
        bullet: str = BULLET,
        logger_name: Optional[str] = None,
    ) -> None:
        self.document = document
        self.guard = guard
        self.bullet = bullet
        self._logger_name = logger_name
        self.replacements: Dict[TextRange, str] = {}

    def state_of(self, token: Token) -> MarkerState:
        if self.document.char_at(token.start) == self.bullet:
            return MarkerState.BULLETED
        return MarkerState.RAW

    def sync(self, token: Token, *, cursor_inside: bool, cursor: int) -> int:
        """Drive ``token``'s marker to the state the cursor calls for.

        Returns the cursor position adjusted for any change in buffer length.
        """

        if token.kind is not TokenKind.LIST:
            return cursor
        state = self.state_of(token)
        if not cursor_inside and state is MarkerState.RAW:
            return self._substitute(token, cursor)
        if cursor_inside and state is MarkerState.BULLETED:
            return self._restore(token, cursor)
        return cursor

    def reconcile(self, target: TextRange, *, keep: AbstractSet[int] = frozenset()) -> None:
        """Put back shadow characters for substitutions no longer backed by a list item."""

        target = target.clamped(self.document.length)
        self.replacements = {
            key: marker
            for key, marker in self.replacements.items()
            if not target.overlaps(key) or key.location in keep
        }
        live = self.document.text
        source = self.document.source_text
        if live[target.location : target.end] == source[target.location : target.end]:
            return
        for index in range(target.location, target.end):
            if index in keep or live[index] == source[index]:
                continue
            with self.guard:
                self.document.mutate_text(
                    TextRange(index, 1), source[index], mode=MutationMode.PRESENTATION
                )
            live = self.document.text

    def _substitute(self, token: Token, cursor: int) -> int:
        original = self.document.char_at(token.start)
        if original not in LIST_MARKERS:
            return cursor
        self.replacements[token.range] = original
        cursor = self._swap(token.start, self.bullet, cursor)
        self.document.attributes.apply_default_style(TextRange(token.start, 2))
        telemetry.record_event(
            "bullet.substitute",
            level="debug",
            data={"location": token.start, "marker": original},
            logger_name=self._logger_name,
        )
        return cursor

    def _restore(self, token: Token, cursor: int) -> int:
        original = self.document.source_char_at(token.start)
        if original is None or original not in LIST_MARKERS:
            original = self.replacements.get(token.range, "-")
        self.replacements.pop(token.range, None)
        cursor = self._swap(token.start, original, cursor)
        telemetry.record_event(
            "bullet.restore",
            level="debug",
            data={"location": token.start, "marker": original},
            logger_name=self._logger_name,
        )
        return cursor

    def _swap(self, location: int, replacement: str, cursor: int) -> int:
        with self.guard:
            delta = self.document.mutate_text(
                TextRange(location, 1), replacement, mode=MutationMode.PRESENTATION
            )
        if delta and cursor >= location:
            cursor += delta
        return cursor

    def forget(self) -> None:
        self.replacements.clear()


__all__ = ["BulletSubstitutor", "MarkerState", "LIST_MARKERS"]
