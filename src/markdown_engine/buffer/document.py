"""Live text buffer, its shadow copy and the attribute overlay."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from markdown_engine.runtime import telemetry

from .attributes import StyleOverlay, TextStyle
from .ranges import TextRange, clamp_position


class MutationMode(str, Enum):
    """How a mutation propagates between the live and shadow buffers."""

    EDIT = "edit"
    PRESENTATION = "presentation"


@dataclass(frozen=True, slots=True)
class EditedRange:
    """Notification payload fired after every text mutation.

    ``range`` covers the replacement text in post-edit coordinates.
    """

    range: TextRange
    change_in_length: int
    mode: MutationMode


EditListener = Callable[[EditedRange], None]


class MarkdownDocument:
    """Authoritative text plus the shadow buffer used to recover list markers.

    ``EDIT`` mutations are mirrored into the shadow buffer at the same range.
    ``PRESENTATION`` mutations (marker/bullet swaps) touch only the live text.
    """

    def __init__(self, text: str = "", *, default_style: Optional[TextStyle] = None) -> None:
        self._text = text
        self._source = text
        self.attributes = StyleOverlay(len(text), default=default_style)
        self.version = 0
        self._listeners: List[EditListener] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def source_text(self) -> str:
        return self._source

    @property
    def length(self) -> int:
        return len(self._text)

    def __len__(self) -> int:
        return len(self._text)

    def char_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._text):
            return self._text[index]
        return None

    def source_char_at(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._source):
            return self._source[index]
        return None

    def substring(self, target: TextRange) -> str:
        target = target.clamped(len(self._text))
        return self._text[target.location : target.end]

    def add_listener(self, listener: EditListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: EditListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def mutate_text(
        self,
        target: TextRange,
        new_text: str,
        *,
        mode: MutationMode = MutationMode.EDIT,
    ) -> int:
        """Replace ``target`` with ``new_text`` and return the change in length."""

        target = target.clamped(len(self._text))
        with telemetry.span(
            "buffer::mutate",
            component="buffer",
            metadata={"location": target.location, "mode": mode.value},
        ):
            self._text = self._text[: target.location] + new_text + self._text[target.end :]
            if mode is MutationMode.EDIT:
                self._source = (
                    self._source[: target.location] + new_text + self._source[target.end :]
                )
            self.attributes.splice(target, len(new_text))
            self.version += 1

        delta = len(new_text) - target.length
        edited = EditedRange(TextRange(target.location, len(new_text)), delta, mode)
        for listener in list(self._listeners):
            listener(edited)
        return delta

    def replace_all(self, text: str) -> int:
        return self.mutate_text(TextRange(0, len(self._text)), text)

    def clamp(self, position: int) -> int:
        return clamp_position(position, len(self._text))

    @property
    def full_range(self) -> TextRange:
        return TextRange(0, len(self._text))


__all__ = ["MarkdownDocument", "MutationMode", "EditedRange", "EditListener"]
