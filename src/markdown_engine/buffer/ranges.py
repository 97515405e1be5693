"""Offset/length ranges and the paragraph/line arithmetic built on them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open span ``[location, location + length)`` over buffer offsets."""

    location: int
    length: int = 0

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("TextRange length cannot be negative")

    @property
    def end(self) -> int:
        return self.location + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def intersection_length(self, other: "TextRange") -> int:
        return max(0, min(self.end, other.end) - max(self.location, other.location))

    def overlaps(self, other: "TextRange") -> bool:
        return self.intersection_length(other) > 0

    def clamped(self, limit: int) -> "TextRange":
        """Return this range forced inside ``[0, limit]``."""

        start = clamp_position(self.location, limit)
        end = clamp_position(self.end, limit)
        return TextRange(start, max(0, end - start))

    @classmethod
    def between(cls, start: int, end: int) -> "TextRange":
        if end < start:
            start, end = end, start
        return cls(start, end - start)


def clamp_position(position: int, limit: int) -> int:
    return max(0, min(position, limit))


def paragraph_range(text: str, target: TextRange) -> TextRange:
    """Paragraph(s) covering ``target``, trailing newline included.

    A paragraph runs from the character after the previous ``\\n`` up to and
    including the next ``\\n`` (or the end of the text).
    """

    target = target.clamped(len(text))
    start = text.rfind("\n", 0, target.location) + 1
    tail = target.end - 1 if target.length else target.location
    newline = text.find("\n", max(tail, target.location))
    end = len(text) if newline == -1 else newline + 1
    return TextRange.between(start, end)


def line_range(text: str, position: int) -> TextRange:
    return paragraph_range(text, TextRange(clamp_position(position, len(text))))


def line_content_range(text: str, position: int) -> TextRange:
    """Like ``line_range`` but without the terminating newline."""

    line = line_range(text, position)
    if line.length and text[line.end - 1] == "\n":
        return TextRange(line.location, line.length - 1)
    return line


def is_line_start(text: str, position: int) -> bool:
    return position == 0 or (0 < position <= len(text) and text[position - 1] == "\n")


__all__ = [
    "TextRange",
    "clamp_position",
    "paragraph_range",
    "line_range",
    "line_content_range",
    "is_line_start",
]
