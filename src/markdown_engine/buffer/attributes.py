"""Style value types and the per-character attribute overlay."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Optional

from .ranges import TextRange

HIDDEN_FONT_SIZE = 0.01


@dataclass(frozen=True, slots=True)
class Color:
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @classmethod
    def from_hex(cls, value: str, *, alpha: float = 1.0) -> "Color":
        raw = value.lstrip("#")
        if len(raw) != 6:
            raise ValueError(f"Expected #rrggbb colour, got '{value}'")
        red, green, blue = (int(raw[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
        return cls(red, green, blue, alpha)

    @property
    def is_transparent(self) -> bool:
        return self.alpha <= 0.0

    def to_hex(self) -> str:
        return "#" + "".join(
            f"{round(channel * 255):02x}" for channel in (self.red, self.green, self.blue)
        )


CLEAR = Color(0.0, 0.0, 0.0, 0.0)
LABEL = Color(0.0, 0.0, 0.0)
SECONDARY_LABEL = Color.from_hex("#3c3c43", alpha=0.6)


@dataclass(frozen=True, slots=True)
class Font:
    family: str = "system"
    size: float = 16.0
    bold: bool = False
    italic: bool = False
    monospace: bool = False

    def with_size(self, size: float) -> "Font":
        return replace(self, size=size)

    def emboldened(self, size: Optional[float] = None) -> "Font":
        return replace(self, bold=True, italic=False, size=self.size if size is None else size)

    def italicized(self) -> "Font":
        return replace(self, italic=True, bold=False)


@dataclass(frozen=True, slots=True)
class TextStyle:
    """Attributes attached to one character of the live buffer."""

    font: Font = Font()
    foreground: Color = LABEL
    background: Optional[Color] = None

    @property
    def is_hidden(self) -> bool:
        return self.foreground.is_transparent


@dataclass(frozen=True, slots=True)
class StyleRun:
    range: TextRange
    style: TextStyle


class StyleOverlay:
    """Range -> style mapping kept index-aligned with the live buffer.

    Mutators never touch text; ``splice`` is called by the document whenever
    characters are replaced so the overlay length always equals the text length.
    """

    def __init__(self, length: int = 0, *, default: Optional[TextStyle] = None) -> None:
        self.default = default or TextStyle()
        self._styles: List[TextStyle] = [self.default] * length

    def __len__(self) -> int:
        return len(self._styles)

    def style_at(self, index: int) -> TextStyle:
        return self._styles[index]

    def splice(self, target: TextRange, inserted: int) -> None:
        self._styles[target.location : target.end] = [self.default] * inserted

    def _indices(self, target: TextRange) -> range:
        clamped = target.clamped(len(self._styles))
        return range(clamped.location, clamped.end)

    def apply_default_style(self, target: TextRange) -> None:
        for index in self._indices(target):
            self._styles[index] = self.default

    def apply_font(self, target: TextRange, font: Font) -> None:
        for index in self._indices(target):
            self._styles[index] = replace(self._styles[index], font=font)

    def apply_foreground(self, target: TextRange, color: Color) -> None:
        for index in self._indices(target):
            self._styles[index] = replace(self._styles[index], foreground=color)

    def apply_background(self, target: TextRange, color: Optional[Color]) -> None:
        for index in self._indices(target):
            self._styles[index] = replace(self._styles[index], background=color)

    def hide(self, target: TextRange, *, size: float = HIDDEN_FONT_SIZE) -> None:
        """Make glyphs visually absent while leaving them in the buffer."""

        for index in self._indices(target):
            style = self._styles[index]
            self._styles[index] = replace(
                style, foreground=CLEAR, font=style.font.with_size(size)
            )

    def runs(self, target: Optional[TextRange] = None) -> Iterator[StyleRun]:
        indices = self._indices(target or TextRange(0, len(self._styles)))
        run_start: Optional[int] = None
        current: Optional[TextStyle] = None
        for index in indices:
            style = self._styles[index]
            if style != current:
                if current is not None and run_start is not None:
                    yield StyleRun(TextRange.between(run_start, index), current)
                run_start, current = index, style
        if current is not None and run_start is not None:
            yield StyleRun(TextRange.between(run_start, indices.stop), current)


__all__ = [
    "CLEAR",
    "LABEL",
    "SECONDARY_LABEL",
    "HIDDEN_FONT_SIZE",
    "Color",
    "Font",
    "TextStyle",
    "StyleRun",
    "StyleOverlay",
]
