"""Colours and fonts the formatting engine applies on top of the default style."""

from __future__ import annotations

from dataclasses import dataclass, replace

from markdown_engine.buffer.attributes import (
    HIDDEN_FONT_SIZE,
    LABEL,
    SECONDARY_LABEL,
    Color,
    Font,
)

BULLET = "•"


@dataclass(frozen=True, slots=True)
class EditorTheme:
    default_font: Font = Font()
    default_color: Color = LABEL
    dimmed_color: Color = SECONDARY_LABEL
    code_foreground: Color = Color.from_hex("#c7254e")
    code_background: Color = Color.from_hex("#f2f2f7")
    code_font_family: str = "monospace"
    hidden_font_size: float = HIDDEN_FONT_SIZE
    bullet: str = BULLET

    def with_default_style(self, font: Font, color: Color) -> "EditorTheme":
        return replace(self, default_font=font, default_color=color)

    def header_font(self, level: int) -> Font:
        base = self.default_font.size
        return self.default_font.emboldened(max(base, base + (6 - level) * 2))

    def code_font(self) -> Font:
        return replace(self.default_font, family=self.code_font_family, monospace=True)


__all__ = ["BULLET", "EditorTheme"]
