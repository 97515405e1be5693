"""Token model produced by the tokenizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from markdown_engine.buffer.ranges import TextRange


class TokenKind(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    HEADER = "header"
    LIST = "list"
    INLINE_CODE = "inline_code"
    CODE_BLOCK = "code_block"
    PLAIN = "plain"
    INCOMPLETE_BOLD = "incomplete_bold"
    INCOMPLETE_ITALIC = "incomplete_italic"
    INCOMPLETE_HEADER = "incomplete_header"
    INCOMPLETE_LIST = "incomplete_list"
    INCOMPLETE_INLINE_CODE = "incomplete_inline_code"
    INCOMPLETE_CODE_BLOCK = "incomplete_code_block"

    @property
    def is_incomplete(self) -> bool:
        return self.value.startswith("incomplete_")


@dataclass(frozen=True, slots=True)
class Token:
    """One classified span. ``level`` is set for (incomplete) headers only."""

    kind: TokenKind
    range: TextRange
    content: str
    is_complete: bool
    level: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind in (TokenKind.HEADER, TokenKind.INCOMPLETE_HEADER):
            if self.level is None or not 1 <= self.level <= 6:
                raise ValueError(f"header token requires level 1..6, got {self.level}")
        elif self.level is not None:
            raise ValueError(f"{self.kind.value} token cannot carry a level")

    @property
    def start(self) -> int:
        return self.range.location

    @property
    def end(self) -> int:
        return self.range.end

    def contains_cursor(self, position: int) -> bool:
        """Cursor past the first unit and at or before the end counts as inside."""

        return self.range.location < position <= self.range.end


__all__ = ["TokenKind", "Token"]
