"""Static pattern table, compiled once at import.

Order in ``COMPLETE_PATTERNS`` and ``INCOMPLETE_PATTERNS`` is claim order:
an earlier pattern wins any overlap with a later one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from .models import TokenKind


class PatternCompileError(RuntimeError):
    """Raised when a static pattern fails to compile; the tokenizer is unusable."""

    def __init__(self, name: str, source: str, reason: str) -> None:
        super().__init__(f"Pattern '{name}' failed to compile: {reason} ({source!r})")
        self.name = name
        self.source = source


def compile_pattern(name: str, source: str, flags: int = 0) -> Pattern[str]:
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise PatternCompileError(name, source, str(exc)) from exc


@dataclass(frozen=True, slots=True)
class TokenPattern:
    """Compiled regex plus how to read a token out of one of its matches.

    ``content_group`` selects the token content (``None`` = ``literal``);
    ``level_group`` selects the run of ``#`` whose length is the header level.
    """

    kind: TokenKind
    regex: Pattern[str]
    content_group: Optional[int] = 1
    literal: str = ""
    level_group: Optional[int] = None

    def content_of(self, match: "re.Match[str]") -> str:
        if self.content_group is None:
            return self.literal
        return match.group(self.content_group)

    def level_of(self, match: "re.Match[str]") -> Optional[int]:
        if self.level_group is None:
            return None
        return len(match.group(self.level_group))


HEADER = compile_pattern("header", r"^(#{1,6})[^\S\n]+(.+)", re.MULTILINE)
LIST_ITEM = compile_pattern("list", r"^([-*+])[^\S\n]+(.+)", re.MULTILINE)
BOLD = compile_pattern("bold", r"\*\*(.+?)\*\*")
ITALIC = compile_pattern("italic", r"\*(.+?)\*")
# A backtick that opens a fence is not an inline-code opener.
INLINE_CODE = compile_pattern("inline_code", r"(?<!`)`(?!``)(.+?)`")
CODE_BLOCK = compile_pattern("code_block", r"```(.+?)```", re.DOTALL)

INCOMPLETE_BOLD = compile_pattern("incomplete_bold", r"\*\*(?!\*)")
INCOMPLETE_ITALIC = compile_pattern("incomplete_italic", r"(?<!\*)\*(?!\*)")
INCOMPLETE_HEADER = compile_pattern("incomplete_header", r"^(#{1,6})[^\S\n]*$", re.MULTILINE)
INCOMPLETE_LIST = compile_pattern("incomplete_list", r"^([-*+])[^\S\n]*$", re.MULTILINE)
INCOMPLETE_CODE_BLOCK = compile_pattern("incomplete_code_block", r"```(?!`)")
INCOMPLETE_INLINE_CODE = compile_pattern("incomplete_inline_code", r"`(?!`)")

# Used by the edit interceptor to recognise the line holding the cursor.
LIST_LINE = compile_pattern("list_line", r"^([-*+])[^\S\n]+(.*)$")

COMPLETE_PATTERNS: tuple[TokenPattern, ...] = (
    TokenPattern(TokenKind.HEADER, HEADER, content_group=2, level_group=1),
    TokenPattern(TokenKind.LIST, LIST_ITEM, content_group=2),
    TokenPattern(TokenKind.BOLD, BOLD),
    TokenPattern(TokenKind.ITALIC, ITALIC),
    TokenPattern(TokenKind.INLINE_CODE, INLINE_CODE),
    TokenPattern(TokenKind.CODE_BLOCK, CODE_BLOCK),
)

INCOMPLETE_PATTERNS: tuple[TokenPattern, ...] = (
    TokenPattern(TokenKind.INCOMPLETE_BOLD, INCOMPLETE_BOLD, content_group=None, literal="**"),
    TokenPattern(TokenKind.INCOMPLETE_ITALIC, INCOMPLETE_ITALIC, content_group=None, literal="*"),
    TokenPattern(TokenKind.INCOMPLETE_HEADER, INCOMPLETE_HEADER, content_group=1, level_group=1),
    TokenPattern(TokenKind.INCOMPLETE_LIST, INCOMPLETE_LIST, content_group=1),
    TokenPattern(
        TokenKind.INCOMPLETE_CODE_BLOCK, INCOMPLETE_CODE_BLOCK, content_group=None, literal="```"
    ),
    TokenPattern(
        TokenKind.INCOMPLETE_INLINE_CODE, INCOMPLETE_INLINE_CODE, content_group=None, literal="`"
    ),
)

__all__ = [
    "PatternCompileError",
    "TokenPattern",
    "compile_pattern",
    "COMPLETE_PATTERNS",
    "INCOMPLETE_PATTERNS",
    "LIST_LINE",
]
