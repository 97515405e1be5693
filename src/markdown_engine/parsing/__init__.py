"""Markdown token model, static patterns and the tokenizer."""

from .models import Token, TokenKind
from .patterns import (
    COMPLETE_PATTERNS,
    INCOMPLETE_PATTERNS,
    LIST_LINE,
    PatternCompileError,
    TokenPattern,
    compile_pattern,
)
from .tokenizer import MarkdownTokenizer

__all__ = [
    "Token",
    "TokenKind",
    "COMPLETE_PATTERNS",
    "INCOMPLETE_PATTERNS",
    "LIST_LINE",
    "PatternCompileError",
    "TokenPattern",
    "compile_pattern",
    "MarkdownTokenizer",
]
