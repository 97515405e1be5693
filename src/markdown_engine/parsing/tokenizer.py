"""Priority-ordered, overlap-rejecting markdown tokenizer."""

from __future__ import annotations

from typing import Iterable, List, Optional

from markdown_engine.buffer.ranges import TextRange, paragraph_range
from markdown_engine.runtime.telemetry import span

from .models import Token
from .patterns import COMPLETE_PATTERNS, INCOMPLETE_PATTERNS, TokenPattern


class MarkdownTokenizer:
    """Stateless: ``(text, range) -> tokens``.

    Each pattern is run over the requested slice in claim order; a match is
    kept only if it does not intersect a token claimed earlier. Matching is
    done on the slice itself, so ``^``/``$`` and look-arounds stop at the
    range bounds.
    """

    def __init__(
        self,
        *,
        complete: Iterable[TokenPattern] = COMPLETE_PATTERNS,
        incomplete: Iterable[TokenPattern] = INCOMPLETE_PATTERNS,
        logger_name: str | None = None,
    ) -> None:
        self._patterns = tuple(complete) + tuple(incomplete)
        self._logger_name = logger_name

    def parse_tokens(self, text: str, target: Optional[TextRange] = None) -> List[Token]:
        search = (target or TextRange(0, len(text))).clamped(len(text))
        if search.is_empty:
            return []

        with span(
            "tokenizer::parse",
            logger_name=self._logger_name,
            component="tokenizer",
            metadata={"location": search.location, "length": search.length},
        ) as handle:
            segment = text[search.location : search.end]
            tokens: List[Token] = []
            for pattern in self._patterns:
                for match in pattern.regex.finditer(segment):
                    claimed = TextRange(search.location + match.start(), match.end() - match.start())
                    if claimed.is_empty or _overlaps_any(claimed, tokens):
                        continue
                    tokens.append(
                        Token(
                            kind=pattern.kind,
                            range=claimed,
                            content=pattern.content_of(match),
                            is_complete=not pattern.kind.is_incomplete,
                            level=pattern.level_of(match),
                        )
                    )
            tokens.sort(key=lambda token: token.start)
            handle.add_metadata("tokens", len(tokens))
            return tokens

    def parse_paragraph(self, text: str, location: int) -> List[Token]:
        return self.parse_tokens(text, paragraph_range(text, TextRange(location)))


def _overlaps_any(candidate: TextRange, tokens: List[Token]) -> bool:
    return any(candidate.overlaps(token.range) for token in tokens)


__all__ = ["MarkdownTokenizer"]
