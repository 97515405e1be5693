"""Dataclasses describing proposed edits, rule outcomes and rule metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from markdown_engine.buffer import MarkdownDocument, TextRange


@dataclass(frozen=True, slots=True)
class ProposedEdit:
    """Host request to replace ``range`` with ``text``."""

    range: TextRange
    text: str

    @property
    def is_single_deletion(self) -> bool:
        return not self.text and self.range.length == 1

    @property
    def has_selection(self) -> bool:
        return self.range.length > 0


@dataclass(frozen=True, slots=True)
class EditResult:
    """Outcome of interception.

    ``handled=True`` means the buffer was already mutated and the caller must
    not apply the original edit; ``cursor`` is where the caret now belongs.
    """

    handled: bool
    cursor: Optional[int] = None
    rule: Optional[str] = None

    @classmethod
    def passthrough(cls) -> "EditResult":
        return cls(handled=False)


RuleHandler = Callable[[MarkdownDocument, ProposedEdit], Optional[EditResult]]


@dataclass(frozen=True, slots=True)
class EditRule:
    """Named interception rule; the handler returns ``None`` when it does not apply."""

    id: str
    handler: RuleHandler
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("EditRule id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
        return self.handler(document, edit)


__all__ = ["ProposedEdit", "EditResult", "EditRule", "RuleHandler"]
