"""Edit interceptor: first matching rule rewrites the proposed edit."""

from __future__ import annotations

from typing import Iterable, Optional

from markdown_engine.buffer import MarkdownDocument, TextRange
from markdown_engine.runtime import telemetry
from markdown_engine.runtime.telemetry import span

from .models import EditResult, EditRule, ProposedEdit
from .rules import DEFAULT_RULES


class EditInterceptor:
    """Sits in front of the document and decides whether to veto an edit.

    Rules are tried in order; the first one returning a result wins. When the
    result is handled the rule has already mutated the document.
    """

    def __init__(
        self,
        document: MarkdownDocument,
        *,
        rules: Iterable[EditRule] = DEFAULT_RULES,
        logger_name: Optional[str] = "markdown_engine.editing",
    ) -> None:
        self.document = document
        self.rules = tuple(rules)
        self._logger_name = logger_name

    def should_apply_edit(self, target: TextRange, replacement: str) -> EditResult:
        if target.location > self.document.length:
            return EditResult.passthrough()
        edit = ProposedEdit(target.clamped(self.document.length), replacement)

        for rule in self.rules:
            with span(
                f"intercept::{rule.id}",
                logger_name=self._logger_name,
                component="editing",
                metadata={"location": edit.range.location, "length": edit.range.length},
            ) as handle:
                outcome = rule(self.document, edit)
                if outcome is None or not outcome.handled:
                    continue
                handle.add_metadata("cursor", outcome.cursor)

            telemetry.record_event(
                "edit.intercepted",
                level="debug",
                data={"rule": rule.id, "location": edit.range.location},
                logger_name=self._logger_name,
            )
            return EditResult(handled=True, cursor=outcome.cursor, rule=rule.id)

        return EditResult.passthrough()


__all__ = ["EditInterceptor"]
