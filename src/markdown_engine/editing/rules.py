"""Interception rules for paired symbols, headers and list continuation.

Each rule reads the shadow (source) text, so list markers are seen as typed
even while the live buffer shows a bullet glyph. Every probe is bounds-checked
and an out-of-range probe simply means the rule does not apply.
"""

from __future__ import annotations

from typing import Optional

from markdown_engine.buffer import (
    MarkdownDocument,
    TextRange,
    is_line_start,
    line_content_range,
)
from markdown_engine.parsing import LIST_LINE

from .models import EditResult, EditRule, ProposedEdit

ASTERISK = "*"
HASH = "#"
NEWLINE = "\n"
MATCH_WINDOW = 50


def _char(text: str, index: int) -> Optional[str]:
    if 0 <= index < len(text):
        return text[index]
    return None


def find_matching_asterisk(text: str, position: int, *, window: int = MATCH_WINDOW) -> Optional[int]:
    """Nearest other ``*`` within ``window`` units, looking backwards first."""

    lower = max(0, position - window)
    upper = min(len(text), position + window)
    for index in range(position - 1, lower - 1, -1):
        if text[index] == ASTERISK:
            return index
    for index in range(position + 1, upper):
        if text[index] == ASTERISK:
            return index
    return None


def delete_asterisk(document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
    if not edit.is_single_deletion:
        return None
    text = document.source_text
    position = edit.range.location
    if _char(text, position) != ASTERISK:
        return None

    if (
        position > 0
        and position + 1 < len(text)
        and text[position - 1] == ASTERISK
        and text[position + 1] == ASTERISK
    ):
        document.mutate_text(TextRange(position - 1, 3), "")
        return EditResult(handled=True, cursor=position - 1)

    partner = find_matching_asterisk(text, position)
    if partner is None:
        return None
    first, second = sorted((position, partner))
    document.mutate_text(TextRange(second, 1), "")
    document.mutate_text(TextRange(first, 1), "")
    return EditResult(handled=True, cursor=first)


def _delete_line_marker(
    document: MarkdownDocument, edit: ProposedEdit, markers: str
) -> Optional[EditResult]:
    if not edit.is_single_deletion:
        return None
    text = document.source_text
    position = edit.range.location
    if _char(text, position) not in tuple(markers):
        return None
    if not is_line_start(text, position) or _char(text, position + 1) != " ":
        return None
    document.mutate_text(TextRange(position, 2), "")
    return EditResult(handled=True, cursor=position)


def delete_header_marker(document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
    return _delete_line_marker(document, edit, HASH)


def delete_list_marker(document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
    return _delete_line_marker(document, edit, "-+")


def type_asterisk(document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
    if edit.text != ASTERISK:
        return None
    text = document.source_text
    location = edit.range.location

    if _char(text, location - 1) == ASTERISK:
        # The typed asterisk is dropped; the pair already on the left is closed.
        document.mutate_text(TextRange(location), "**")
        return EditResult(handled=True, cursor=location + 1)

    if edit.has_selection:
        wrapped = f"*{document.source_text[location:edit.range.end]}*"
        document.mutate_text(edit.range, wrapped)
        return EditResult(handled=True, cursor=location + len(wrapped))

    document.mutate_text(edit.range, "**")
    return EditResult(handled=True, cursor=location + 1)


def type_hash(document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
    if edit.text != HASH:
        return None
    text = document.source_text
    location = edit.range.location
    if not is_line_start(text, location):
        return None

    if edit.has_selection:
        header = f"# {text[location:edit.range.end]}"
        document.mutate_text(edit.range, header)
        return EditResult(handled=True, cursor=location + len(header))

    document.mutate_text(edit.range, HASH)
    return EditResult(handled=True, cursor=location + 1)


def type_return(document: MarkdownDocument, edit: ProposedEdit) -> Optional[EditResult]:
    if edit.text != NEWLINE:
        return None
    text = document.source_text
    line = line_content_range(text, edit.range.location)
    match = LIST_LINE.match(text[line.location : line.end])
    if match is None:
        return None

    marker, content = match.group(1), match.group(2)
    if not content.strip():
        document.mutate_text(line, "")
        return EditResult(handled=True, cursor=line.location)

    continuation = f"{NEWLINE}{marker} "
    document.mutate_text(edit.range, continuation)
    return EditResult(handled=True, cursor=edit.range.location + len(continuation))


DEFAULT_RULES: tuple[EditRule, ...] = (
    EditRule("delete.asterisk", delete_asterisk, "Delete an asterisk together with its partner"),
    EditRule("delete.header", delete_header_marker, "Delete '# ' at the start of a line"),
    EditRule("delete.list_marker", delete_list_marker, "Delete '- ' or '+ ' at the start of a line"),
    EditRule("type.asterisk", type_asterisk, "Auto-close asterisk pairs or wrap the selection"),
    EditRule("type.hash", type_hash, "Header marker at the start of a line"),
    EditRule("type.return", type_return, "Continue or leave a list on Return"),
)

__all__ = [
    "DEFAULT_RULES",
    "MATCH_WINDOW",
    "find_matching_asterisk",
    "delete_asterisk",
    "delete_header_marker",
    "delete_list_marker",
    "type_asterisk",
    "type_hash",
    "type_return",
]
