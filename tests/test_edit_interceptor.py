from __future__ import annotations

from typing import List

import pytest

from markdown_engine.buffer import MarkdownDocument, MutationMode, TextRange
from markdown_engine.editing import (
    MATCH_WINDOW,
    EditInterceptor,
    EditResult,
    EditRule,
    ProposedEdit,
    find_matching_asterisk,
)


def make_interceptor(text: str) -> tuple[MarkdownDocument, EditInterceptor]:
    document = MarkdownDocument(text)
    return document, EditInterceptor(document)


def test_typing_asterisk_inserts_pair_with_cursor_between() -> None:
    document, interceptor = make_interceptor("")

    result = interceptor.should_apply_edit(TextRange(0), "*")

    assert result.handled
    assert result.rule == "type.asterisk"
    assert result.cursor == 1
    assert document.text == "**"


def test_typing_asterisk_after_asterisk_inserts_one_pair() -> None:
    document, interceptor = make_interceptor("a*")

    result = interceptor.should_apply_edit(TextRange(2), "*")

    assert result.handled
    assert document.text == "a***"
    assert result.cursor == 3


def test_typing_asterisk_wraps_selection() -> None:
    document, interceptor = make_interceptor("say word now")

    result = interceptor.should_apply_edit(TextRange(4, 4), "*")

    assert document.text == "say *word* now"
    assert result.cursor == 10


def test_deleting_asterisk_removes_partner() -> None:
    document, interceptor = make_interceptor("a *it* b")

    result = interceptor.should_apply_edit(TextRange(5, 1), "")

    assert result.handled
    assert result.rule == "delete.asterisk"
    assert document.text == "a it b"
    assert result.cursor == 2


def test_deleting_opening_asterisk_finds_partner_forward() -> None:
    document, interceptor = make_interceptor("*it*")

    result = interceptor.should_apply_edit(TextRange(0, 1), "")

    assert document.text == "it"
    assert result.cursor == 0


def test_deleting_middle_of_triple_asterisk_removes_all_three() -> None:
    document, interceptor = make_interceptor("a***b")

    result = interceptor.should_apply_edit(TextRange(2, 1), "")

    assert document.text == "ab"
    assert result.cursor == 1


def test_lone_asterisk_outside_window_is_not_handled() -> None:
    text = "*" + "x" * (MATCH_WINDOW + 10) + "*"
    document, interceptor = make_interceptor(text)

    result = interceptor.should_apply_edit(TextRange(len(text) - 1, 1), "")

    assert not result.handled
    assert document.text == text


def test_find_matching_asterisk_prefers_backward() -> None:
    assert find_matching_asterisk("*a*b*", 2) == 0
    assert find_matching_asterisk("a*b*", 1) == 3
    assert find_matching_asterisk("abc*", 3) is None


def test_deleting_header_marker_removes_marker_and_space() -> None:
    document, interceptor = make_interceptor("intro\n# Title")

    result = interceptor.should_apply_edit(TextRange(6, 1), "")

    assert result.rule == "delete.header"
    assert document.text == "intro\nTitle"
    assert result.cursor == 6


def test_hash_mid_line_is_left_to_host() -> None:
    document, interceptor = make_interceptor("a # b")

    assert not interceptor.should_apply_edit(TextRange(2, 1), "").handled
    assert not interceptor.should_apply_edit(TextRange(1), "#").handled
    assert document.text == "a # b"


@pytest.mark.parametrize("marker", ["-", "+"])
def test_deleting_list_marker_removes_marker_and_space(marker: str) -> None:
    document, interceptor = make_interceptor(f"{marker} item")

    result = interceptor.should_apply_edit(TextRange(0, 1), "")

    assert result.rule == "delete.list_marker"
    assert document.text == "item"
    assert result.cursor == 0


def test_typing_hash_at_line_start() -> None:
    document, interceptor = make_interceptor("one\n")

    result = interceptor.should_apply_edit(TextRange(4), "#")

    assert result.rule == "type.hash"
    assert document.text == "one\n#"
    assert result.cursor == 5


def test_typing_hash_over_selection_makes_header() -> None:
    document, interceptor = make_interceptor("Title")

    result = interceptor.should_apply_edit(TextRange(0, 5), "#")

    assert document.text == "# Title"
    assert result.cursor == 7


def test_return_continues_list_with_same_marker() -> None:
    document, interceptor = make_interceptor("+ item")

    result = interceptor.should_apply_edit(TextRange(6), "\n")

    assert result.rule == "type.return"
    assert document.text == "+ item\n+ "
    assert result.cursor == 9


def test_return_on_empty_item_clears_the_line() -> None:
    document, interceptor = make_interceptor("- item\n- ")

    result = interceptor.should_apply_edit(TextRange(9), "\n")

    assert document.text == "- item\n"
    assert result.cursor == 7


def test_return_on_empty_item_keeps_following_lines() -> None:
    document, interceptor = make_interceptor("- \nnext")

    result = interceptor.should_apply_edit(TextRange(2), "\n")

    assert document.text == "\nnext"
    assert result.cursor == 0


def test_return_outside_list_is_left_to_host() -> None:
    document, interceptor = make_interceptor("plain")

    assert not interceptor.should_apply_edit(TextRange(5), "\n").handled
    assert document.text == "plain"


def test_rules_read_shadow_text_under_bullets() -> None:
    document, interceptor = make_interceptor("- item")
    document.mutate_text(TextRange(0, 1), "•", mode=MutationMode.PRESENTATION)

    result = interceptor.should_apply_edit(TextRange(6), "\n")

    assert result.handled
    assert document.source_text == "- item\n- "


def test_edit_past_end_is_passed_through() -> None:
    document, interceptor = make_interceptor("ab")

    result = interceptor.should_apply_edit(TextRange(5), "*")

    assert result == EditResult.passthrough()
    assert document.text == "ab"


def test_ordinary_characters_are_passed_through() -> None:
    document, interceptor = make_interceptor("ab")

    assert not interceptor.should_apply_edit(TextRange(1), "x").handled
    assert not interceptor.should_apply_edit(TextRange(0, 1), "").handled
    assert document.text == "ab"


def test_custom_rules_run_in_order() -> None:
    calls: List[str] = []

    def first(document: MarkdownDocument, edit: ProposedEdit) -> EditResult | None:
        calls.append("first")
        return None

    def second(document: MarkdownDocument, edit: ProposedEdit) -> EditResult | None:
        calls.append("second")
        return EditResult(handled=True, cursor=0)

    document = MarkdownDocument("x")
    interceptor = EditInterceptor(
        document, rules=[EditRule("first", first), EditRule("second", second)]
    )

    result = interceptor.should_apply_edit(TextRange(0), "y")

    assert calls == ["first", "second"]
    assert result.rule == "second"


def test_edit_rule_validates_fields() -> None:
    with pytest.raises(ValueError):
        EditRule("", lambda document, edit: None)
    with pytest.raises(TypeError):
        EditRule("bad", "not callable")  # type: ignore[arg-type]
