from __future__ import annotations

from typing import List

import pytest

from markdown_engine.buffer import (
    CLEAR,
    HIDDEN_FONT_SIZE,
    Color,
    EditedRange,
    Font,
    MarkdownDocument,
    MutationMode,
    StyleOverlay,
    TextRange,
    TextStyle,
    UndoEntry,
    UndoTimeline,
    line_content_range,
    paragraph_range,
)


def make_document(text: str = "") -> tuple[MarkdownDocument, List[EditedRange]]:
    document = MarkdownDocument(text)
    edits: List[EditedRange] = []
    document.add_listener(edits.append)
    return document, edits


def test_edit_mutation_is_mirrored_into_source() -> None:
    document, edits = make_document("hello")

    delta = document.mutate_text(TextRange(5), " world")

    assert delta == 6
    assert document.text == "hello world"
    assert document.source_text == "hello world"
    assert edits == [EditedRange(TextRange(5, 6), 6, MutationMode.EDIT)]
    assert document.version == 1


def test_presentation_mutation_leaves_source_alone() -> None:
    document, edits = make_document("- item")

    document.mutate_text(TextRange(0, 1), "•", mode=MutationMode.PRESENTATION)

    assert document.text == "• item"
    assert document.source_text == "- item"
    assert edits[-1].mode is MutationMode.PRESENTATION
    assert document.source_char_at(0) == "-"
    assert document.char_at(0) == "•"


def test_out_of_range_mutation_is_clamped() -> None:
    document, _ = make_document("abc")

    document.mutate_text(TextRange(10, 4), "!")

    assert document.text == "abc!"
    assert document.char_at(10) is None
    assert document.substring(TextRange(1, 100)) == "bc!"


def test_overlay_length_tracks_text() -> None:
    document, _ = make_document("abcdef")

    document.mutate_text(TextRange(1, 3), "Z")
    assert len(document.attributes) == document.length == 4

    document.replace_all("")
    assert len(document.attributes) == 0


def test_removed_listener_is_not_called() -> None:
    document, edits = make_document("x")
    document.remove_listener(edits.append)

    document.mutate_text(TextRange(0, 1), "y")

    assert edits == []


def test_hide_keeps_text_and_marks_style_hidden() -> None:
    overlay = StyleOverlay(4)

    overlay.hide(TextRange(1, 2))

    assert overlay.style_at(1).is_hidden
    assert overlay.style_at(1).foreground == CLEAR
    assert overlay.style_at(2).font.size == HIDDEN_FONT_SIZE
    assert not overlay.style_at(0).is_hidden


def test_runs_merge_equal_neighbours() -> None:
    overlay = StyleOverlay(6)
    bold = Font().emboldened()

    overlay.apply_font(TextRange(2, 2), bold)
    runs = list(overlay.runs())

    assert [run.range for run in runs] == [TextRange(0, 2), TextRange(2, 2), TextRange(4, 2)]
    assert runs[1].style.font.bold
    assert list(overlay.runs(TextRange(3, 2)))[0].range == TextRange(3, 1)


def test_splice_inserts_default_style() -> None:
    overlay = StyleOverlay(3, default=TextStyle(foreground=Color.from_hex("#112233")))
    overlay.apply_background(TextRange(0, 3), Color.from_hex("#ffffff"))

    overlay.splice(TextRange(1, 1), 2)

    assert len(overlay) == 4
    assert overlay.style_at(1) == overlay.default
    assert overlay.style_at(3).background == Color.from_hex("#ffffff")


def test_color_hex_round_trip_and_validation() -> None:
    assert Color.from_hex("#c7254e").to_hex() == "#c7254e"
    with pytest.raises(ValueError):
        Color.from_hex("#abc")


def test_negative_range_length_is_rejected() -> None:
    with pytest.raises(ValueError):
        TextRange(0, -1)


def test_range_between_orders_endpoints() -> None:
    assert TextRange.between(5, 2) == TextRange(2, 3)
    assert TextRange(-3, 10).clamped(4) == TextRange(0, 4)


def test_paragraph_range_includes_trailing_newline() -> None:
    text = "one\ntwo\nthree"

    assert paragraph_range(text, TextRange(5)) == TextRange(4, 4)
    assert paragraph_range(text, TextRange(9)) == TextRange(8, 5)
    assert paragraph_range(text, TextRange(1, 5)) == TextRange(0, 8)
    assert line_content_range(text, 5) == TextRange(4, 3)


def test_undo_timeline_drops_redo_tail_and_noops() -> None:
    timeline = UndoTimeline()
    timeline.push(UndoEntry("edit", "", "a", 0, 1))
    timeline.push(UndoEntry("edit", "a", "a", 1, 1))
    timeline.push(UndoEntry("edit", "a", "ab", 1, 2))

    assert len(timeline) == 2
    assert timeline.undo().after_text == "ab"
    timeline.push(UndoEntry("edit", "a", "ac", 1, 2))

    assert not timeline.can_redo()
    assert timeline.undo().after_text == "ac"
    assert timeline.undo().after_text == "a"
    assert timeline.undo() is None
