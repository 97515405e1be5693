from __future__ import annotations

import gc
from typing import List, Tuple

from markdown_engine.buffer import Color, TextRange
from markdown_engine.session import (
    EDIT_INTERCEPTED,
    FOCUS_GAINED,
    FOCUS_LOST,
    TEXT_CHANGED,
    UNDO,
    EditorBus,
    EditorSession,
)


class RecordingDelegate:
    def __init__(self, allow: bool = True) -> None:
        self.allow = allow
        self.changes: List[str] = []
        self.proposals: List[Tuple[TextRange, str]] = []

    def did_change(self, session: EditorSession) -> None:
        self.changes.append(session.source_text)

    def should_change_text(self, session: EditorSession, target: TextRange, text: str) -> bool:
        self.proposals.append((target, text))
        return self.allow


def make_session(text: str = "") -> Tuple[EditorSession, List[Tuple[str, object | None]]]:
    bus = EditorBus()
    events: List[Tuple[str, object | None]] = []
    for name in (TEXT_CHANGED, EDIT_INTERCEPTED, FOCUS_GAINED, FOCUS_LOST, UNDO):
        bus.subscribe(name, lambda payload, name=name: events.append((name, payload)))
    return EditorSession(text, bus=bus), events


def type_all(session: EditorSession, text: str) -> None:
    for char in text:
        session.type_text(char)


def test_list_marker_becomes_bullet_when_cursor_leaves() -> None:
    session, _ = make_session("- item\nplain")

    assert session.text == "• item\nplain"
    assert session.source_text == "- item\nplain"

    session.on_cursor_or_selection_changed(3)
    assert session.text == "- item\nplain"

    session.on_cursor_or_selection_changed(10)
    assert session.text == "• item\nplain"
    assert session.source_text == "- item\nplain"


def test_each_list_item_tracks_the_cursor_independently() -> None:
    session, _ = make_session("* one\n+ two")

    session.on_cursor_or_selection_changed(9)

    assert session.text == "• one\n+ two"
    assert session.source_text == "* one\n+ two"


def test_typing_asterisk_in_empty_buffer_auto_closes() -> None:
    session, events = make_session()

    session.type_text("*")

    assert session.source_text == "**"
    assert session.cursor_position == 1
    assert [name for name, _ in events] == [EDIT_INTERCEPTED, TEXT_CHANGED]
    assert events[0][1] == {"rule": "type.asterisk", "cursor": 1}


def test_header_typed_keystroke_by_keystroke() -> None:
    session, _ = make_session()

    type_all(session, "# Title")

    assert session.source_text == "# Title"
    assert session.cursor_position == 7
    header = session.engine.tokens_for()[0]
    assert header.level == 1


def test_return_continues_then_exits_list() -> None:
    session, _ = make_session("- item")
    session.on_cursor_or_selection_changed(6)

    session.type_text("\n")
    assert session.source_text == "- item\n- "
    assert session.cursor_position == 9
    assert session.text == "• item\n- "

    session.type_text("\n")
    assert session.source_text == "- item\n"
    assert session.cursor_position == 7


def test_typing_after_bulleted_line_keeps_buffers_aligned() -> None:
    session, _ = make_session("- item\n")
    session.on_cursor_or_selection_changed(7)

    type_all(session, "next")

    assert session.text == "• item\nnext"
    assert session.source_text == "- item\nnext"


def test_list_line_that_stops_being_a_list_gets_its_marker_back() -> None:
    session, _ = make_session("- item\nx")
    session.on_cursor_or_selection_changed(8)
    assert session.text.startswith("•")

    session.document.mutate_text(TextRange(1, 1), "")

    assert session.text == session.source_text == "-item\nx"


def test_plain_edit_moves_cursor_past_inserted_text() -> None:
    session, events = make_session("ac")
    session.on_cursor_or_selection_changed(1)

    session.type_text("b")

    assert session.source_text == "abc"
    assert session.cursor_position == 2
    assert events[-1] == (TEXT_CHANGED, "abc")


def test_delete_backward_removes_previous_character() -> None:
    session, _ = make_session("ab")
    session.on_cursor_or_selection_changed(2)

    session.delete_backward()
    assert session.source_text == "a"
    assert session.cursor_position == 1

    session.on_cursor_or_selection_changed(0)
    session.delete_backward()
    assert session.source_text == "a"


def test_delete_backward_over_asterisk_removes_pair() -> None:
    session, _ = make_session("*it*")
    session.on_cursor_or_selection_changed(4)

    session.delete_backward()

    assert session.source_text == "it"
    assert session.cursor_position == 0


def test_delete_backward_with_selection_removes_it() -> None:
    session, _ = make_session("hello")
    session.on_cursor_or_selection_changed(1, 3)

    session.delete_backward()

    assert session.source_text == "ho"
    assert session.cursor_position == 1


def test_undo_and_redo_restore_text_and_cursor() -> None:
    session, events = make_session()
    type_all(session, "ab")

    assert session.undo()
    assert session.source_text == "a"
    assert session.cursor_position == 1
    assert (UNDO, "edit") in events

    assert session.redo()
    assert session.source_text == "ab"
    assert session.cursor_position == 2
    assert not session.redo()


def test_undo_reverts_intercepted_edit() -> None:
    session, _ = make_session()
    session.type_text("*")

    assert session.undo()

    assert session.source_text == ""
    assert session.cursor_position == 0
    assert not session.undo()


def test_set_text_resets_history_and_cursor() -> None:
    session, _ = make_session()
    type_all(session, "xyz")

    session.set_text("# Hi")

    assert session.source_text == "# Hi"
    assert session.cursor_position == 0
    assert not session.undo()


def test_delegate_can_veto_plain_edits() -> None:
    delegate = RecordingDelegate(allow=False)
    session = EditorSession("", delegate=delegate)

    session.type_text("a")

    assert session.source_text == ""
    assert delegate.proposals == [(TextRange(0), "a")]
    assert delegate.changes == []


def test_delegate_is_notified_of_changes() -> None:
    delegate = RecordingDelegate()
    session = EditorSession("", delegate=delegate)

    session.type_text("a")
    session.type_text("*")

    assert delegate.changes == ["a", "a**"]
    assert delegate.proposals == [(TextRange(0), "a")]


def test_delegate_is_held_weakly() -> None:
    session = EditorSession("")
    session.delegate = RecordingDelegate(allow=False)
    gc.collect()

    assert session.delegate is None
    session.type_text("a")
    assert session.source_text == "a"


def test_focus_events_update_state() -> None:
    session, events = make_session("text")

    session.on_focus_gained()
    assert session.focused
    session.on_focus_lost()
    assert not session.focused

    assert [name for name, _ in events] == [FOCUS_GAINED, FOCUS_LOST]


def test_selection_is_clamped_and_normalized() -> None:
    session, _ = make_session("abc")

    session.on_cursor_or_selection_changed(2, 40)

    assert session.selection == TextRange(2, 1)
    session.on_cursor_or_selection_changed(-4)
    assert session.cursor_position == 0


def test_style_runs_expose_hidden_markers() -> None:
    session, _ = make_session("**b**")

    runs = session.style_runs()

    assert [run.range for run in runs] == [TextRange(0, 2), TextRange(2, 1), TextRange(3, 2)]
    assert runs[0].style.is_hidden
    assert runs[1].style.font.bold


def test_set_default_style_recolors_plain_text() -> None:
    session, _ = make_session("plain")
    accent = Color.from_hex("#336699")

    session.set_default_style(color=accent)

    assert session.style_runs()[0].style.foreground == accent
