"""Host-facing façade combining document, formatting, interception and undo."""

from __future__ import annotations

import weakref
from contextlib import AbstractContextManager
from typing import ContextManager, Iterable, List, Optional

from markdown_engine.buffer import (
    Color,
    Font,
    MarkdownDocument,
    StyleRun,
    TextRange,
    UndoEntry,
    UndoTimeline,
)
from markdown_engine.editing import DEFAULT_RULES, EditInterceptor, EditRule
from markdown_engine.formatting import EditorTheme, FormattingEngine
from markdown_engine.parsing import MarkdownTokenizer
from markdown_engine.runtime import telemetry

from .events import (
    EDIT_INTERCEPTED,
    FOCUS_GAINED,
    FOCUS_LOST,
    REDO,
    SELECTION_CHANGED,
    TEXT_CHANGED,
    UNDO,
    EditorBus,
    EditorDelegate,
)


class EditorSession:
    """One editable markdown buffer as seen by a host widget.

    The host forwards proposed edits, selection changes and focus events; the
    session decides what actually happens to the buffer and where the caret
    goes, and reports back through ``bus`` and the (weakly held) delegate.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        theme: Optional[EditorTheme] = None,
        tokenizer: Optional[MarkdownTokenizer] = None,
        rules: Iterable[EditRule] = DEFAULT_RULES,
        delegate: Optional[EditorDelegate] = None,
        bus: Optional[EditorBus] = None,
    ) -> None:
        self.name = name
        self.document = MarkdownDocument(text)
        self.engine = FormattingEngine(self.document, tokenizer=tokenizer, theme=theme)
        self.interceptor = EditInterceptor(self.document, rules=rules)
        self.undo_timeline = UndoTimeline()
        self.bus = bus or EditorBus()
        self._delegate_ref: Optional[weakref.ReferenceType[EditorDelegate]] = None
        self.delegate = delegate
        self._selection = TextRange(0)
        self._focused = False
        self.engine.on_cursor_moved(0)

    @property
    def delegate(self) -> Optional[EditorDelegate]:
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    @delegate.setter
    def delegate(self, value: Optional[EditorDelegate]) -> None:
        self._delegate_ref = weakref.ref(value) if value is not None else None

    @property
    def text(self) -> str:
        """Live buffer, with bullet glyphs where list markers are rendered."""

        return self.document.text

    @property
    def source_text(self) -> str:
        """Markdown as typed; what a host should persist."""

        return self.document.source_text

    @property
    def selection(self) -> TextRange:
        return self._selection

    @property
    def cursor_position(self) -> int:
        return self._selection.location

    @property
    def focused(self) -> bool:
        return self._focused

    def set_text(self, text: str) -> None:
        with telemetry.span("session::set_text", component="session"):
            self.document.replace_all(text)
            self.undo_timeline.clear()
            self.engine.bullets.forget()
            self.on_cursor_or_selection_changed(0)

    def set_default_style(self, font: Optional[Font] = None, color: Optional[Color] = None) -> None:
        self.engine.set_default_style(font, color)
        self.engine.reformat_all()

    def style_runs(self, target: Optional[TextRange] = None) -> List[StyleRun]:
        return list(self.document.attributes.runs(target))

    # Host -> core events -------------------------------------------------

    def on_proposed_edit(self, target: TextRange, text: str) -> bool:
        """Offer an edit to the interceptor; ``True`` means it was handled here."""

        with self.transaction("intercept"):
            result = self.interceptor.should_apply_edit(target, text)
            if result.handled:
                cursor = result.cursor if result.cursor is not None else target.location
                self.on_cursor_or_selection_changed(cursor)
        if not result.handled:
            return False
        self.bus.emit(EDIT_INTERCEPTED, {"rule": result.rule, "cursor": self.cursor_position})
        self._notify_text_change()
        return True

    def apply_edit(self, target: TextRange, text: str) -> int:
        """Default mutation path for edits the interceptor passed through."""

        target = target.clamped(self.document.length)
        with self.transaction("edit"):
            delta = self.document.mutate_text(target, text)
            self.on_cursor_or_selection_changed(target.location + len(text))
        self._notify_text_change()
        return delta

    def on_cursor_or_selection_changed(self, position: int, length: int = 0) -> None:
        start = self.document.clamp(position)
        end = self.document.clamp(position + max(0, length))
        self._selection = TextRange.between(start, end)
        self.engine.on_cursor_moved(start)
        self.bus.emit(SELECTION_CHANGED, self._selection)

    def on_focus_gained(self) -> None:
        self._focused = True
        self.engine.on_cursor_moved(self._selection.location)
        telemetry.record_event("focus.gained", level="debug", data={"session": self.name})
        self.bus.emit(FOCUS_GAINED, self._selection)

    def on_focus_lost(self) -> None:
        self._focused = False
        telemetry.record_event("focus.lost", level="debug", data={"session": self.name})
        self.bus.emit(FOCUS_LOST, self._selection)

    # Widget-style conveniences --------------------------------------------

    def type_text(self, text: str) -> None:
        """Insert ``text`` at the selection the way a text widget would."""

        target = self._selection
        if self.on_proposed_edit(target, text):
            return
        delegate = self.delegate
        if delegate is not None and not delegate.should_change_text(self, target, text):
            return
        self.apply_edit(target, text)

    def delete_backward(self) -> None:
        target = self._selection
        if target.is_empty:
            if target.location == 0:
                return
            target = TextRange(target.location - 1, 1)
        if self.on_proposed_edit(target, ""):
            return
        delegate = self.delegate
        if delegate is not None and not delegate.should_change_text(self, target, ""):
            return
        self.apply_edit(target, "")

    def undo(self) -> bool:
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self._restore(entry.before_text, entry.cursor_before)
        telemetry.record_event("session.undo", data={"label": entry.label})
        self.bus.emit(UNDO, entry.label)
        return True

    def redo(self) -> bool:
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self._restore(entry.after_text, entry.cursor_after)
        telemetry.record_event("session.redo", data={"label": entry.label})
        self.bus.emit(REDO, entry.label)
        return True

    def transaction(self, label: str) -> "EditTransaction":
        return EditTransaction(self, label)

    def _restore(self, source: str, cursor: int) -> None:
        with telemetry.span("session::restore", component="session"):
            self.document.replace_all(source)
            self.on_cursor_or_selection_changed(cursor)
        self.bus.emit(TEXT_CHANGED, self.document.source_text)

    def _notify_text_change(self) -> None:
        self.bus.emit(TEXT_CHANGED, self.document.source_text)
        delegate = self.delegate
        if delegate is not None:
            delegate.did_change(self)


class EditTransaction(AbstractContextManager["EditTransaction"]):
    """Records one undo entry for whatever the block does to the source text."""

    def __init__(self, session: EditorSession, label: str) -> None:
        self.session = session
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None
        self._before_text = ""
        self._before_cursor = 0

    def __enter__(self) -> "EditTransaction":
        self._before_text = self.session.source_text
        self._before_cursor = self.session.cursor_position
        self._span_cm = telemetry.span(
            name=f"session::{self.label}",
            component=True,
            metadata={"session": self.session.name},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                self.session.undo_timeline.push(
                    UndoEntry(
                        label=self.label,
                        before_text=self._before_text,
                        after_text=self.session.source_text,
                        cursor_before=self._before_cursor,
                        cursor_after=self.session.cursor_position,
                    )
                )
        finally:
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["EditorSession", "EditTransaction"]
