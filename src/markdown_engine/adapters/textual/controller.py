"""Textual adapter that turns session state into styled render segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from markdown_engine.buffer import TextRange, TextStyle
from markdown_engine.session import ALL_EVENTS, EditorSession

CURSOR_STYLE = "reverse"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(frozen=True, slots=True)
class RenderSegment:
    """A run of visible text plus a rich style string."""

    text: str
    style: str = ""


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_document: Callable[[List[RenderSegment]], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualMarkdownAdapter:
    """Bridges Textual key events to an ``EditorSession`` and renders it back."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._commands: Dict[str, Callable[[], object]] = {
            "ENTER": lambda: session.type_text("\n"),
            "BACKSPACE": session.delete_backward,
            "LEFT": lambda: self._move_to(session.cursor_position - 1),
            "RIGHT": lambda: self._move_to(session.cursor_position + 1),
            "HOME": lambda: self._move_to(self._line_bounds()[0]),
            "END": lambda: self._move_to(self._line_bounds()[1]),
            "UP": lambda: self._move_vertically(-1),
            "DOWN": lambda: self._move_vertically(1),
            "CTRL+Z": session.undo,
            "CTRL+Y": session.redo,
        }
        self._subscribe_events()
        self.refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> bool:
        """Dispatch one normalized key; returns whether it was consumed."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        token = "+".join(normalized_modifiers + (key.upper(),)) if normalized_modifiers else key.upper()
        self._log_state("key ->", key=token, text=text)

        command = self._commands.get(token)
        if command is not None:
            command()
        elif text and text.isprintable() and "CTRL" not in normalized_modifiers:
            self.session.type_text(text)
        else:
            return False

        self.refresh()
        return True

    def refresh(self) -> None:
        self.hooks.update_document(self.render_segments())
        self.hooks.update_status(self.status_text())

    def render_segments(self) -> List[RenderSegment]:
        text = self.session.text
        cursor = self.session.cursor_position
        segments: List[RenderSegment] = []
        for run in self.session.style_runs():
            style = self.style_for(run.style)
            hidden = run.style.is_hidden
            start, end = run.range.location, run.range.end
            if start <= cursor < end:
                self._emit(segments, text[start:cursor], style, hidden)
                self._emit_cursor(segments, text[cursor], style, hidden)
                self._emit(segments, text[cursor + 1 : end], style, hidden)
            else:
                self._emit(segments, text[start:end], style, hidden)
        if cursor >= len(text):
            segments.append(RenderSegment(" ", CURSOR_STYLE))
        return segments

    def style_for(self, style: TextStyle) -> str:
        theme = self.session.engine.theme
        parts: List[str] = []
        if style.font.bold:
            parts.append("bold")
        if style.font.italic:
            parts.append("italic")
        if style.font.size > theme.default_font.size:
            parts.append("underline")
        if style.foreground == theme.dimmed_color:
            parts.append("dim")
        elif style.foreground != theme.default_color and not style.foreground.is_transparent:
            parts.append(style.foreground.to_hex())
        if style.background is not None:
            parts.append(f"on {style.background.to_hex()}")
        return " ".join(parts)

    def status_text(self) -> str:
        text = self.session.text
        cursor = self.session.cursor_position
        row = text.count("\n", 0, cursor) + 1
        column = cursor - (text.rfind("\n", 0, cursor) + 1) + 1
        focus = "editing" if self.session.focused else "idle"
        return f"Ln {row}, Col {column} | {len(text)} chars | {focus}"

    @staticmethod
    def _emit(segments: List[RenderSegment], chunk: str, style: str, hidden: bool) -> None:
        if chunk and not hidden:
            segments.append(RenderSegment(chunk, style))

    @staticmethod
    def _emit_cursor(segments: List[RenderSegment], char: str, style: str, hidden: bool) -> None:
        if hidden or char == "\n":
            segments.append(RenderSegment(" ", CURSOR_STYLE))
            if char == "\n":
                segments.append(RenderSegment("\n", style))
            return
        segments.append(RenderSegment(char, f"{style} {CURSOR_STYLE}".strip()))

    def _move_to(self, position: int) -> None:
        self.session.on_cursor_or_selection_changed(position)

    def _line_bounds(self) -> tuple[int, int]:
        text = self.session.text
        cursor = self.session.cursor_position
        start = text.rfind("\n", 0, cursor) + 1
        end = text.find("\n", cursor)
        return start, len(text) if end == -1 else end

    def _move_vertically(self, direction: int) -> None:
        text = self.session.text
        start, end = self._line_bounds()
        column = self.session.cursor_position - start
        if direction < 0:
            if start == 0:
                self._move_to(0)
                return
            target_start = text.rfind("\n", 0, start - 1) + 1
            target_end = start - 1
        else:
            if end >= len(text):
                self._move_to(len(text))
                return
            target_start = end + 1
            following = text.find("\n", target_start)
            target_end = len(text) if following == -1 else following
        self._move_to(min(target_start + column, target_end))

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        for event in ALL_EVENTS:
            bus.subscribe(event, lambda payload, name=event: self._handle_event(name, payload))

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "session": self.session.name,
            "cursor": self.session.cursor_position,
            "selection": _describe(self.session.selection),
            "length": self.session.document.length,
            "version": self.session.document.version,
        }
        snapshot.update({key: value for key, value in fields.items() if value is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


def _describe(selection: TextRange) -> str:
    return f"{selection.location}+{selection.length}"


__all__ = ["RenderSegment", "TextualMarkdownAdapter", "TextualUIHooks", "CURSOR_STYLE"]
