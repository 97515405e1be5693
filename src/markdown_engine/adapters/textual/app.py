"""Executable Textual app that hosts the markdown engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use markdown_engine.adapters.textual.app"
    ) from exc

from markdown_engine.buffer import Font
from markdown_engine.formatting import EditorTheme
from markdown_engine.runtime import telemetry
from markdown_engine.session import EditorSession

from .controller import RenderSegment, TextualMarkdownAdapter, TextualUIHooks

SAMPLE_TEXT = """# Markdown Engine

This is a **bold** text example.

You can also use *italic* text and `inline code`.

## Features

- Real-time markdown rendering
- **Bold** and *italic* support
- Header formatting

### Try it out!

Start typing some markdown:
- Use **double asterisks** for bold
- Use *single asterisks* for italic
- Use # for headers
"""


@dataclass
class UIState:
    status_text: str = ""
    last_event: str = ""


class MarkdownEditorApp(App[None]):
    """Minimal Textual UI embedding the markdown engine."""

    CSS = """
    #document-area {
        height: 1fr;
    }

    #document-view {
        height: 1fr;
        border: tall $primary;
        padding: 0 2;
        overflow-y: auto;
    }

    #status-line {
        height: 1;
        background: $panel;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(
        self,
        *,
        text: str = "",
        path: Optional[Path] = None,
        font_size: float = 16.0,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._initial_text = text
        self._path = path
        self._font_size = font_size
        self.session: EditorSession | None = None
        self.adapter: TextualMarkdownAdapter | None = None
        self._document_widget: Static | None = None
        self._status_widget: Static | None = None
        self.logger = telemetry.get_logger("markdown_engine.adapters.textual")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="document-area"):
            self._document_widget = Static("", id="document-view")
            yield self._document_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        theme = EditorTheme(default_font=Font(size=self._font_size))
        self.session = EditorSession(self._initial_text, name="textual", theme=theme)
        hooks = TextualUIHooks(
            update_document=self._update_document,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self.logger.debug,
        )
        self.adapter = TextualMarkdownAdapter(self.session, hooks)
        self.session.on_focus_gained()
        self.adapter.refresh()

    def on_unmount(self) -> None:
        if self.session:
            self.session.on_focus_lost()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        if self.adapter.handle_textual_key(key, text=text, modifiers=modifiers):
            event.stop()

    def action_save(self) -> None:
        if not self.session or self._path is None:
            self._update_status("no file to save to")
            return
        self._path.write_text(self.session.source_text, encoding="utf-8")
        self._update_status(f"saved {self._path}")

    def _update_document(self, segments: List[RenderSegment]) -> None:
        if self._document_widget:
            self._document_widget.update(
                Text.assemble(*[(segment.text, segment.style) for segment in segments])
            )

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            suffix = f" | {self._state.last_event}" if self._state.last_event else ""
            self._status_widget.update(f"{status}{suffix}")

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name in {"edit.intercepted", "session.undo", "session.redo"}:
            self._state.last_event = name

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key in {"ctrl+c", "ctrl+q", "ctrl+s"}:
            return None
        if key in {"enter", "return"}:
            return ("ENTER", None, ())
        if key in {"ctrl+z", "ctrl+y"}:
            return (key.split("+", 1)[1], None, ("CTRL",))
        if key in {"backspace", "left", "right", "up", "down", "home", "end"}:
            return (key.upper(), None, ())
        if event.character and event.is_printable:
            return (event.character, event.character, ())
        return None


def _env_float(key: str, fallback: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return float(value)
    except ValueError:
        return fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the markdown engine Textual demo.")
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Markdown file to open; ctrl+s writes the source text back to it",
    )
    parser.add_argument(
        "--font-size",
        type=float,
        default=_env_float("MARKDOWN_ENGINE_FONT_SIZE", 16.0),
        help="Base font size used for header scaling (default: 16)",
    )
    parser.add_argument(
        "--no-sample",
        action="store_true",
        help="Start with an empty buffer instead of the sample document",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.file is not None and args.file.exists():
        text = args.file.read_text(encoding="utf-8")
    else:
        text = "" if args.no_sample else SAMPLE_TEXT
    app = MarkdownEditorApp(text=text, path=args.file, font_size=args.font_size)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
