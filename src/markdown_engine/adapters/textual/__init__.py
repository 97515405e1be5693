"""Textual host adapter. ``app`` needs the ``textual`` extra; the controller does not."""

from .controller import CURSOR_STYLE, RenderSegment, TextualMarkdownAdapter, TextualUIHooks

__all__ = ["CURSOR_STYLE", "RenderSegment", "TextualMarkdownAdapter", "TextualUIHooks"]
