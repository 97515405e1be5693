"""Buffer abstractions: ranges, styles, the document and undo history."""

from .attributes import (
    CLEAR,
    HIDDEN_FONT_SIZE,
    LABEL,
    SECONDARY_LABEL,
    Color,
    Font,
    StyleOverlay,
    StyleRun,
    TextStyle,
)
from .document import EditedRange, EditListener, MarkdownDocument, MutationMode
from .ranges import (
    TextRange,
    clamp_position,
    is_line_start,
    line_content_range,
    line_range,
    paragraph_range,
)
from .undo import UndoEntry, UndoTimeline

__all__ = [
    "CLEAR",
    "HIDDEN_FONT_SIZE",
    "LABEL",
    "SECONDARY_LABEL",
    "Color",
    "Font",
    "StyleOverlay",
    "StyleRun",
    "TextStyle",
    "EditedRange",
    "EditListener",
    "MarkdownDocument",
    "MutationMode",
    "TextRange",
    "clamp_position",
    "is_line_start",
    "line_content_range",
    "line_range",
    "paragraph_range",
    "UndoEntry",
    "UndoTimeline",
]
