"""Formatting engine: tokens + cursor position -> attribute overlay."""

from __future__ import annotations

from typing import List, Optional

from markdown_engine.buffer import (
    Color,
    EditedRange,
    Font,
    MarkdownDocument,
    MutationMode,
    TextRange,
    paragraph_range,
)
from markdown_engine.buffer.attributes import TextStyle
from markdown_engine.parsing import MarkdownTokenizer, Token, TokenKind
from markdown_engine.runtime import telemetry

from .bullets import BulletSubstitutor
from .guard import ReentrancyGuard
from .theme import EditorTheme


class FormattingEngine:
    """Owns the cursor position and restyles the document after every change.

    A text edit reformats only the paragraph(s) it touched. A cursor move
    reformats the whole document, since the block the cursor left and the one
    it entered may sit anywhere.
    """

    def __init__(
        self,
        document: MarkdownDocument,
        *,
        tokenizer: Optional[MarkdownTokenizer] = None,
        theme: Optional[EditorTheme] = None,
        logger_name: str = "markdown_engine.formatting",
    ) -> None:
        self.document = document
        self.tokenizer = tokenizer or MarkdownTokenizer()
        self.theme = theme or EditorTheme()
        self.guard = ReentrancyGuard()
        self.bullets = BulletSubstitutor(
            document, self.guard, bullet=self.theme.bullet, logger_name=logger_name
        )
        self._logger_name = logger_name
        self._cursor = 0
        self._sync_default_style()
        document.add_listener(self._on_document_edited)

    @property
    def cursor_position(self) -> int:
        return self._cursor

    def detach(self) -> None:
        self.document.remove_listener(self._on_document_edited)

    def set_default_style(self, font: Optional[Font] = None, color: Optional[Color] = None) -> None:
        self.theme = self.theme.with_default_style(
            font or self.theme.default_font, color or self.theme.default_color
        )
        self._sync_default_style()

    def _sync_default_style(self) -> None:
        self.document.attributes.default = TextStyle(
            font=self.theme.default_font, foreground=self.theme.default_color
        )

    def _on_document_edited(self, edited: EditedRange) -> None:
        if self.guard.held or edited.mode is MutationMode.PRESENTATION:
            return
        self.on_text_changed(edited.range)

    def on_text_changed(self, edited: TextRange) -> None:
        if self.guard.held or not self.document.length:
            return
        target = paragraph_range(self.document.source_text, edited)
        if target.is_empty:
            return
        with telemetry.span(
            "format::paragraph",
            logger_name=self._logger_name,
            component="formatting",
            metadata={"location": target.location, "length": target.length},
        ):
            self._format(target)

    def on_cursor_moved(self, position: int) -> None:
        self._cursor = self.document.clamp(position)
        if not self.document.length:
            return
        with telemetry.span(
            "format::document",
            logger_name=self._logger_name,
            component="formatting",
            metadata={"cursor": self._cursor, "length": self.document.length},
        ):
            self._format(self.document.full_range)

    def reformat_all(self) -> None:
        self.on_cursor_moved(self._cursor)

    def tokens_for(self, target: Optional[TextRange] = None) -> List[Token]:
        return self.tokenizer.parse_tokens(self.document.source_text, target)

    def is_cursor_inside(self, token: Token) -> bool:
        if not self.document.length:
            return False
        return token.contains_cursor(self.document.clamp(self._cursor))

    def _format(self, target: TextRange) -> None:
        tokens = self.tokens_for(target)
        markers = {token.start for token in tokens if token.kind is TokenKind.LIST}
        self.bullets.reconcile(target, keep=markers)
        self.document.attributes.apply_default_style(target)
        for token in tokens:
            self._apply(token)

    def _apply(self, token: Token) -> None:
        overlay = self.document.attributes
        theme = self.theme
        inside = self.is_cursor_inside(token)
        start, length = token.start, token.range.length

        match token.kind:
            case TokenKind.BOLD:
                overlay.apply_font(TextRange(start + 2, length - 4), theme.default_font.emboldened())
                if not inside:
                    self._hide_delimiters(token, 2)
            case TokenKind.ITALIC:
                overlay.apply_font(TextRange(start + 1, length - 2), theme.default_font.italicized())
                if not inside:
                    self._hide_delimiters(token, 1)
            case TokenKind.HEADER:
                level = token.level or 1
                content = TextRange(start + level + 1, max(0, length - level - 1))
                overlay.apply_font(content, theme.header_font(level))
                overlay.apply_foreground(content, theme.default_color)
                if not inside:
                    overlay.hide(TextRange(start, level + 1), size=theme.hidden_font_size)
            case TokenKind.LIST:
                self._cursor = self.bullets.sync(token, cursor_inside=inside, cursor=self._cursor)
            case TokenKind.INLINE_CODE:
                self._style_code(token, 1, inside)
            case TokenKind.CODE_BLOCK:
                self._style_code(token, 3, inside)
            case (
                TokenKind.INCOMPLETE_BOLD
                | TokenKind.INCOMPLETE_ITALIC
                | TokenKind.INCOMPLETE_HEADER
                | TokenKind.INCOMPLETE_LIST
                | TokenKind.INCOMPLETE_INLINE_CODE
                | TokenKind.INCOMPLETE_CODE_BLOCK
            ):
                overlay.apply_foreground(token.range, theme.dimmed_color)
            case TokenKind.PLAIN:
                pass

    def _style_code(self, token: Token, fence: int, inside: bool) -> None:
        overlay = self.document.attributes
        content = TextRange(token.start + fence, max(0, token.range.length - 2 * fence))
        overlay.apply_font(content, self.theme.code_font())
        overlay.apply_foreground(content, self.theme.code_foreground)
        overlay.apply_background(content, self.theme.code_background)
        if not inside:
            self._hide_delimiters(token, fence)

    def _hide_delimiters(self, token: Token, width: int) -> None:
        overlay = self.document.attributes
        size = self.theme.hidden_font_size
        overlay.hide(TextRange(token.start, width), size=size)
        overlay.hide(TextRange(token.end - width, width), size=size)


__all__ = ["FormattingEngine"]
