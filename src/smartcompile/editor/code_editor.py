"""Plain-text code editor with per-language highlighting."""

from __future__ import annotations

import logging
from typing import Mapping

from PySide6.QtGui import QColor, QFont, QSyntaxHighlighter, QTextCharFormat, QTextDocument
from PySide6.QtWidgets import QPlainTextEdit, QWidget

from ..core.languages import Language
from .syntax.code import highlight_spans
from .syntax.themes import palette_for

LOGGER = logging.getLogger(__name__)
_TAB_WIDTH_SPACES = 4


class CodeHighlighter(QSyntaxHighlighter):
    """Applies :func:`highlight_spans` to each block of the document."""

    def __init__(self, document: QTextDocument, language: Language, palette: Mapping[str, str]) -> None:
        super().__init__(document)
        self._language = language
        self._formats = _build_formats(palette)

    @property
    def language(self) -> Language:
        return self._language

    def set_language(self, language: Language) -> None:
        if language is self._language:
            return
        self._language = language
        self.rehighlight()

    def highlightBlock(self, text: str) -> None:  # noqa: N802 - Qt override
        for span in highlight_spans(text, self._language):
            text_format = self._formats.get(span.category)
            if text_format is not None:
                self.setFormat(span.start, span.length, text_format)


class CodeEditor(QPlainTextEdit):
    """Editor widget whose highlighting follows the selected language."""

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        language: Language = Language.PYTHON,
        theme: str = "dark",
        font_family: str = "JetBrains Mono",
        font_size: int = 13,
    ) -> None:
        super().__init__(parent)
        palette = palette_for(theme)
        self.setObjectName("sc-code-editor")
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        font = QFont(font_family, font_size)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(font)
        self.setTabStopDistance(self.fontMetrics().horizontalAdvance(" ") * _TAB_WIDTH_SPACES)
        self.setStyleSheet(
            f"QPlainTextEdit#sc-code-editor {{ background: {palette['background']}; color: {palette['foreground']}; }}"
        )
        self._highlighter = CodeHighlighter(self.document(), language, palette)

    @property
    def language(self) -> Language:
        return self._highlighter.language

    def set_language(self, language: Language) -> None:
        LOGGER.debug("Editor highlighting switched to %s", language.value)
        self._highlighter.set_language(language)

    def replace_text(self, text: str) -> None:
        """Replace the whole buffer without emitting ``textChanged``."""

        if self.toPlainText() == text:
            return
        blocked = self.blockSignals(True)
        try:
            self.setPlainText(text)
        finally:
            self.blockSignals(blocked)


def _build_formats(palette: Mapping[str, str]) -> dict[str, QTextCharFormat]:
    formats: dict[str, QTextCharFormat] = {}
    for category in ("keyword", "type", "builtin", "string", "number", "comment", "preprocessor", "decorator"):
        text_format = QTextCharFormat()
        text_format.setForeground(QColor(palette[category]))
        if category == "keyword":
            text_format.setFontWeight(QFont.Weight.Bold)
        elif category == "comment":
            text_format.setFontItalic(True)
        formats[category] = text_format
    return formats


__all__ = ["CodeEditor", "CodeHighlighter"]
