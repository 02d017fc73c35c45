"""Language-aware highlighting rules."""

from .code import HighlightSpan, category_for, highlight_spans, lexer_for
from .themes import DARK_PALETTE, LIGHT_PALETTE, palette_for

__all__ = [
    "HighlightSpan",
    "category_for",
    "highlight_spans",
    "lexer_for",
    "DARK_PALETTE",
    "LIGHT_PALETTE",
    "palette_for",
]
