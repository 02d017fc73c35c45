"""Pygments-backed highlighting for the supported languages.

Highlighting is line based, like :class:`QSyntaxHighlighter` blocks, so
constructs spanning several lines (block comments, docstrings) are only
coloured line by line.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping

from pygments.lexer import Lexer
from pygments.lexers import CLexer, CppLexer, JavaLexer, PythonLexer
from pygments.token import Comment, Keyword, Name, Number, String, Token, _TokenType

from ...core.languages import Language

_LEXERS: Mapping[Language, type[Lexer]] = {
    Language.PYTHON: PythonLexer,
    Language.JAVA: JavaLexer,
    Language.C: CLexer,
    Language.CPP: CppLexer,
}

# Looked up from the token type towards ``Token``; the nearest entry wins.
TOKEN_CATEGORIES: Mapping[_TokenType, str] = {
    Keyword.Type: "type",
    Keyword: "keyword",
    Name.Builtin: "builtin",
    Name.Decorator: "decorator",
    String: "string",
    Number: "number",
    Comment.Preproc: "preprocessor",
    Comment.PreprocFile: "preprocessor",
    Comment: "comment",
}


@dataclass(slots=True, frozen=True)
class HighlightSpan:
    start: int
    length: int
    category: str


@lru_cache(maxsize=None)
def lexer_for(language: Language) -> Lexer:
    """Return the shared lexer instance for ``language``."""

    return _LEXERS[language](stripnl=False, ensurenl=False)


def category_for(token_type: _TokenType) -> str | None:
    """Map a Pygments token type onto a palette category, or ``None`` for plain text."""

    current: _TokenType | None = token_type
    while current is not None and current is not Token:
        category = TOKEN_CATEGORIES.get(current)
        if category is not None:
            return category
        current = current.parent
    return None


def highlight_spans(line: str, language: Language | str) -> list[HighlightSpan]:
    """Return the spans to paint for a single line of ``language`` source."""

    if not line:
        return []
    spans: list[HighlightSpan] = []
    for index, token_type, value in lexer_for(Language.coerce(language)).get_tokens_unprocessed(line):
        category = category_for(token_type)
        if category is None or not value:
            continue
        spans.append(HighlightSpan(index, len(value), category))
    return spans


__all__ = ["HighlightSpan", "TOKEN_CATEGORIES", "category_for", "highlight_spans", "lexer_for"]
