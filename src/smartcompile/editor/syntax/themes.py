"""Colour palettes for highlight categories."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

DARK_PALETTE: Mapping[str, str] = MappingProxyType(
    {
        "background": "#1e1e1e",
        "foreground": "#d4d4d4",
        "keyword": "#569cd6",
        "type": "#4ec9b0",
        "builtin": "#dcdcaa",
        "string": "#ce9178",
        "number": "#b5cea8",
        "comment": "#6a9955",
        "preprocessor": "#c586c0",
        "decorator": "#c8c8c8",
    }
)

LIGHT_PALETTE: Mapping[str, str] = MappingProxyType(
    {
        "background": "#ffffff",
        "foreground": "#1f1f1f",
        "keyword": "#0000ff",
        "type": "#267f99",
        "builtin": "#795e26",
        "string": "#a31515",
        "number": "#098658",
        "comment": "#008000",
        "preprocessor": "#af00db",
        "decorator": "#808080",
    }
)


def palette_for(theme: str | None) -> Mapping[str, str]:
    """Return the palette for ``theme``; anything but ``"light"`` maps to dark."""

    if (theme or "").strip().lower() == "light":
        return LIGHT_PALETTE
    return DARK_PALETTE
