"""Domain layer for the workbench UI.

Pure state transitions with no Qt or network dependencies.
"""

from __future__ import annotations

from .workbench_reducer import (
    clear_raw_error,
    is_stale,
    reduce,
    replace_code,
    set_code,
    set_language,
    set_output,
    set_raw_error,
)

__all__ = [
    "reduce",
    "is_stale",
    "set_language",
    "set_code",
    "replace_code",
    "set_output",
    "set_raw_error",
    "clear_raw_error",
]
