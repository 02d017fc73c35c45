"""Pure state transitions for the workbench.

Editor transitions (:func:`set_language`, :func:`set_code`,
:func:`replace_code`) and output transitions (:func:`set_output`,
:func:`set_raw_error`, :func:`clear_raw_error`) each take a
:class:`WorkbenchState` and return a new one. :func:`reduce` maps an
action onto them and owns the generation bookkeeping that lets late
responses be recognised as stale.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ...core.languages import Language, default_template
from ..models.workbench_state import (
    BeginOperation,
    CompleteOperation,
    EditCode,
    ReplaceCode,
    SelectLanguage,
    ShowMessage,
    WorkbenchAction,
    WorkbenchState,
)

LOGGER = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Editor transitions
# ------------------------------------------------------------------


def set_language(state: WorkbenchState, language: Language | str) -> WorkbenchState:
    """Switch language, reseed the buffer and discard prior output and raw error."""

    resolved = Language.coerce(language)
    return replace(
        state,
        language=resolved,
        code=default_template(resolved),
        output="",
        raw_error="",
    )


def set_code(state: WorkbenchState, text: str) -> WorkbenchState:
    return replace(state, code=text)


def replace_code(state: WorkbenchState, text: str) -> WorkbenchState:
    """Overwrite the buffer with text produced remotely (auto-comment)."""

    return replace(state, code=text)


# ------------------------------------------------------------------
# Output transitions
# ------------------------------------------------------------------


def set_output(state: WorkbenchState, text: str) -> WorkbenchState:
    return replace(state, output=text)


def set_raw_error(state: WorkbenchState, text: str) -> WorkbenchState:
    return replace(state, raw_error=text)


def clear_raw_error(state: WorkbenchState) -> WorkbenchState:
    return replace(state, raw_error="")


# ------------------------------------------------------------------
# Action reducer
# ------------------------------------------------------------------


def is_stale(state: WorkbenchState, action: WorkbenchAction) -> bool:
    """Return True when ``action`` is a completion from a superseded generation."""

    return isinstance(action, CompleteOperation) and action.generation != state.generation


def reduce(state: WorkbenchState, action: WorkbenchAction) -> WorkbenchState:
    """Apply ``action`` to ``state`` and return the resulting state.

    Superseding actions (language switch, local message, operation start)
    bump ``generation``. A :class:`CompleteOperation` whose generation no
    longer matches is ignored and ``state`` is returned unchanged.
    """

    if isinstance(action, SelectLanguage):
        return _bump(set_language(state, action.language))
    if isinstance(action, EditCode):
        return set_code(state, action.text)
    if isinstance(action, ReplaceCode):
        return replace_code(state, action.text)
    if isinstance(action, ShowMessage):
        return _bump(set_output(state, action.text))
    if isinstance(action, BeginOperation):
        updated = set_output(state, action.placeholder)
        if action.clear_raw_error:
            updated = clear_raw_error(updated)
        return _bump(updated)
    if isinstance(action, CompleteOperation):
        if is_stale(state, action):
            LOGGER.debug(
                "Discarding stale completion (generation=%s, current=%s)",
                action.generation,
                state.generation,
            )
            return state
        outcome = action.outcome
        updated = state
        if outcome.code is not None:
            updated = replace_code(updated, outcome.code)
        if outcome.raw_error is not None:
            updated = set_raw_error(updated, outcome.raw_error)
        return set_output(updated, outcome.output)
    raise TypeError(f"Unsupported workbench action: {type(action).__name__}")


def _bump(state: WorkbenchState) -> WorkbenchState:
    return replace(state, generation=state.generation + 1)


__all__ = [
    "set_language",
    "set_code",
    "replace_code",
    "set_output",
    "set_raw_error",
    "clear_raw_error",
    "is_stale",
    "reduce",
]
