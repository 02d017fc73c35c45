"""Workbench state and the actions that transition it.

The whole editor/output session is held in one immutable
:class:`WorkbenchState` value. Every change is expressed as one of the
action dataclasses below and applied by the pure reducer in
:mod:`smartcompile.ui.domain.workbench_reducer`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ...core.languages import Language, default_template


@dataclass(slots=True, frozen=True)
class WorkbenchState:
    """Snapshot of the editor and output panel.

    Attributes:
        language: Currently selected language.
        code: Editor buffer contents.
        output: Text shown in the output panel. Always replaced, never appended.
        raw_error: Raw error text captured by the most recent run, or ``""``.
        generation: Counter bumped by every superseding action. Responses
            dispatched under an older generation are discarded.
    """

    language: Language = Language.PYTHON
    code: str = default_template(Language.PYTHON)
    output: str = ""
    raw_error: str = ""
    generation: int = 0

    @classmethod
    def initial(cls, language: Language | str = Language.PYTHON) -> "WorkbenchState":
        """Return the state shown when the workbench is first mounted."""

        resolved = Language.coerce(language)
        return cls(language=resolved, code=default_template(resolved))


@dataclass(slots=True, frozen=True)
class OperationOutcome:
    """Reduced result of a single remote operation.

    ``None`` fields leave the corresponding state cell untouched.
    """

    output: str
    raw_error: str | None = None
    code: str | None = None
    succeeded: bool = True


@dataclass(slots=True, frozen=True)
class SelectLanguage:
    """User picked a language; resets the buffer and clears output."""

    language: Language


@dataclass(slots=True, frozen=True)
class EditCode:
    """User edited the buffer."""

    text: str


@dataclass(slots=True, frozen=True)
class ReplaceCode:
    """Buffer replaced wholesale by a remote response."""

    text: str


@dataclass(slots=True, frozen=True)
class ShowMessage:
    """Local message that supersedes whatever operation was current."""

    text: str


@dataclass(slots=True, frozen=True)
class BeginOperation:
    """Start of a remote operation: placeholder write and raw error bookkeeping."""

    placeholder: str
    clear_raw_error: bool = True


@dataclass(slots=True, frozen=True)
class CompleteOperation:
    """Reduction of a remote response, tagged with its dispatch generation."""

    generation: int
    outcome: OperationOutcome


WorkbenchAction = Union[SelectLanguage, EditCode, ReplaceCode, ShowMessage, BeginOperation, CompleteOperation]


__all__ = [
    "WorkbenchState",
    "OperationOutcome",
    "SelectLanguage",
    "EditCode",
    "ReplaceCode",
    "ShowMessage",
    "BeginOperation",
    "CompleteOperation",
    "WorkbenchAction",
]
