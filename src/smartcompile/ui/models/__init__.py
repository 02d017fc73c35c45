"""State and action models for the workbench UI."""

from .workbench_state import (
    BeginOperation,
    CompleteOperation,
    EditCode,
    OperationOutcome,
    ReplaceCode,
    SelectLanguage,
    ShowMessage,
    WorkbenchAction,
    WorkbenchState,
)

__all__ = [
    "WorkbenchState",
    "WorkbenchAction",
    "SelectLanguage",
    "EditCode",
    "ReplaceCode",
    "ShowMessage",
    "BeginOperation",
    "CompleteOperation",
    "OperationOutcome",
]
