"""Application layer: the workbench controller and the operation catalogue."""

from __future__ import annotations

from .controller import ACTION_NAMES, BackendTransport, WorkbenchController
from .operations import OPERATIONS, OperationSpec

__all__ = ["WorkbenchController", "BackendTransport", "ACTION_NAMES", "OperationSpec", "OPERATIONS"]
