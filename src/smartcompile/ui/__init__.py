"""UI package: state models, reducers, controller and the Qt window.

Only :mod:`smartcompile.ui.presentation` imports Qt, so the controller
can be driven headless.
"""

from .application.controller import WorkbenchController
from .bootstrap import create_window, create_workbench
from .events import EventBus
from .models.workbench_state import WorkbenchState

__all__ = ["WorkbenchController", "WorkbenchState", "EventBus", "create_workbench", "create_window"]
