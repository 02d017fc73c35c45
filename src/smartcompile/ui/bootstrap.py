"""Factories wiring the controller, backend client and window together.

Usage:
    from smartcompile.ui.bootstrap import create_workbench, create_window

    controller = create_workbench(settings)
    window = create_window(controller, settings)
    window.show()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.languages import Language
from ..services.backend_client import BackendClient
from ..services.backend_types import BackendTransport
from .application.controller import WorkbenchController
from .events import EventBus
from .models.workbench_state import WorkbenchState

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..services.settings import Settings
    from .presentation.main_window import WorkbenchWindow

_LOGGER = logging.getLogger(__name__)


def create_workbench(
    settings: Settings,
    *,
    client: BackendTransport | None = None,
    event_bus: EventBus | None = None,
) -> WorkbenchController:
    """Create a controller seeded with the configured default language.

    Args:
        settings: Effective settings.
        client: Backend transport; a :class:`BackendClient` for
            ``settings.backend_url`` is created when omitted.
        event_bus: Bus to publish on; a fresh one is created when omitted.
    """

    transport = client or BackendClient(settings.client_settings())
    initial = WorkbenchState.initial(Language.coerce(settings.default_language))
    _LOGGER.info("Workbench ready (backend=%s, language=%s)", settings.backend_url, initial.language.value)
    return WorkbenchController(transport, event_bus, initial_state=initial)


def create_window(controller: WorkbenchController, settings: Settings | None = None) -> WorkbenchWindow:
    """Build the Qt window for ``controller``. Requires a ``QApplication``."""

    from .presentation.main_window import WorkbenchWindow

    return WorkbenchWindow(controller, settings=settings)


__all__ = ["create_workbench", "create_window"]
