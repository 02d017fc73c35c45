"""Event bus and workbench events.

Components observe the workbench through typed events instead of
polling the controller. The bus is synchronous and single-threaded; it
is only ever touched from the asyncio/Qt loop thread.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar
from weakref import WeakMethod

from ..core.languages import Language
from .models.workbench_state import WorkbenchState

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all workbench events."""


@dataclass(slots=True)
class StateChanged(Event):
    """Emitted after every reduction that produced a different state.

    Attributes:
        previous: State before the action was applied.
        current: State after the action was applied.
    """

    previous: WorkbenchState
    current: WorkbenchState


@dataclass(slots=True)
class LanguageChanged(Event):
    """Emitted when the user selects a language.

    Attributes:
        language: The newly selected language.
    """

    language: Language


@dataclass(slots=True)
class CodeReplaced(Event):
    """Emitted when the buffer is overwritten by something other than typing.

    Attributes:
        code: The new buffer contents.
        source: ``"template"`` for a language switch, ``"auto_comment"`` for a remote rewrite.
    """

    code: str
    source: str


@dataclass(slots=True)
class OperationStarted(Event):
    """Emitted once the placeholder has been written and the request is about to go out.

    Attributes:
        operation: Name of the operation (``run``, ``explain_error``...).
        generation: Generation the eventual response must match.
    """

    operation: str
    generation: int


@dataclass(slots=True)
class OperationCompleted(Event):
    """Emitted after a response or failure has been reduced into state.

    Attributes:
        operation: Name of the operation.
        generation: Generation the request was dispatched under.
        succeeded: False when the reduction came from a failure path.
    """

    operation: str
    generation: int
    succeeded: bool


@dataclass(slots=True)
class StaleResponseDiscarded(Event):
    """Emitted when a response arrives after a newer action superseded it.

    Attributes:
        operation: Name of the operation whose response was dropped.
        generation: Generation the request was dispatched under.
        current_generation: Generation in effect when the response arrived.
    """

    operation: str
    generation: int
    current_generation: int


class EventBus(Generic[E]):
    """Typed publish/subscribe bus.

    Bound methods are held through :class:`weakref.WeakMethod` so a widget
    that goes away stops receiving events without unsubscribing. Plain
    functions and lambdas are held strongly.

    Example::

        bus = EventBus()
        bus.subscribe(OperationStarted, lambda event: print(event.operation))
        bus.publish(OperationStarted(operation="run", generation=1))
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: defaultdict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Register ``handler`` for events of exactly ``event_type``."""

        self._handlers[event_type].append(_HandlerRef.create(handler))
        logger.debug("Subscribed %s to %s", _handler_name(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""

        handlers = self._handlers.get(event_type)
        if not handlers:
            return
        for index, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(index)
                logger.debug("Unsubscribed %s from %s", _handler_name(handler), event_type.__name__)
                return

    def publish(self, event: E) -> None:
        """Invoke every handler registered for ``type(event)`` in subscription order.

        A handler that raises is logged and the remaining handlers still run.
        """

        event_type = type(event)
        handlers = self._handlers.get(event_type)
        if not handlers:
            return

        dead: list[_HandlerRef] = []
        for handler_ref in list(handlers):
            handler = handler_ref.resolve()
            if handler is None:
                dead.append(handler_ref)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised while handling %s",
                    _handler_name(handler),
                    event_type.__name__,
                )
        for handler_ref in dead:
            if handler_ref in handlers:
                handlers.remove(handler_ref)


class _HandlerRef:
    """Strong or weak reference to a subscribed handler."""

    __slots__ = ("_ref", "_is_weak")

    def __init__(self, target: Any, is_weak: bool) -> None:
        self._ref = target
        self._is_weak = is_weak

    @classmethod
    def create(cls, handler: Handler) -> "_HandlerRef":
        if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True)
            except TypeError:
                pass
        return cls(handler, is_weak=False)

    def resolve(self) -> Handler | None:
        if self._is_weak:
            return self._ref()
        return self._ref

    def matches(self, handler: Handler) -> bool:
        resolved = self.resolve()
        return resolved is not None and resolved == handler


def _handler_name(handler: Handler) -> str:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    return getattr(handler, "__name__", repr(handler))


__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "StateChanged",
    "LanguageChanged",
    "CodeReplaced",
    "OperationStarted",
    "OperationCompleted",
    "StaleResponseDiscarded",
]
