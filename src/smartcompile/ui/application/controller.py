"""Workbench controller: owns the state and runs remote operations.

The controller is the single writer of :class:`WorkbenchState`. User
intents either reduce synchronously (language switch, edits, local
messages) or go through :meth:`WorkbenchController.invoke`, which runs
the placeholder / request / reduction protocol for an
:class:`OperationSpec`.

There is no cancellation. Starting a new action bumps the state
generation, and a response that comes back under an older generation is
discarded instead of overwriting newer output.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from ...core.languages import Language
from ...services.backend_types import BackendError, BackendTransport
from ..domain.workbench_reducer import is_stale, reduce
from ..events import (
    CodeReplaced,
    EventBus,
    LanguageChanged,
    OperationCompleted,
    OperationStarted,
    StaleResponseDiscarded,
    StateChanged,
)
from ..models.workbench_state import (
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
from .operations import (
    AUTO_COMMENT_OPERATION,
    CODE_REVIEW_OPERATION,
    COMPLEXITY_OPERATION,
    EXPLAIN_OPERATION,
    RUN_OPERATION,
    OperationSpec,
)

LOGGER = logging.getLogger(__name__)

FORMAT_CODE_FEATURE = "Format Code"


def unimplemented_message(feature: str) -> str:
    return f"Feature {feature} is not yet implemented. This is the only remaining feature!"


class WorkbenchController:
    """Single owner of the workbench state.

    Example::

        controller = WorkbenchController(BackendClient(ClientSettings()))
        await controller.run_code()
        if controller.state.raw_error:
            await controller.explain_error()
    """

    def __init__(
        self,
        client: BackendTransport,
        event_bus: EventBus | None = None,
        *,
        initial_state: WorkbenchState | None = None,
    ) -> None:
        self._client = client
        self._bus = event_bus or EventBus()
        self._state = initial_state or WorkbenchState.initial()

    @property
    def state(self) -> WorkbenchState:
        return self._state

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    def dispatch(self, action: WorkbenchAction) -> WorkbenchState:
        """Reduce ``action`` into the current state and notify subscribers."""

        previous = self._state
        current = reduce(previous, action)
        self._state = current
        if current == previous:
            return current

        self._bus.publish(StateChanged(previous=previous, current=current))
        if isinstance(action, SelectLanguage):
            self._bus.publish(LanguageChanged(language=current.language))
            self._bus.publish(CodeReplaced(code=current.code, source="template"))
        elif isinstance(action, ReplaceCode) or (
            isinstance(action, CompleteOperation) and action.outcome.code is not None
        ):
            self._bus.publish(CodeReplaced(code=current.code, source="auto_comment"))
        return current

    # ------------------------------------------------------------------
    # Editor intents
    # ------------------------------------------------------------------

    def select_language(self, language: Language | str) -> WorkbenchState:
        resolved = Language.coerce(language)
        LOGGER.debug("Language selected: %s", resolved.value)
        return self.dispatch(SelectLanguage(resolved))

    def edit_code(self, text: str) -> WorkbenchState:
        return self.dispatch(EditCode(text))

    def request_unimplemented(self, feature: str) -> WorkbenchState:
        """Show the placeholder notice for a button that has no backend yet."""

        LOGGER.info("Unimplemented feature requested: %s", feature)
        return self.dispatch(ShowMessage(unimplemented_message(feature)))

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def invoke(self, spec: OperationSpec) -> WorkbenchState:
        """Run ``spec`` through the placeholder / request / reduction protocol.

        Failures never escape: they are reduced into output text.
        The returned state is the controller's state once this call is done,
        which may belong to a newer action if this response went stale.
        """

        if spec.precondition is not None:
            message = spec.precondition(self._state)
            if message is not None:
                LOGGER.debug("%s skipped: precondition not met", spec.name)
                return self.dispatch(ShowMessage(message))

        state = self.dispatch(
            BeginOperation(placeholder=spec.placeholder(self._state), clear_raw_error=spec.clears_raw_error)
        )
        generation = state.generation
        self._bus.publish(OperationStarted(operation=spec.name, generation=generation))
        payload = spec.build_request(state)
        LOGGER.debug("Dispatching %s (generation=%s) to %s", spec.name, generation, spec.endpoint.path)

        try:
            data = await spec.call(self._client, payload)
            outcome = spec.reduce_success(data, state)
        except BackendError as exc:
            LOGGER.warning("%s failed: %s", spec.name, exc)
            outcome = OperationOutcome(output=spec.reduce_failure(exc), succeeded=False)
        except Exception as exc:
            LOGGER.exception("%s failed unexpectedly", spec.name)
            outcome = OperationOutcome(output=spec.reduce_failure(exc), succeeded=False)

        completion = CompleteOperation(generation=generation, outcome=outcome)
        if is_stale(self._state, completion):
            LOGGER.info(
                "Discarding %s response from generation %s (current=%s)",
                spec.name,
                generation,
                self._state.generation,
            )
            self._bus.publish(
                StaleResponseDiscarded(
                    operation=spec.name,
                    generation=generation,
                    current_generation=self._state.generation,
                )
            )
            return self._state

        current = self.dispatch(completion)
        self._bus.publish(
            OperationCompleted(operation=spec.name, generation=generation, succeeded=outcome.succeeded)
        )
        return current

    async def run_code(self) -> WorkbenchState:
        return await self.invoke(RUN_OPERATION)

    async def explain_error(self) -> WorkbenchState:
        return await self.invoke(EXPLAIN_OPERATION)

    async def review_code(self) -> WorkbenchState:
        return await self.invoke(CODE_REVIEW_OPERATION)

    async def analyze_complexity(self) -> WorkbenchState:
        return await self.invoke(COMPLEXITY_OPERATION)

    async def auto_comment(self) -> WorkbenchState:
        return await self.invoke(AUTO_COMMENT_OPERATION)

    async def format_code(self) -> WorkbenchState:
        return self.request_unimplemented(FORMAT_CODE_FEATURE)

    # ------------------------------------------------------------------
    # Named actions
    # ------------------------------------------------------------------

    def action_handlers(self) -> dict[str, Callable[[], Awaitable[WorkbenchState]]]:
        """Map the action names used by the CLI and the toolbar to handlers."""

        return {
            "run": self.run_code,
            "review": self.review_code,
            "explain": self.explain_error,
            "auto-comment": self.auto_comment,
            "complexity": self.analyze_complexity,
            "format": self.format_code,
        }

    async def perform(self, action: str) -> WorkbenchState:
        handlers = self.action_handlers()
        try:
            handler = handlers[action]
        except KeyError:
            raise ValueError(f"Unknown action '{action}' (expected one of: {', '.join(handlers)})") from None
        return await handler()


ACTION_NAMES: tuple[str, ...] = ("run", "review", "explain", "auto-comment", "complexity", "format")


__all__ = ["WorkbenchController", "BackendTransport", "ACTION_NAMES", "FORMAT_CODE_FEATURE", "unimplemented_message"]
