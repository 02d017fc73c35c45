"""Declarative definitions of the remote operations.

Each :class:`OperationSpec` describes one button's round trip: the
placeholder shown while waiting, how the request body is built from the
current state, and how a response or a failure becomes an
:class:`OperationOutcome`. The controller runs every operation through the
same dispatch primitive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from ...services.backend_types import (
    AUTO_COMMENT,
    CODE_REVIEW,
    EXPLAIN,
    RUN,
    AutoCommentRequest,
    BackendTransport,
    CodeReviewRequest,
    Endpoint,
    ExplainRequest,
    ReviewType,
    RunRequest,
)
from ..models.workbench_state import OperationOutcome, WorkbenchState

RUN_PLACEHOLDER = "Running code..."
EXPLAIN_PLACEHOLDER = "Generating AI explanation..."
AUTO_COMMENT_PLACEHOLDER = "Generating inline comments..."
AUTO_COMMENT_SUCCESS = "Comments generated successfully! Check the code editor."
EXPLAIN_NEEDS_RUN = "Please run your code first and generate an error before explaining."

RequestBuilder = Callable[[WorkbenchState], Any]
BackendCall = Callable[[BackendTransport, Any], Awaitable[Mapping[str, Any]]]
SuccessReducer = Callable[[Mapping[str, Any], WorkbenchState], OperationOutcome]
FailureReducer = Callable[[BaseException], str]


@dataclass(slots=True, frozen=True)
class OperationSpec:
    """One remote operation, parameterizing the shared three-phase protocol.

    Attributes:
        name: Stable identifier used in events and logs.
        endpoint: Backend route the request is posted to.
        placeholder: Builds the text shown while the request is in flight.
        build_request: Builds the typed request body from the state at dispatch time.
        call: Sends that body through the matching :class:`BackendTransport` method.
        reduce_success: Turns a decoded response into an outcome.
        reduce_failure: Turns the caught error into output text.
        clears_raw_error: Whether dispatch clears the captured raw error.
        precondition: Optional check returning a message when the operation
            must not be sent; the message is shown and no request is made.
    """

    name: str
    endpoint: Endpoint
    placeholder: Callable[[WorkbenchState], str]
    build_request: RequestBuilder
    call: BackendCall
    reduce_success: SuccessReducer
    reduce_failure: FailureReducer
    clears_raw_error: bool = True
    precondition: Callable[[WorkbenchState], str | None] | None = None


def response_text(data: Mapping[str, Any], key: str) -> str:
    """Return ``data[key]`` as text; a missing or null field renders as ``""``."""

    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def describe_error(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


def _run_request(state: WorkbenchState) -> RunRequest:
    return RunRequest(code=state.code, language=state.language.value)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


def _run_success(data: Mapping[str, Any], state: WorkbenchState) -> OperationOutcome:
    return OperationOutcome(output=response_text(data, "output"), raw_error=response_text(data, "raw_error"))


RUN_OPERATION = OperationSpec(
    name="run",
    endpoint=RUN,
    placeholder=lambda state: RUN_PLACEHOLDER,
    build_request=_run_request,
    call=lambda client, request: client.run(request),
    reduce_success=_run_success,
    reduce_failure=lambda error: f"Error connecting to backend: {describe_error(error)}. Is Flask running?",
)


# ---------------------------------------------------------------------------
# Explain error
# ---------------------------------------------------------------------------


def _explain_precondition(state: WorkbenchState) -> str | None:
    if not state.raw_error:
        return EXPLAIN_NEEDS_RUN
    return None


def _explain_request(state: WorkbenchState) -> ExplainRequest:
    return ExplainRequest(code=state.code, language=state.language.value, raw_error=state.raw_error)


EXPLAIN_OPERATION = OperationSpec(
    name="explain_error",
    endpoint=EXPLAIN,
    placeholder=lambda state: EXPLAIN_PLACEHOLDER,
    build_request=_explain_request,
    call=lambda client, request: client.explain(request),
    reduce_success=lambda data, state: OperationOutcome(output=response_text(data, "explanation")),
    reduce_failure=lambda error: f"Error: Could not get AI explanation. Detail: {describe_error(error)}",
    clears_raw_error=False,
    precondition=_explain_precondition,
)


# ---------------------------------------------------------------------------
# Code review / complexity analysis
# ---------------------------------------------------------------------------


def review_operation(review_type: ReviewType) -> OperationSpec:
    """Build the ``/code_review`` operation for ``review_type``."""

    review_name = review_type.display_name

    def _request(state: WorkbenchState) -> CodeReviewRequest:
        return CodeReviewRequest(code=state.code, language=state.language.value, review_type=review_type.value)

    def _success(data: Mapping[str, Any], state: WorkbenchState) -> OperationOutcome:
        return OperationOutcome(output=f"--- {review_name} Results ---\n{response_text(data, 'output')}")

    return OperationSpec(
        name="code_review" if review_type is ReviewType.STATIC_CHECK else "complexity_analysis",
        endpoint=CODE_REVIEW,
        placeholder=lambda state: f"Running {review_name} for {state.language.value}...",
        build_request=_request,
        call=lambda client, request: client.code_review(request),
        reduce_success=_success,
        reduce_failure=lambda error: f"Error connecting to backend for {review_name}: {describe_error(error)}",
    )


CODE_REVIEW_OPERATION = review_operation(ReviewType.STATIC_CHECK)
COMPLEXITY_OPERATION = review_operation(ReviewType.COMPLEXITY)


# ---------------------------------------------------------------------------
# Auto-comment
# ---------------------------------------------------------------------------


def _auto_comment_request(state: WorkbenchState) -> AutoCommentRequest:
    return AutoCommentRequest(code=state.code, language=state.language.value)


def _auto_comment_success(data: Mapping[str, Any], state: WorkbenchState) -> OperationOutcome:
    return OperationOutcome(output=AUTO_COMMENT_SUCCESS, code=response_text(data, "output"))


AUTO_COMMENT_OPERATION = OperationSpec(
    name="auto_comment",
    endpoint=AUTO_COMMENT,
    placeholder=lambda state: AUTO_COMMENT_PLACEHOLDER,
    build_request=_auto_comment_request,
    call=lambda client, request: client.auto_comment(request),
    reduce_success=_auto_comment_success,
    reduce_failure=lambda error: f"Error generating comments: {describe_error(error)}",
)


OPERATIONS: Mapping[str, OperationSpec] = {
    spec.name: spec
    for spec in (
        RUN_OPERATION,
        EXPLAIN_OPERATION,
        CODE_REVIEW_OPERATION,
        COMPLEXITY_OPERATION,
        AUTO_COMMENT_OPERATION,
    )
}


__all__ = [
    "OperationSpec",
    "OPERATIONS",
    "RUN_OPERATION",
    "EXPLAIN_OPERATION",
    "CODE_REVIEW_OPERATION",
    "COMPLEXITY_OPERATION",
    "AUTO_COMMENT_OPERATION",
    "review_operation",
    "response_text",
    "describe_error",
    "RUN_PLACEHOLDER",
    "EXPLAIN_PLACEHOLDER",
    "AUTO_COMMENT_PLACEHOLDER",
    "AUTO_COMMENT_SUCCESS",
    "EXPLAIN_NEEDS_RUN",
]
