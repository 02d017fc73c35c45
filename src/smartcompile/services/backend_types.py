"""Wire contract for the Smart Compile backend service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Protocol, TypedDict


class ReviewType(str, Enum):
    """Review flavours accepted by ``/code_review``."""

    STATIC_CHECK = "static_check"
    COMPLEXITY = "complexity"

    @property
    def display_name(self) -> str:
        return _REVIEW_NAMES[self]


_REVIEW_NAMES = {
    ReviewType.STATIC_CHECK: "AI Code Review",
    ReviewType.COMPLEXITY: "Complexity Analysis",
}


@dataclass(slots=True, frozen=True)
class Endpoint:
    """A backend route and how its responses are validated.

    ``check_http_status`` controls whether a non-2xx response is rejected
    before the body is parsed. ``/explain`` has always parsed the body
    regardless of status, so it is registered with the check disabled.
    """

    name: str
    path: str
    check_http_status: bool = True


RUN = Endpoint("run", "/run")
EXPLAIN = Endpoint("explain", "/explain", check_http_status=False)
CODE_REVIEW = Endpoint("code_review", "/code_review")
AUTO_COMMENT = Endpoint("auto_comment", "/auto_comment")

ENDPOINTS: Mapping[str, Endpoint] = MappingProxyType(
    {endpoint.name: endpoint for endpoint in (RUN, EXPLAIN, CODE_REVIEW, AUTO_COMMENT)}
)


# ---------------------------------------------------------------------------
# Request / response payloads
# ---------------------------------------------------------------------------


class RunRequest(TypedDict):
    code: str
    language: str


class RunResponse(TypedDict, total=False):
    output: str
    raw_error: str


class ExplainRequest(TypedDict):
    code: str
    language: str
    raw_error: str


class ExplainResponse(TypedDict, total=False):
    explanation: str


class CodeReviewRequest(TypedDict):
    code: str
    language: str
    review_type: str


class CodeReviewResponse(TypedDict, total=False):
    output: str


class AutoCommentRequest(TypedDict):
    code: str
    language: str


class AutoCommentResponse(TypedDict, total=False):
    output: str


class BackendTransport(Protocol):
    """One typed coroutine per backend route.

    :class:`~smartcompile.services.backend_client.BackendClient` is the
    production implementation; every method raises :class:`BackendError`
    subclasses on failure.
    """

    async def run(self, request: RunRequest) -> RunResponse:
        ...

    async def explain(self, request: ExplainRequest) -> ExplainResponse:
        ...

    async def code_review(self, request: CodeReviewRequest) -> CodeReviewResponse:
        ...

    async def auto_comment(self, request: AutoCommentRequest) -> AutoCommentResponse:
        ...


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class BackendError(RuntimeError):
    """Base class for failures talking to the backend."""


class BackendHTTPError(BackendError):
    """Raised when a status-checked endpoint answers outside the 2xx range."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP error! status: {status_code}")
        self.status_code = status_code


class BackendConnectionError(BackendError):
    """Raised when the request never produced a response (DNS, refused, timeout)."""


class BackendResponseError(BackendError):
    """Raised when the response body is not a JSON object."""


__all__ = [
    "ReviewType",
    "Endpoint",
    "RUN",
    "EXPLAIN",
    "CODE_REVIEW",
    "AUTO_COMMENT",
    "ENDPOINTS",
    "RunRequest",
    "RunResponse",
    "ExplainRequest",
    "ExplainResponse",
    "CodeReviewRequest",
    "CodeReviewResponse",
    "AutoCommentRequest",
    "AutoCommentResponse",
    "BackendTransport",
    "BackendError",
    "BackendHTTPError",
    "BackendConnectionError",
    "BackendResponseError",
]
