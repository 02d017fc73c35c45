"""Async JSON client for the Smart Compile backend built on ``httpx``."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, cast

import httpx

from .backend_types import (
    AUTO_COMMENT,
    CODE_REVIEW,
    EXPLAIN,
    RUN,
    AutoCommentRequest,
    AutoCommentResponse,
    BackendConnectionError,
    BackendHTTPError,
    BackendResponseError,
    CodeReviewRequest,
    CodeReviewResponse,
    Endpoint,
    ExplainRequest,
    ExplainResponse,
    RunRequest,
    RunResponse,
)

LOGGER = logging.getLogger(__name__)
_JSON_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}


@dataclass(slots=True)
class ClientSettings:
    """Subset of settings required to configure the backend client."""

    base_url: str = "http://127.0.0.1:5000"
    request_timeout: float | None = None
    default_headers: Mapping[str, str] | None = None
    debug_logging: bool = False


class BackendClient:
    """Async client issuing one JSON POST per operation.

    No retries and no streaming: every call is a single request/response.
    Failures are raised as :class:`~smartcompile.services.backend_types.BackendError`
    subclasses so callers can surface them uniformly.
    """

    def __init__(self, settings: ClientSettings, *, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or self._build_client(settings)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def post_json(self, endpoint: Endpoint, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """POST ``payload`` to ``endpoint`` and return the decoded JSON object."""

        LOGGER.debug("POST %s (%s field(s))", endpoint.path, len(payload))
        if self._settings.debug_logging:
            LOGGER.debug("Request body for %s: %s", endpoint.path, json.dumps(payload, ensure_ascii=False))
        try:
            response = await self._client.post(endpoint.path, json=dict(payload), headers=dict(_JSON_HEADERS))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise BackendConnectionError(_describe_transport_error(exc)) from exc

        if endpoint.check_http_status and not response.is_success:
            LOGGER.debug("%s answered with status %s", endpoint.path, response.status_code)
            raise BackendHTTPError(response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise BackendResponseError(f"Response from {endpoint.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise BackendResponseError(
                f"Response from {endpoint.path} must be a JSON object, got {type(data).__name__}"
            )
        return data

    async def run(self, request: RunRequest) -> RunResponse:
        return cast(RunResponse, await self.post_json(RUN, request))

    async def explain(self, request: ExplainRequest) -> ExplainResponse:
        return cast(ExplainResponse, await self.post_json(EXPLAIN, request))

    async def code_review(self, request: CodeReviewRequest) -> CodeReviewResponse:
        return cast(CodeReviewResponse, await self.post_json(CODE_REVIEW, request))

    async def auto_comment(self, request: AutoCommentRequest) -> AutoCommentResponse:
        return cast(AutoCommentResponse, await self.post_json(AUTO_COMMENT, request))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _build_client(self, settings: ClientSettings) -> httpx.AsyncClient:
        headers = dict(settings.default_headers) if settings.default_headers else None
        return httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.request_timeout,
            headers=headers,
        )


def _describe_transport_error(exc: Exception) -> str:
    detail = str(exc).strip()
    return detail or exc.__class__.__name__


__all__ = ["BackendClient", "ClientSettings"]
