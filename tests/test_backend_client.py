"""Tests for the httpx-backed :class:`BackendClient`."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from smartcompile.services.backend_client import BackendClient, ClientSettings
from smartcompile.services.backend_types import (
    AUTO_COMMENT,
    CODE_REVIEW,
    ENDPOINTS,
    EXPLAIN,
    RUN,
    BackendConnectionError,
    BackendHTTPError,
    BackendResponseError,
)

_BASE_URL = "http://backend.test"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> BackendClient:
    transport = httpx.MockTransport(handler)
    http_client = httpx.AsyncClient(transport=transport, base_url=_BASE_URL)
    return BackendClient(ClientSettings(base_url=_BASE_URL), client=http_client)


def test_endpoint_table_matches_backend_routes() -> None:
    assert {name: endpoint.path for name, endpoint in ENDPOINTS.items()} == {
        "run": "/run",
        "explain": "/explain",
        "code_review": "/code_review",
        "auto_comment": "/auto_comment",
    }
    assert [endpoint.check_http_status for endpoint in (RUN, CODE_REVIEW, AUTO_COMMENT)] == [True, True, True]
    assert EXPLAIN.check_http_status is False


@pytest.mark.asyncio
async def test_post_json_sends_json_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"output": "55\n", "raw_error": ""})

    client = _client(handler)
    result = await client.run({"code": "print(55)", "language": "python"})

    assert result == {"output": "55\n", "raw_error": ""}
    request = seen[0]
    assert request.method == "POST"
    assert request.url == httpx.URL(f"{_BASE_URL}/run")
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"code": "print(55)", "language": "python"}


@pytest.mark.asyncio
async def test_code_review_sends_review_type() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"output": "O(n)"})

    client = _client(handler)
    await client.code_review({"code": "x", "language": "c", "review_type": "complexity"})

    assert bodies == [{"code": "x", "language": "c", "review_type": "complexity"}]


@pytest.mark.asyncio
@pytest.mark.parametrize("endpoint", [RUN, CODE_REVIEW, AUTO_COMMENT])
async def test_status_checked_endpoints_reject_non_2xx(endpoint) -> None:
    client = _client(lambda request: httpx.Response(500, json={"output": "ignored"}))

    with pytest.raises(BackendHTTPError) as excinfo:
        await client.post_json(endpoint, {"code": "", "language": "python"})

    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "HTTP error! status: 500"


@pytest.mark.asyncio
async def test_explain_parses_body_despite_error_status() -> None:
    client = _client(lambda request: httpx.Response(500, json={"explanation": "still parsed"}))

    result = await client.explain({"code": "", "language": "python", "raw_error": "boom"})

    assert result == {"explanation": "still parsed"}


@pytest.mark.asyncio
async def test_explain_with_non_json_error_page_is_a_response_error() -> None:
    client = _client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(BackendResponseError, match="not valid JSON"):
        await client.explain({"code": "", "language": "python", "raw_error": "boom"})


@pytest.mark.asyncio
async def test_non_object_body_is_a_response_error() -> None:
    client = _client(lambda request: httpx.Response(200, json=["not", "an", "object"]))

    with pytest.raises(BackendResponseError, match="must be a JSON object"):
        await client.auto_comment({"code": "", "language": "python"})


@pytest.mark.asyncio
async def test_transport_failure_becomes_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = _client(handler)

    with pytest.raises(BackendConnectionError, match="Connection refused"):
        await client.run({"code": "", "language": "python"})


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})), base_url=_BASE_URL
    )
    async with BackendClient(ClientSettings(base_url=_BASE_URL), client=http_client):
        pass

    assert not http_client.is_closed
    await http_client.aclose()


@pytest.mark.asyncio
async def test_owned_client_uses_settings() -> None:
    client = BackendClient(ClientSettings(base_url=_BASE_URL, request_timeout=5.0, default_headers={"X-Test": "1"}))
    http_client = client._client  # noqa: SLF001 - inspecting construction

    assert str(http_client.base_url).rstrip("/") == _BASE_URL
    assert http_client.timeout.read == 5.0
    assert http_client.headers["X-Test"] == "1"

    await client.aclose()
    assert http_client.is_closed


@pytest.mark.asyncio
async def test_invalid_url_becomes_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

    client = _client(handler)

    with pytest.raises(BackendConnectionError, match="non-printable"):
        await client.explain({"code": "", "language": "python", "raw_error": "x"})
