"""Tests for the operation catalogue in :mod:`smartcompile.ui.application.operations`."""

from __future__ import annotations

import pytest

from smartcompile.core.languages import Language
from smartcompile.services.backend_types import BackendConnectionError, ReviewType
from smartcompile.ui.application.operations import (
    OPERATIONS,
    describe_error,
    response_text,
    review_operation,
)
from smartcompile.ui.models.workbench_state import WorkbenchState


def test_catalogue_covers_five_operations() -> None:
    assert sorted(OPERATIONS) == ["auto_comment", "code_review", "complexity_analysis", "explain_error", "run"]


def test_only_explain_keeps_raw_error() -> None:
    keeps = [name for name, spec in OPERATIONS.items() if not spec.clears_raw_error]
    assert keeps == ["explain_error"]


def test_review_requests_share_endpoint() -> None:
    state = WorkbenchState.initial(Language.C)
    static = review_operation(ReviewType.STATIC_CHECK)
    complexity = review_operation(ReviewType.COMPLEXITY)

    assert static.endpoint is complexity.endpoint
    assert static.build_request(state)["review_type"] == "static_check"
    assert complexity.build_request(state) == {
        "code": state.code,
        "language": "c",
        "review_type": "complexity",
    }


def test_response_text_coercion() -> None:
    assert response_text({"output": "a"}, "output") == "a"
    assert response_text({}, "output") == ""
    assert response_text({"output": None}, "output") == ""
    assert response_text({"output": 3}, "output") == "3"


def test_describe_error_falls_back_to_type_name() -> None:
    assert describe_error(BackendConnectionError("refused")) == "refused"
    assert describe_error(BackendConnectionError()) == "BackendConnectionError"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, path",
    [
        ("run", "/run"),
        ("explain_error", "/explain"),
        ("code_review", "/code_review"),
        ("complexity_analysis", "/code_review"),
        ("auto_comment", "/auto_comment"),
    ],
)
async def test_each_operation_calls_its_route(fake_backend, name: str, path: str) -> None:
    spec = OPERATIONS[name]
    fake_backend.respond(spec.endpoint.name, {"output": "ok"})
    state = WorkbenchState(raw_error="boom")

    data = await spec.call(fake_backend, spec.build_request(state))

    assert data == {"output": "ok"}
    assert fake_backend.calls == [(path, dict(spec.build_request(state)))]
    assert spec.endpoint.path == path


def test_explain_request_carries_raw_error() -> None:
    state = WorkbenchState(language=Language.JAVA, code="class A {}", raw_error="error: ';' expected")

    assert OPERATIONS["explain_error"].build_request(state) == {
        "code": "class A {}",
        "language": "java",
        "raw_error": "error: ';' expected",
    }
