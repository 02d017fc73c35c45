"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
import os
from typing import Any, Mapping

import pytest

from smartcompile.services.backend_types import AUTO_COMMENT, CODE_REVIEW, EXPLAIN, RUN, Endpoint

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeBackend:
    """In-memory :class:`BackendTransport` standing in for :class:`BackendClient`.

    Queue a response per endpoint name with :meth:`respond`; a queued
    exception is raised instead of returned, and a queued
    :class:`asyncio.Event` holds the call open until it is set.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._queued: dict[str, list[Any]] = {}

    def respond(self, endpoint: str, result: Any, *, gate: asyncio.Event | None = None) -> None:
        self._queued.setdefault(endpoint, []).append((result, gate))

    def call_count(self, path: str | None = None) -> int:
        if path is None:
            return len(self.calls)
        return sum(1 for called_path, _ in self.calls if called_path == path)

    async def run(self, request: Mapping[str, Any]) -> Mapping[str, Any]:
        return await self._call(RUN, request)

    async def explain(self, request: Mapping[str, Any]) -> Mapping[str, Any]:
        return await self._call(EXPLAIN, request)

    async def code_review(self, request: Mapping[str, Any]) -> Mapping[str, Any]:
        return await self._call(CODE_REVIEW, request)

    async def auto_comment(self, request: Mapping[str, Any]) -> Mapping[str, Any]:
        return await self._call(AUTO_COMMENT, request)

    async def _call(self, endpoint: Endpoint, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        self.calls.append((endpoint.path, dict(payload)))
        queue = self._queued.get(endpoint.name)
        if not queue:
            raise AssertionError(f"No response queued for {endpoint.path}")
        result, gate = queue.pop(0)
        if gate is not None:
            await gate.wait()
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep settings and logs out of the real home directory."""

    for name in list(os.environ):
        if name.startswith("SMARTCOMPILE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SMARTCOMPILE_LOG_DIR", str(tmp_path / "logs"))
