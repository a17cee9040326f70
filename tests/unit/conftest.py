"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from iracing.data.runtime.rest import TransportResponse


class FakeTransport:
    """In-memory transport keyed by URL.

    A route maps to a TransportResponse, an exception to raise, or a list of
    either (consumed in order). Every call is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.calls: list[dict[str, Any]] = []

    def add(
        self,
        url: str,
        payload: Any = None,
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
        text: str | None = None,
    ) -> None:
        body = text if text is not None else json.dumps(payload)
        self.routes[url] = TransportResponse.build(
            status, headers=headers or {"Content-Type": "application/json"}, body=body, url=url
        )

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    @property
    def urls(self) -> list[str]:
        return [call["url"] for call in self.calls]

    async def perform(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Any = None,
        body: Any = None,
        cookies: Any = None,
    ) -> TransportResponse:
        self.calls.append(
            {"url": url, "method": method, "headers": headers, "body": body, "cookies": cookies}
        )
        route = self.routes.get(url)
        if isinstance(route, list):
            route = route.pop(0)
        if route is None:
            return TransportResponse.build(404, body="not found", url=url)
        if isinstance(route, Exception):
            raise route
        return route


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
