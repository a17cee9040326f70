"""Transport capability used by the executor and the chunk resolver.

Anything with an async ``perform`` returning a ``TransportResponse`` can be
injected into the client; ``HTTPClient`` is the default aiohttp-backed one.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from multidict import CIMultiDict, CIMultiDictProxy


@dataclass(frozen=True)
class TransportResponse:
    """Fully read HTTP response.

    Attributes:
        status: HTTP status code
        headers: Case-insensitive, multi-valued response headers
        body: Raw response body
        url: Final request URL
    """

    status: int
    headers: CIMultiDictProxy[str] = field(
        default_factory=lambda: CIMultiDictProxy(CIMultiDict())
    )
    body: bytes = b""
    url: str = ""
    encoding: str = "utf-8"

    @classmethod
    def build(
        cls,
        status: int,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | str = b"",
        url: str = "",
    ) -> TransportResponse:
        """Create a response from plain values (headers of any mapping type)."""
        if isinstance(body, str):
            body = body.encode()
        return cls(
            status=status,
            headers=CIMultiDictProxy(CIMultiDict(headers or {})),
            body=body,
            url=url,
        )

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")

    def text(self) -> str:
        return self.body.decode(self.encoding, errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


class Transport(Protocol):
    """Capability for performing one HTTP request."""

    async def perform(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        cookies: Mapping[str, str] | None = None,
    ) -> TransportResponse: ...
