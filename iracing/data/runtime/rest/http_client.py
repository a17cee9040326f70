"""HTTP client helper."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import aiohttp
from multidict import CIMultiDictProxy

from ...config import DEFAULT_TIMEOUT
from .transport import TransportResponse


class HTTPClient:
    """Async HTTP transport backed by one aiohttp session.

    Each instance owns its own cookie jar, so cookies set by the server
    persist across calls made through this client and nowhere else.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout, cookie_jar=aiohttp.CookieJar()
            )
        return self._session

    async def perform(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        cookies: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send one request and read the whole body.

        Dicts and lists are sent as JSON; str/bytes bodies are sent as-is.
        Non-success statuses are returned, not raised.
        """
        kwargs: dict[str, Any] = {"headers": dict(headers) if headers else None}
        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif body is not None:
            kwargs["data"] = body
        if cookies:
            kwargs["cookies"] = dict(cookies)

        async with self.session.request(method, url, **kwargs) as response:
            payload = await response.read()
            return TransportResponse(
                status=response.status,
                headers=CIMultiDictProxy(response.headers.copy()),
                body=payload,
                url=str(response.url),
                encoding=response.charset or "utf-8",
            )

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
