"""Request executor: URL building, pacing, transport call and status check."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import perf_counter
from typing import Any
from urllib.parse import urlencode

from multidict import CIMultiDict

from ...config import DEFAULT_BASE_URL, DEFAULT_HEADERS
from ...core.exceptions import HttpError, RateLimitError
from ...core.session import SessionState
from .rate_limit import RateLimiter
from .transport import Transport, TransportResponse

logger = logging.getLogger(__name__)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(v) for v in value)
    return str(value)


def build_query(params: Mapping[str, Any] | None) -> str:
    """Encode every parameter whose value is not None."""
    if not params:
        return ""
    return urlencode([(key, _stringify(value)) for key, value in params.items() if value is not None])


class RequestExecutor:
    """Executes one API call and returns the decoded JSON body.

    Every request first waits on the rate limiter, then goes out through the
    injected transport with the session cookies attached. The response
    headers feed the limiter before the status is checked, so a failed call
    still paces the next one. Nothing is retried here.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: SessionState | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._t = transport
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionState()
        self.rate_limiter = rate_limiter or RateLimiter()

    def build_url(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        url = f"{self.base_url}{path}"
        query = build_query(params)
        return f"{url}?{query}" if query else url

    @staticmethod
    def build_headers(headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Default headers overridden (case-insensitively) by the caller's."""
        merged = CIMultiDict(DEFAULT_HEADERS)
        for key, value in (headers or {}).items():
            merged[key] = value
        return dict(merged)

    async def send(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> TransportResponse:
        """Perform a request against an absolute URL.

        Raises:
            RateLimitError: On HTTP 429
            HttpError: On any other non-2xx status
        """
        await self.rate_limiter.wait()

        logger.debug("request_started", extra={"method": method, "url": url})
        start = perf_counter()
        response = await self._t.perform(
            url,
            method=method,
            headers=self.build_headers(headers),
            body=body,
            cookies=self.session.cookies(),
        )
        latency_ms = (perf_counter() - start) * 1000.0

        window = self.rate_limiter.observe(response.headers)
        logger.debug(
            "request_completed",
            extra={"url": url, "status": response.status, "latency_ms": latency_ms},
        )

        if response.status == 429:
            retry_after = window.seconds_until_reset(self.rate_limiter.now())
            raise RateLimitError(
                f"HTTP error! status: {response.status}",
                retry_after=retry_after if retry_after and retry_after > 0 else 60,
                url=url,
            )
        if not response.ok:
            raise HttpError(
                f"HTTP error! status: {response.status}", status_code=response.status, url=url
            )
        return response

    async def execute(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        """Call ``path`` on the API and return its decoded JSON body.

        Args:
            path: Endpoint path, e.g. "/data/car/get"
            params: Query parameters; None values are dropped
            method: HTTP method
            headers: Extra headers, taking precedence over the defaults
            body: Optional request body

        Returns:
            Decoded JSON response (shape unknown in advance)
        """
        url = self.build_url(path, params)
        response = await self.send(url, method=method, headers=headers, body=body)
        return response.json()
