"""High-level client for the iRacing data API.

This wraps the request executor and the chunk resolver behind two calls:

- ``authenticate`` logs in and keeps the session on this instance
- ``execute`` calls any endpoint path and returns a fully materialized
  result, following ``link`` pointers and downloading chunk files when the
  server splits a dataset

Per-endpoint helpers and parameter schemas live outside this client; they
hand ``(path, params)`` pairs to ``execute``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from ..config import AUTH_PATH, DEFAULT_BASE_URL, DEFAULT_CHUNK_FETCH_INTERVAL, DEFAULT_TIMEOUT
from ..core.credentials import CredentialHasher, hash_credentials, parse_auth_request
from ..core.session import SessionState
from ..runtime.chunking import ChunkResolver, needs_resolution
from ..runtime.rest import HTTPClient, RateLimiter, RequestExecutor, Transport

logger = logging.getLogger(__name__)


class IRacingDataClient:
    """Authenticated, rate-paced client for the iRacing data API.

    Example:
        >>> async with IRacingDataClient() as client:
        ...     await client.authenticate("user@example.com", "secret")
        ...     cars = await client.execute("/data/car/get")
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        auto_handle_chunked_responses: bool = True,
        transport: Transport | None = None,
        chunk_fetch_interval: float = DEFAULT_CHUNK_FETCH_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        hasher: CredentialHasher = hash_credentials,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, without trailing slash
            auto_handle_chunked_responses: Resolve link/chunk responses by default
            transport: HTTP transport; an aiohttp-backed HTTPClient when omitted
            chunk_fetch_interval: Pause between chunk downloads (seconds)
            timeout: Total timeout of the default transport (seconds)
            hasher: Digest function for the login password
            sleep: Coroutine used for rate limit and chunk pauses
            clock: Epoch-seconds clock used by the rate limiter
        """
        self.auto_handle_chunked_responses = auto_handle_chunked_responses
        self._http = HTTPClient(timeout) if transport is None else None
        self._transport: Transport = transport if transport is not None else self._http
        self._hasher = hasher

        self.session = SessionState()
        self.rate_limiter = RateLimiter(clock=clock, sleep=sleep)
        self._executor = RequestExecutor(
            self._transport,
            base_url=base_url,
            session=self.session,
            rate_limiter=self.rate_limiter,
        )
        self._resolver = ChunkResolver(
            self._transport, chunk_fetch_interval=chunk_fetch_interval, sleep=sleep
        )

    @property
    def base_url(self) -> str:
        return self._executor.base_url

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def authenticate(self, email: str, password: str) -> dict[str, Any]:
        """Log in and store the session on this client.

        Args:
            email: Account email (case-insensitive)
            password: Plain text password; only its digest is sent

        Returns:
            Decoded auth response body

        Raises:
            ValidationError: If email is not a valid address
            HttpError: If the server rejects the login
        """
        request = parse_auth_request(email, password)
        digest = self._hasher(request.email, request.password)

        response = await self._executor.send(
            f"{self._executor.base_url}{AUTH_PATH}",
            method="POST",
            headers={"Content-Type": "application/json"},
            body={"email": request.email, "password": digest},
        )
        body = response.json()
        stored = self.session.update_from_auth(body, response.headers)
        logger.info(
            "authenticated",
            extra={
                "session_stored": stored,
                "cust_id": body.get("custId") if isinstance(body, dict) else None,
            },
        )
        return body

    async def execute(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        handle_chunks: bool | None = None,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        """Call an endpoint and return its materialized result.

        Args:
            path: Endpoint path, e.g. "/data/results/search_series"
            params: Query parameters, already validated; None values are dropped
            handle_chunks: Override of ``auto_handle_chunked_responses`` for this call
            method: HTTP method
            headers: Extra request headers
            body: Optional request body

        Returns:
            The response payload, the linked payload (CSV stays a str), or the
            payload with ``data`` holding every chunk's records
        """
        raw = await self._executor.execute(
            path, params, method=method, headers=headers, body=body
        )
        should_resolve = (
            self.auto_handle_chunked_responses if handle_chunks is None else handle_chunks
        )
        if should_resolve and needs_resolution(raw):
            return await self._resolver.resolve(raw)
        return raw

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._http is not None:
            await self._http.close()

    async def __aenter__(self) -> IRacingDataClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
