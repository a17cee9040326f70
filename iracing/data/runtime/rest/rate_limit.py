"""Pre-emptive pacing against the server's advertised rate window.

The API reports its quota on every response through three advisory
headers. Once the remaining quota is (nearly) exhausted the limiter arms a
throttle deadline at the window reset, and the *next* request waits for it
before going out. The request that reported the low quota has already
completed by then.

Concurrent callers are not serialized: two flows racing past the same
window may both wait, or one may miss the wait. The server enforces the
hard limit independently and answers 429 in that case.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from ...config import (
    RATE_LIMIT_LIMIT_HEADER,
    RATE_LIMIT_REMAINING_HEADER,
    RATE_LIMIT_REMAINING_THRESHOLD,
    RATE_LIMIT_RESET_HEADER,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def _parse_number(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class RateWindow:
    """Quota state advertised by one response.

    Attributes:
        limit: Requests allowed per window
        remaining: Requests left in the current window
        reset_at: Window reset time as epoch seconds
    """

    limit: float | None = None
    remaining: float | None = None
    reset_at: float | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateWindow:
        """Parse the rate limit headers; missing or garbled values become None."""
        return cls(
            limit=_parse_number(_header(headers, RATE_LIMIT_LIMIT_HEADER)),
            remaining=_parse_number(_header(headers, RATE_LIMIT_REMAINING_HEADER)),
            reset_at=_parse_number(_header(headers, RATE_LIMIT_RESET_HEADER)),
        )

    @property
    def is_empty(self) -> bool:
        return self.limit is None and self.remaining is None and self.reset_at is None

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= RATE_LIMIT_REMAINING_THRESHOLD

    def seconds_until_reset(self, now: float) -> float | None:
        if self.reset_at is None:
            return None
        return self.reset_at - now


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case-sensitive
    for key, item in headers.items():
        if key.lower() == name:
            return item
    return None


class RateLimiter:
    """Tracks the last observed rate window and delays the next request."""

    def __init__(self, *, clock: Clock = time.time, sleep: Sleep = asyncio.sleep) -> None:
        self._clock = clock
        self._sleep = sleep
        self._throttle_until: float | None = None
        self.last_window: RateWindow | None = None

    def now(self) -> float:
        return self._clock()

    def observe(self, headers: Mapping[str, str]) -> RateWindow:
        """Record the window reported by a response and arm a throttle if needed."""
        window = RateWindow.from_headers(headers)
        self.last_window = window
        if window.is_empty:
            return window

        logger.debug(
            "rate_limit_window",
            extra={
                "limit": window.limit,
                "remaining": window.remaining,
                "reset_at": window.reset_at,
            },
        )

        if window.exhausted:
            delay = window.seconds_until_reset(self._clock())
            if delay is not None and delay > 0:
                logger.warning(
                    "rate_limit_wait",
                    extra={"delay_seconds": round(delay, 1), "remaining": window.remaining},
                )
                self.set_throttle(delay)
        return window

    def set_throttle(self, seconds: float) -> None:
        """Hold the next request for ``seconds``; an existing later deadline wins."""
        if seconds <= 0:
            return
        until = self._clock() + seconds
        if self._throttle_until is None or until > self._throttle_until:
            self._throttle_until = until

    @property
    def throttle_until(self) -> float | None:
        return self._throttle_until

    async def wait(self) -> None:
        """Suspend until the armed deadline passes (no-op when none is armed)."""
        if self._throttle_until is None:
            return
        delay = self._throttle_until - self._clock()
        self._throttle_until = None
        if delay > 0:
            await self._sleep(delay)
