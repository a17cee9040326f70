"""Shared iRacing data API constants.

This module centralizes the base URL, default headers and rate limit header
names used by the executor, the resolver and the client so they can stay
small and focused.
"""

from __future__ import annotations

DEFAULT_BASE_URL = "https://members-ng.iracing.com"

AUTH_PATH = "/auth"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "User-Agent": USER_AGENT,
}

# Cookie set by /auth when the body carries no ssoCookieValue
SSO_COOKIE_NAME = "irsso_membersv2"

# Advisory rate limit headers returned on every API response
RATE_LIMIT_LIMIT_HEADER = "x-ratelimit-limit"
RATE_LIMIT_REMAINING_HEADER = "x-ratelimit-remaining"
RATE_LIMIT_RESET_HEADER = "x-ratelimit-reset"

# Throttle once the remaining quota drops to this value
RATE_LIMIT_REMAINING_THRESHOLD = 1

# Pause between successive chunk downloads (seconds)
DEFAULT_CHUNK_FETCH_INTERVAL = 0.1

# Total request timeout for the default aiohttp transport (seconds)
DEFAULT_TIMEOUT = 30.0

CSV_CONTENT_TYPE = "text/csv"
