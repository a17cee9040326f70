"""REST runtime abstractions."""

from .executor import RequestExecutor, build_query
from .http_client import HTTPClient
from .rate_limit import RateLimiter, RateWindow
from .transport import Transport, TransportResponse

__all__ = [
    "HTTPClient",
    "Transport",
    "TransportResponse",
    "RateLimiter",
    "RateWindow",
    "RequestExecutor",
    "build_query",
]
