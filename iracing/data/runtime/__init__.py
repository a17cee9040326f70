"""Runtime orchestration components."""

from .chunking import ChunkResolver, ResponseShape, classify_response, needs_resolution
from .rest import HTTPClient, RateLimiter, RateWindow, RequestExecutor, Transport, TransportResponse

__all__ = [
    "ChunkResolver",
    "ResponseShape",
    "classify_response",
    "needs_resolution",
    "HTTPClient",
    "RateLimiter",
    "RateWindow",
    "RequestExecutor",
    "Transport",
    "TransportResponse",
]
