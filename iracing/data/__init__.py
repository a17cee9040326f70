"""iRacing Data - async client for the iRacing data API."""

from .clients import IRacingDataClient
from .core import (
    AuthRequest,
    ChunkFetchError,
    DataError,
    HttpError,
    RateLimitError,
    SessionState,
    ValidationError,
    hash_credentials,
)
from .runtime import (
    ChunkResolver,
    HTTPClient,
    RateLimiter,
    RateWindow,
    RequestExecutor,
    ResponseShape,
    Transport,
    TransportResponse,
    classify_response,
    needs_resolution,
)

__version__ = "0.1.0"

__all__ = [
    "IRacingDataClient",
    # Core
    "AuthRequest",
    "SessionState",
    "hash_credentials",
    # Errors
    "DataError",
    "ValidationError",
    "HttpError",
    "RateLimitError",
    "ChunkFetchError",
    # Runtime
    "ChunkResolver",
    "HTTPClient",
    "RateLimiter",
    "RateWindow",
    "RequestExecutor",
    "ResponseShape",
    "Transport",
    "TransportResponse",
    "classify_response",
    "needs_resolution",
]
