"""Core components."""

from .credentials import AuthRequest, CredentialHasher, hash_credentials, parse_auth_request
from .exceptions import (
    ChunkFetchError,
    DataError,
    HttpError,
    RateLimitError,
    ValidationError,
)
from .session import SessionState

__all__ = [
    "AuthRequest",
    "CredentialHasher",
    "hash_credentials",
    "parse_auth_request",
    "SessionState",
    "DataError",
    "ValidationError",
    "HttpError",
    "RateLimitError",
    "ChunkFetchError",
]
