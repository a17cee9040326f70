"""Custom exception hierarchy."""

from __future__ import annotations


class DataError(Exception):
    """Base exception for all library errors."""

    pass


class ValidationError(DataError):
    """Input rejected before any request was sent."""

    pass


class HttpError(DataError):
    """Non-success HTTP status from the API or the chunk host."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def status(self) -> int | None:
        return self.status_code


class RateLimitError(HttpError):
    """API rate limit exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str,
        retry_after: float = 60,
        url: str | None = None,
    ) -> None:
        super().__init__(message, status_code=429, url=url)
        self.retry_after = retry_after


class ChunkFetchError(HttpError):
    """A server-named chunk file could not be fetched or decoded.

    Keeps the status of an underlying HttpError (None for a body that is
    not a JSON array). The original error is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        chunk_index: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, url=url)
        self.chunk_index = chunk_index
