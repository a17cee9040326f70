"""Chunk metadata definitions and response shape classification.

This module defines the structures used to describe how a response should
be materialized: the response shape tag, the server-supplied chunk
descriptor and the result of fetching a run of chunk files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import DataError


class ResponseShape(str, Enum):
    """How a raw API response has to be resolved."""

    PLAIN = "plain"
    DIRECT_LINK = "direct_link"
    NESTED_CHUNKED = "nested_chunked"
    LEGACY_CHUNKED = "legacy_chunked"
    EMPTY = "empty"


class ChunkDescriptor(BaseModel):
    """Server-supplied description of a dataset split into chunk files.

    The chunk count is called ``total_chunks`` on top-level descriptors and
    ``num_chunks`` on descriptors nested under ``data``; both land in
    ``total_chunks``.
    """

    base_download_url: str = ""
    total_chunks: int | None = Field(
        default=None, validation_alias=AliasChoices("total_chunks", "num_chunks")
    )
    rows: int | None = None
    chunk_file_name: str | None = None
    chunk_file_names: list[str] = Field(default_factory=list)

    @field_validator("chunk_file_names", mode="before")
    @classmethod
    def validate_chunk_file_names(cls, v: Any) -> Any:
        """Treat a null file list as no list."""
        return [] if v is None else v

    @property
    def is_empty(self) -> bool:
        """Zero chunks or zero rows: nothing to download."""
        return self.total_chunks == 0 or self.rows == 0

    def url_for(self, file_name: str) -> str:
        return f"{self.base_download_url}{file_name}"

    model_config = ConfigDict(frozen=True, extra="ignore")


def parse_chunk_descriptor(chunk_info: dict[str, Any]) -> ChunkDescriptor:
    try:
        return ChunkDescriptor.model_validate(chunk_info)
    except PydanticValidationError as e:
        raise DataError(f"Invalid chunk_info in response: {e}") from e


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a raw response.

    Attributes:
        shape: Resolution strategy to apply
        target: Mapping whose ``data`` field gets the materialized records
            (the nested ``data`` object or the response itself)
        descriptor: Parsed chunk descriptor, if any
        nested: Whether the descriptor sat under ``data``
    """

    shape: ResponseShape
    target: Any
    descriptor: ChunkDescriptor | None = None
    nested: bool = False


@dataclass
class ChunkResult:
    """Result of fetching a run of chunk files.

    Attributes:
        data: Records from all fetched chunks, in file order
        chunks_used: Number of chunks fetched successfully
        chunks_skipped: Indexes of chunks dropped by the lenient fallback
    """

    data: list[Any] = field(default_factory=list)
    chunks_used: int = 0
    chunks_skipped: list[int] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.data)


def _nested_chunk_info(raw: dict[str, Any]) -> dict[str, Any] | None:
    data = raw.get("data")
    if isinstance(data, dict) and isinstance(data.get("chunk_info"), dict):
        return data["chunk_info"]
    return None


def needs_resolution(raw: Any) -> bool:
    """Whether ``raw`` carries a link or a chunk descriptor (top level or under data)."""
    if not isinstance(raw, dict):
        return False
    return bool(raw.get("link")) or isinstance(raw.get("chunk_info"), dict) or (
        _nested_chunk_info(raw) is not None
    )


def classify_response(raw: Any) -> Classification:
    """Pick the resolution strategy for a raw response (first match wins).

    1. ``link`` without top-level ``chunk_info``: direct link
    2. ``data.chunk_info``: nested chunked (or empty)
    3. top-level ``chunk_info``: legacy chunked (or empty)
    4. anything else: plain pass-through
    """
    if not isinstance(raw, dict):
        return Classification(ResponseShape.PLAIN, raw)

    top_chunk_info = raw.get("chunk_info")
    has_top_chunk_info = isinstance(top_chunk_info, dict)

    if raw.get("link") and not has_top_chunk_info:
        return Classification(ResponseShape.DIRECT_LINK, raw)

    nested = _nested_chunk_info(raw)
    if nested is not None:
        descriptor = parse_chunk_descriptor(nested)
        shape = ResponseShape.EMPTY if descriptor.is_empty else ResponseShape.NESTED_CHUNKED
        return Classification(shape, raw["data"], descriptor, nested=True)

    if has_top_chunk_info:
        descriptor = parse_chunk_descriptor(top_chunk_info)
        shape = ResponseShape.EMPTY if descriptor.is_empty else ResponseShape.LEGACY_CHUNKED
        return Classification(shape, raw, descriptor)

    return Classification(ResponseShape.PLAIN, raw)
