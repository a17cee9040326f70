"""Structured logging for chunk resolution.

This module provides telemetry hooks for chunk downloads, emitting
structured log records for observability.
"""

from __future__ import annotations

import logging

from .definitions import ChunkResult, ResponseShape

logger = logging.getLogger(__name__)


def log_chunk_plan(
    *,
    shape: ResponseShape,
    total_chunks: int | None,
    file_count: int,
    base_download_url: str,
) -> None:
    """Log the start of a chunk download run.

    Args:
        shape: Resolution strategy in use
        total_chunks: Chunk count declared by the server
        file_count: Number of files about to be fetched
        base_download_url: Host prefix of the chunk files
    """
    logger.info(
        "chunk_plan_created",
        extra={
            "shape": shape.value,
            "total_chunks": total_chunks,
            "file_count": file_count,
            "base_download_url": base_download_url,
        },
    )


def log_chunk_completed(
    *,
    chunk_index: int,
    url: str,
    rows: int,
    latency_ms: float | None = None,
) -> None:
    logger.debug(
        "chunk_completed",
        extra={
            "chunk_index": chunk_index,
            "url": url,
            "rows": rows,
            "latency_ms": latency_ms,
        },
    )


def log_chunk_skipped(
    *,
    chunk_index: int,
    url: str,
    error_type: str,
    error_message: str,
) -> None:
    """Log a chunk dropped by the index-derived fallback."""
    logger.warning(
        "chunk_skipped",
        extra={
            "chunk_index": chunk_index,
            "url": url,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_chunk_error(
    *,
    chunk_index: int,
    url: str,
    error_type: str,
    error_message: str,
) -> None:
    """Log a fatal chunk failure.

    Args:
        chunk_index: Zero-based index of the chunk that failed
        url: Chunk URL
        error_type: Type of error (e.g., "HttpError")
        error_message: Error message
    """
    logger.error(
        "chunk_error",
        extra={
            "chunk_index": chunk_index,
            "url": url,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_chunk_resolution_complete(
    *,
    shape: ResponseShape,
    result: ChunkResult,
    total_latency_ms: float | None = None,
) -> None:
    logger.info(
        "chunk_resolution_complete",
        extra={
            "shape": shape.value,
            "chunks_used": result.chunks_used,
            "chunks_skipped": result.chunks_skipped,
            "total_rows": result.total_rows,
            "total_latency_ms": total_latency_ms,
        },
    )
