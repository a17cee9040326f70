"""Chunked response resolution layer.

The API answers some calls with a pointer instead of the payload: a
``link`` to fetch, or a ``chunk_info`` descriptor for a dataset split into
numbered files on an external host. This layer materializes those into a
uniform result.

Architecture:
    - definitions.py: Response shape tag, chunk descriptor, classifier
    - resolver.py: Per-shape resolution strategies (fetch and concatenate)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import (
    ChunkDescriptor,
    ChunkResult,
    Classification,
    ResponseShape,
    classify_response,
    needs_resolution,
)
from .resolver import ChunkResolver, derive_chunk_file_names

__all__ = [
    "ChunkDescriptor",
    "ChunkResult",
    "Classification",
    "ResponseShape",
    "ChunkResolver",
    "classify_response",
    "needs_resolution",
    "derive_chunk_file_names",
]
