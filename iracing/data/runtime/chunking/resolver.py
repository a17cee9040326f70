"""Chunked response resolution.

This module provides the ChunkResolver class that turns a raw API response
into a fully materialized result: it follows ``link`` pointers, downloads
chunk files one at a time in server-declared order and concatenates their
records.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any

import aiohttp

from ...config import CSV_CONTENT_TYPE, DEFAULT_CHUNK_FETCH_INTERVAL
from ...core.exceptions import ChunkFetchError, DataError, HttpError
from ..rest.transport import Transport
from .definitions import (
    ChunkDescriptor,
    ChunkResult,
    Classification,
    ResponseShape,
    classify_response,
)
from .telemetry import (
    log_chunk_completed,
    log_chunk_error,
    log_chunk_plan,
    log_chunk_resolution_complete,
    log_chunk_skipped,
)

_EXTENSION_RE = re.compile(r"\.\w+$")

# Per-chunk failures the index-derived fallback drops instead of raising
_LENIENT_ERRORS = (DataError, aiohttp.ClientError, asyncio.TimeoutError, ValueError)


def derive_chunk_file_names(chunk_file_name: str, total_chunks: int) -> list[str]:
    """Guess ``{stem}_{i}.json`` file names when the server lists none."""
    stem = _EXTENSION_RE.sub("", chunk_file_name)
    return [f"{stem}_{i}.json" for i in range(total_chunks)]


class ChunkResolver:
    """Resolves link and chunk_info responses.

    Chunk files are fetched strictly one after another with
    ``chunk_fetch_interval`` seconds between successive downloads. Failures
    on server-named files abort the whole resolution; failures on
    index-derived names are logged and skipped.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        chunk_fetch_interval: float = DEFAULT_CHUNK_FETCH_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize chunk resolver.

        Args:
            transport: Transport used for link and chunk downloads
            chunk_fetch_interval: Pause between successive chunk fetches (seconds)
            sleep: Coroutine used for the pause
        """
        self._t = transport
        self._interval = chunk_fetch_interval
        self._sleep = sleep

    async def resolve(self, raw: Any) -> Any:
        """Materialize ``raw`` according to its shape.

        Args:
            raw: Decoded JSON body of an API response

        Returns:
            The input unchanged, the linked payload (JSON or CSV text), or a
            copy of the payload whose ``data`` holds all chunk records

        Raises:
            HttpError: If the linked payload cannot be fetched
            ChunkFetchError: If a server-named chunk cannot be fetched or decoded
        """
        classification = classify_response(raw)
        shape = classification.shape

        if shape is ResponseShape.DIRECT_LINK:
            return await self._resolve_link(raw["link"])
        if shape is ResponseShape.EMPTY:
            return self._resolve_empty(classification)
        if shape is ResponseShape.NESTED_CHUNKED:
            return await self._resolve_nested(classification)
        if shape is ResponseShape.LEGACY_CHUNKED:
            return await self._resolve_legacy(classification)
        return raw

    async def _resolve_link(self, link: str) -> Any:
        response = await self._t.perform(link)
        if not response.ok:
            raise HttpError(
                f"Failed to fetch linked data: {response.status}",
                status_code=response.status,
                url=link,
            )
        # Large datasets (driver stats) come back as CSV and stay unparsed
        if CSV_CONTENT_TYPE in response.content_type.lower():
            return response.text()
        return response.json()

    @staticmethod
    def _resolve_empty(classification: Classification) -> Any:
        if classification.nested:
            return classification.target
        return {**classification.target, "data": []}

    async def _resolve_nested(self, classification: Classification) -> Any:
        descriptor = classification.descriptor
        nested = classification.target
        if not descriptor.chunk_file_names:
            return nested

        start = perf_counter()
        result = await self._fetch_named(
            descriptor, descriptor.chunk_file_names, ResponseShape.NESTED_CHUNKED
        )
        log_chunk_resolution_complete(
            shape=ResponseShape.NESTED_CHUNKED,
            result=result,
            total_latency_ms=(perf_counter() - start) * 1000.0,
        )
        return {**nested, "data": result.data, "chunk_info": nested["chunk_info"]}

    async def _resolve_legacy(self, classification: Classification) -> Any:
        descriptor = classification.descriptor
        raw = classification.target
        start = perf_counter()

        if descriptor.chunk_file_name and descriptor.total_chunks == 1:
            result = await self._fetch_named(
                descriptor, [descriptor.chunk_file_name], ResponseShape.LEGACY_CHUNKED
            )
        elif descriptor.chunk_file_names:
            result = await self._fetch_named(
                descriptor, descriptor.chunk_file_names, ResponseShape.LEGACY_CHUNKED
            )
        else:
            result = await self._fetch_derived(descriptor)

        log_chunk_resolution_complete(
            shape=ResponseShape.LEGACY_CHUNKED,
            result=result,
            total_latency_ms=(perf_counter() - start) * 1000.0,
        )
        return {**raw, "data": result.data, "chunk_info": raw["chunk_info"]}

    async def _fetch_named(
        self,
        descriptor: ChunkDescriptor,
        file_names: list[str],
        shape: ResponseShape,
    ) -> ChunkResult:
        """Fetch server-named chunks in list order; the first failure is fatal."""
        log_chunk_plan(
            shape=shape,
            total_chunks=descriptor.total_chunks,
            file_count=len(file_names),
            base_download_url=descriptor.base_download_url,
        )
        result = ChunkResult()
        for index, file_name in enumerate(file_names):
            url = descriptor.url_for(file_name)
            await self._pause(index)
            try:
                records = await self._fetch_records(url, index)
            except (DataError, ValueError) as e:
                log_chunk_error(
                    chunk_index=index,
                    url=url,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                status_code = e.status_code if isinstance(e, HttpError) else None
                raise ChunkFetchError(
                    f"Failed to fetch chunk: {status_code}"
                    if status_code is not None
                    else f"Invalid chunk payload: {e}",
                    status_code=status_code,
                    url=url,
                    chunk_index=index,
                ) from e
            result.data.extend(records)
            result.chunks_used += 1
        return result

    async def _fetch_derived(self, descriptor: ChunkDescriptor) -> ChunkResult:
        """Fetch index-derived chunk names; failing chunks are skipped."""
        total_chunks = descriptor.total_chunks or 0
        if total_chunks == 0:
            return ChunkResult()
        if not descriptor.chunk_file_name:
            raise DataError("Cannot derive chunk file names: chunk_info has no chunk_file_name")

        file_names = derive_chunk_file_names(descriptor.chunk_file_name, total_chunks)
        log_chunk_plan(
            shape=ResponseShape.LEGACY_CHUNKED,
            total_chunks=total_chunks,
            file_count=len(file_names),
            base_download_url=descriptor.base_download_url,
        )
        result = ChunkResult()
        for index, file_name in enumerate(file_names):
            url = descriptor.url_for(file_name)
            await self._pause(index)
            try:
                records = await self._fetch_records(url, index)
            except _LENIENT_ERRORS as e:
                log_chunk_skipped(
                    chunk_index=index,
                    url=url,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                result.chunks_skipped.append(index)
                continue
            result.data.extend(records)
            result.chunks_used += 1
        return result

    async def _fetch_records(self, url: str, chunk_index: int) -> list[Any]:
        """Download one chunk file and return its record array."""
        start = perf_counter()
        response = await self._t.perform(url)
        if not response.ok:
            raise HttpError(
                f"Failed to fetch chunk: {response.status}",
                status_code=response.status,
                url=url,
            )
        records = response.json()
        if not isinstance(records, list):
            raise DataError(f"Chunk {url} is not a JSON array")

        log_chunk_completed(
            chunk_index=chunk_index,
            url=url,
            rows=len(records),
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        return records

    async def _pause(self, index: int) -> None:
        if index > 0 and self._interval > 0:
            await self._sleep(self._interval)
