"""
Image Check Engine

Facade that runs a full invocation: input checks, normalization and
deduplication, cache sweep, batch dispatch and summary aggregation.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Sequence

from ..config.configuration import CheckerConfig
from ..utils.async_http import AsyncHTTPClient
from ..utils.error_handler import InvalidInputError, NoValidInputError
from .batch_dispatcher import BatchDispatcher
from .data_models import BatchSummary, CacheStats, CheckReport, ImageRequest
from .image_validator import Fetcher, ImageValidator
from .result_cache import ResultCache
from .url_normalizer import normalize_requests

logger = logging.getLogger(__name__)


class ImageCheckEngine:
    """
    Batch image-validation engine.

    The cache is injected so several engines (or tests) can share or isolate
    it. When no fetch callable is given, the engine fetches through an
    AsyncHTTPClient: either the one opened by ``async with engine`` or a
    private temporary one opened for a single ``process`` call, so
    concurrent calls on a non-entered engine never share a client.

    Example:
        >>> async with ImageCheckEngine() as engine:
        ...     report = await engine.process([ImageRequest("https://a/1.png")])
    """

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        cache: Optional[ResultCache] = None,
        fetch: Optional[Fetcher] = None,
        http_client: Optional[AsyncHTTPClient] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Checker configuration; defaults are used when omitted
            cache: Shared result cache; a new one is created when omitted
            fetch: Optional fetch callable replacing the HTTP client
            http_client: Optional pre-built HTTP client
        """
        self.config = config or CheckerConfig()
        self.cache = (
            cache if cache is not None else ResultCache(ttl=self.config.cache.ttl_seconds)
        )
        self._fetch = fetch
        self.http_client = http_client or AsyncHTTPClient(
            http_config=self.config.http,
            timeout=self.config.batch.request_timeout,
        )
        self._owns_client = False

        logger.debug(
            f"Initialized image check engine "
            f"(concurrency={self.config.batch.concurrency}, "
            f"timeout={self.config.batch.request_timeout}s, "
            f"max_attempts={self.config.batch.max_attempts})"
        )

    async def __aenter__(self) -> "ImageCheckEngine":
        if self._fetch is None and not self.http_client.is_open:
            await self.http_client.__aenter__()
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_client:
            await self.http_client.close()
            self._owns_client = False

    def _temporary_client(self) -> AsyncHTTPClient:
        """Private client for a single process call on a non-entered engine."""
        return AsyncHTTPClient(
            http_config=self.http_client.http_config,
            timeout=self.http_client.timeout,
            transport=self.http_client.transport,
        )

    async def process(
        self,
        requests: Sequence[ImageRequest],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CheckReport:
        """
        Validate a batch of image requests.

        Args:
            requests: Ordered image requests; plain {"imageUrl": ...} records
                are converted with ImageRequest.from_record
            cancel_event: Optional event that stops the run early; results
                computed before it fired are still returned

        Returns:
            CheckReport with ordered results and summary counters

        Raises:
            InvalidInputError: If requests is not a list or is empty
            NoValidInputError: If no well-formed unique URL remains
        """
        if not isinstance(requests, (list, tuple)):
            raise InvalidInputError("Invalid input, expected an array of images.")
        if not requests:
            raise InvalidInputError("No images provided.")

        start_time = time.monotonic()

        url_field = self.config.http.url_field
        requests = [
            request
            if isinstance(request, ImageRequest)
            else ImageRequest.from_record(request, url_field)
            for request in requests
        ]
        normalized = normalize_requests(requests)
        if not normalized.urls:
            raise NoValidInputError("No valid image URLs provided.")

        self.cache.sweep()

        logger.info(
            f"Processing {len(normalized)} unique images "
            f"({len(requests) - len(normalized)} duplicates or malformed removed)"
        )
        logger.info(f"Current cache size: {len(self.cache)}")

        if self._fetch is not None:
            dispatch = await self._dispatch(self._fetch, normalized.urls, cancel_event)
        elif self.http_client.is_open:
            dispatch = await self._dispatch(
                self.http_client.fetch_headers, normalized.urls, cancel_event
            )
        else:
            async with self._temporary_client() as client:
                dispatch = await self._dispatch(
                    client.fetch_headers, normalized.urls, cancel_event
                )

        summary = BatchSummary.from_results(
            dispatch.results,
            requested=len(requests),
            unique=len(normalized),
            malformed_dropped=normalized.malformed,
            duplicates_dropped=normalized.duplicates,
            cancelled=dispatch.cancelled,
            elapsed=time.monotonic() - start_time,
        )

        logger.info(
            f"Image validation completed: {summary.valid} valid, "
            f"{summary.invalid} invalid, {summary.cache_hits} cache hits "
            f"in {summary.elapsed:.2f}s"
        )

        return CheckReport(results=dispatch.results, summary=summary)

    async def _dispatch(self, fetch: Fetcher, urls, cancel_event):
        validator = ImageValidator(fetch=fetch, cache=self.cache, config=self.config.batch)
        dispatcher = BatchDispatcher(validator, config=self.config.batch)
        return await dispatcher.run(urls, cancel_event=cancel_event)

    def clear_cache(self) -> None:
        """Drop every cache entry unconditionally."""
        self.cache.clear()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()


__all__ = ["ImageCheckEngine"]
