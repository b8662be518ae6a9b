"""
Single-URL Image Validator

Fetches one URL with a per-attempt deadline, classifies the outcome and
retries transient failures with linear backoff. Terminal outcomes are
written to the result cache before being returned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ...config.configuration import BatchConfig
from ...utils.async_http import HTTPResponse
from ...utils.error_handler import ImageFetchError
from ...utils.retry_handler import ErrorType, RetryPolicy, classify_exception
from ..data_models import SUCCESS_MESSAGE, ValidationResult
from ..result_cache import ResultCache
from .helpers import ERROR_PREFIX, check_image_response, fetch_error_for

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[HTTPResponse]]


class ImageValidator:
    """Validate a single image URL with timeout, retry and caching"""

    def __init__(
        self,
        fetch: Fetcher,
        cache: ResultCache,
        config: Optional[BatchConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the validator.

        Args:
            fetch: Coroutine function returning status and headers for a URL
            cache: Shared result cache
            config: Timeout, retry and size settings
            sleep: Backoff sleep, injectable for tests
        """
        self.fetch = fetch
        self.cache = cache
        self.config = config or BatchConfig()
        self.retry_policy = RetryPolicy(
            max_attempts=self.config.max_attempts,
            backoff_base=self.config.backoff_base,
        )
        self._sleep = sleep

    async def validate(self, url: str) -> ValidationResult:
        """
        Validate a single URL.

        Exceptions that cannot be classified as a fetch or content failure
        propagate to the caller.

        Args:
            url: Well-formed absolute URL

        Returns:
            ValidationResult object
        """
        cached = self.cache.lookup(url)
        if cached is not None:
            logger.debug(f"Cache hit for {url}")
            return ValidationResult.from_cache_entry(url, cached)

        attempt = 1
        while True:
            logger.info(f"Validating image (attempt {attempt}): {url}")
            try:
                response = await self._fetch_once(url)
                check_image_response(response, self.config.max_content_length)
            except ImageFetchError as e:
                if self.retry_policy.should_retry(ErrorType(e.error_type), attempt):
                    delay = self.retry_policy.get_delay(attempt)
                    logger.info(
                        f"Retrying image validation "
                        f"({attempt + 1}/{self.retry_policy.max_attempts}) "
                        f"after {e.error_type}: {url}"
                    )
                    await self._sleep(delay)
                    attempt += 1
                    continue
                return self._finish_failure(url, e, attempt)

            return self._finish_success(url, response, attempt)

    async def _fetch_once(self, url: str) -> HTTPResponse:
        """
        One fetch bounded by the per-attempt timeout.

        On expiry the in-flight fetch is cancelled. Known transport failures
        are re-raised as ImageFetchError subclasses; anything else escapes.
        """
        try:
            return await asyncio.wait_for(
                self.fetch(url), timeout=self.config.request_timeout
            )
        except Exception as e:
            error_type = classify_exception(e)
            if error_type is None:
                raise
            raise fetch_error_for(e, error_type, self.config.request_timeout) from e

    def _finish_success(
        self, url: str, response: HTTPResponse, attempt: int
    ) -> ValidationResult:
        self.cache.store(url, True, SUCCESS_MESSAGE)
        return ValidationResult(
            url=url,
            valid=True,
            message=SUCCESS_MESSAGE,
            attempts=attempt,
            status_code=response.status_code,
            content_type=response.content_type,
            content_length=response.content_length,
        )

    def _finish_failure(
        self, url: str, error: ImageFetchError, attempt: int
    ) -> ValidationResult:
        message = f"{ERROR_PREFIX}{error.message}"
        logger.info(f"Image invalid after {attempt} attempt(s): {url} ({message})")
        self.cache.store(url, False, message)
        return ValidationResult(
            url=url,
            valid=False,
            message=message,
            failure_kind=error.kind,
            error_type=error.error_type,
            attempts=attempt,
            status_code=error.status_code,
        )


__all__ = ["Fetcher", "ImageValidator"]
