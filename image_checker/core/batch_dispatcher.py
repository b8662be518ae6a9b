"""
Batch Dispatcher

Runs validations in consecutive fixed-size groups. All validations of a
group run concurrently and are awaited until every one has settled; a
failure in one never cancels its siblings or later groups. Results are
collected positionally, so output order always matches input order.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config.configuration import BatchConfig
from ..utils.error_handler import FailureKind
from ..utils.retry_handler import ErrorType
from .data_models import ValidationResult
from .image_validator import ImageValidator

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Ordered results of a dispatch run."""

    results: List[ValidationResult] = field(default_factory=list)
    cancelled: bool = False


def partition(urls: Sequence[str], size: int) -> List[List[str]]:
    """Split urls into consecutive groups of at most size items."""
    return [list(urls[i : i + size]) for i in range(0, len(urls), size)]


def unexpected_failure(url: str, error: BaseException) -> ValidationResult:
    """Result for a validation whose machinery raised an unclassified error."""
    return ValidationResult(
        url=url,
        valid=False,
        message=f"Batch processing failed: {error}",
        failure_kind=FailureKind.UNEXPECTED,
        error_type=ErrorType.UNEXPECTED.value,
    )


class BatchDispatcher:
    """Group-at-a-time concurrent validation with pacing between groups."""

    def __init__(self, validator: ImageValidator, config: Optional[BatchConfig] = None):
        """
        Initialize the dispatcher.

        Args:
            validator: Single-URL validator
            config: Group size and pacing settings
        """
        self.validator = validator
        self.config = config or BatchConfig()

    async def run(
        self,
        urls: Sequence[str],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> DispatchResult:
        """
        Validate urls group by group.

        Args:
            urls: Unique well-formed URLs in the desired output order
            cancel_event: Optional event; once set, in-flight validations are
                cancelled, no further groups start, and results computed so
                far are returned

        Returns:
            DispatchResult with one result per completed URL, in input order
        """
        groups = partition(urls, self.config.concurrency)
        dispatch = DispatchResult()

        for index, group in enumerate(groups, start=1):
            if cancel_event is not None and cancel_event.is_set():
                dispatch.cancelled = True
                break

            logger.info(
                f"Processing batch {index}/{len(groups)} ({len(group)} images)"
            )
            results, interrupted = await self._run_group(group, cancel_event)
            dispatch.results.extend(results)

            if interrupted:
                dispatch.cancelled = True
                break

            if index < len(groups) and self.config.batch_delay > 0:
                logger.debug(
                    f"Waiting {self.config.batch_delay * 1000:.0f}ms before next batch..."
                )
                if await self._pause(cancel_event):
                    dispatch.cancelled = True
                    break

        if dispatch.cancelled:
            logger.warning(
                f"Dispatch cancelled after {len(dispatch.results)}/{len(urls)} images"
            )

        return dispatch

    async def _run_group(
        self,
        group: List[str],
        cancel_event: Optional[asyncio.Event],
    ) -> Tuple[List[ValidationResult], bool]:
        """
        Launch one task per URL and wait until all have settled.

        Returns:
            (results, interrupted) where interrupted is True if cancel_event
            fired before every task finished
        """
        tasks = [asyncio.ensure_future(self.validator.validate(url)) for url in group]
        try:
            interrupted = await self._settle(tasks, cancel_event)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        results = []
        for url, task in zip(group, tasks):
            if task.cancelled():
                continue
            error = task.exception()
            if error is not None:
                logger.error(f"Unexpected failure validating {url}: {error!r}")
                results.append(unexpected_failure(url, error))
            else:
                results.append(task.result())

        return results, interrupted

    async def _settle(
        self,
        tasks: List[asyncio.Future],
        cancel_event: Optional[asyncio.Event],
    ) -> bool:
        if cancel_event is None:
            await asyncio.wait(tasks)
            return False

        waiter = asyncio.ensure_future(cancel_event.wait())
        remaining = set(tasks)
        try:
            while remaining and not waiter.done():
                await asyncio.wait(
                    remaining | {waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                remaining = {task for task in remaining if not task.done()}
        finally:
            waiter.cancel()

        if not remaining:
            return False

        for task in remaining:
            task.cancel()
        await asyncio.gather(*remaining, return_exceptions=True)
        return True

    async def _pause(self, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for the pacing delay; True if cancel_event fired meanwhile."""
        if cancel_event is None:
            await asyncio.sleep(self.config.batch_delay)
            return False

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self.config.batch_delay)
        except asyncio.TimeoutError:
            return False
        return True


__all__ = [
    "BatchDispatcher",
    "DispatchResult",
    "partition",
    "unexpected_failure",
]
