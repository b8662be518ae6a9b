"""
Pytest configuration and shared fixtures for image checker tests.

This module provides an instrumented stub fetcher, a controllable clock and
fast configurations so tests never touch the network or wait on real
backoff and pacing delays.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from image_checker.config.configuration import BatchConfig, CheckerConfig
from image_checker.core.engine import ImageCheckEngine
from image_checker.core.result_cache import ResultCache
from image_checker.utils.async_http import HTTPResponse

# Outcome that never completes; only a timeout or cancellation ends it
HANG = object()


def image_response(
    url: str,
    status: int = 200,
    reason: str = "OK",
    content_type: Optional[str] = "image/png",
    content_length: Optional[str] = "2048",
) -> HTTPResponse:
    """Build a fetched response with the given status and headers."""
    headers = {}
    if content_type is not None:
        headers["content-type"] = content_type
    if content_length is not None:
        headers["content-length"] = content_length
    return HTTPResponse(url=url, status_code=status, reason=reason, headers=headers)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubFetcher:
    """
    Scripted async fetch that records calls and concurrency.

    Outcomes per URL are consumed in order; the last one repeats. An outcome
    is an HTTPResponse, an exception instance to raise, or HANG. URLs without
    a script get a small image/png response.
    """

    def __init__(
        self,
        outcomes: Optional[Dict[str, List[Any]]] = None,
        delays: Optional[Dict[str, float]] = None,
        default_delay: float = 0.0,
    ):
        self.outcomes = {url: list(seq) for url, seq in (outcomes or {}).items()}
        self.delays = delays or {}
        self.default_delay = default_delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def calls_for(self, url: str) -> int:
        return self.calls.count(url)

    def _next_outcome(self, url: str) -> Any:
        script = self.outcomes.get(url)
        if not script:
            return image_response(url)
        if len(script) > 1:
            return script.pop(0)
        return script[0]

    async def __call__(self, url: str) -> HTTPResponse:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(url, self.default_delay)
            if delay:
                await asyncio.sleep(delay)
            outcome = self._next_outcome(url)
            if outcome is HANG:
                await asyncio.sleep(3600)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1


@pytest.fixture
def batch_config():
    """Batch settings with no backoff or pacing delay and a short timeout."""
    return BatchConfig(request_timeout=0.2, backoff_base=0, batch_delay=0)


@pytest.fixture
def fast_config(batch_config):
    return CheckerConfig(batch=batch_config)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl=300.0, clock=clock)


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def engine(fast_config, cache, fetcher):
    return ImageCheckEngine(config=fast_config, cache=cache, fetch=fetcher)


@pytest.fixture
def sleep_recorder():
    """Async sleep replacement that records requested delays."""
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    fake_sleep.delays = delays
    return fake_sleep


@pytest.fixture
def stub_fetcher_class():
    return StubFetcher


@pytest.fixture
def hang():
    return HANG


@pytest.fixture
def make_response():
    return image_response
