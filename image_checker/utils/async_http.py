"""
Async HTTP Utilities

Provides the httpx-based client used to fetch image URLs. Only the status
line and headers are inspected: responses are streamed and closed before
the body is read.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from ..config.configuration import BatchConfig, HTTPConfig

logger = logging.getLogger(__name__)


def parse_content_length(content_length_header: Optional[str]) -> Optional[int]:
    """
    Parse content-length header.

    Args:
        content_length_header: Content-Length header value

    Returns:
        Content length as integer, or None if missing or invalid
    """
    if not content_length_header:
        return None

    try:
        return int(content_length_header)
    except (ValueError, TypeError):
        return None


@dataclass
class HTTPResponse:
    """Status and headers of a fetched URL."""

    url: str
    status_code: int
    reason: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    final_url: Optional[str] = None
    response_time: float = 0.0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> Optional[int]:
        return parse_content_length(self.headers.get("content-length"))


class AsyncHTTPClient:
    """
    Async HTTP client that fetches response headers for image URLs.

    Use as an async context manager; the underlying httpx.AsyncClient lives
    for the duration of the block. Transport exceptions are not caught here,
    classification belongs to the validator.
    """

    def __init__(
        self,
        http_config: Optional[HTTPConfig] = None,
        timeout: float = BatchConfig().request_timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize async HTTP client.

        Args:
            http_config: Outbound HTTP settings (headers, SSL, pool size)
            timeout: Transport-level timeout in seconds
            transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        self.http_config = http_config or HTTPConfig()
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.http_config.user_agent,
            "Accept": self.http_config.accept,
        }

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_connections=self.http_config.max_connections),
            headers=self.headers,
            follow_redirects=True,
            verify=self.http_config.verify_ssl,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the HTTP client."""
        await self.close()

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def fetch_headers(self, url: str) -> HTTPResponse:
        """
        GET a URL and return its status and headers without reading the body.

        Args:
            url: URL to fetch

        Returns:
            HTTPResponse with status and headers

        Raises:
            RuntimeError: If used outside of an ``async with`` block
            httpx.HTTPError: On transport failures
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        start_time = time.monotonic()
        async with self._client.stream("GET", url) as response:
            elapsed = time.monotonic() - start_time
            logger.debug(f"GET {url} -> {response.status_code} in {elapsed:.3f}s")
            return HTTPResponse(
                url=url,
                status_code=response.status_code,
                reason=response.reason_phrase,
                headers={k.lower(): v for k, v in response.headers.items()},
                final_url=str(response.url),
                response_time=elapsed,
            )


__all__ = ["AsyncHTTPClient", "HTTPResponse", "parse_content_length"]
