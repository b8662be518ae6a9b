"""
Retry Handler Module

Classifies fetch failures into error types and decides whether a failed
attempt is worth retrying. Only transient failures (timeouts, resets,
DNS and other network-level errors) are retried; everything the server
actually answered is final.
"""

import asyncio
import socket
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx


class ErrorType(Enum):
    """Categories of errors for retry logic"""

    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    DNS_ERROR = "dns_error"
    NETWORK_ERROR = "network_error"
    HTTP_STATUS = "http_status"
    INVALID_CONTENT_TYPE = "invalid_content_type"
    TOO_LARGE = "too_large"
    REQUEST_ERROR = "request_error"
    UNEXPECTED = "unexpected"


TRANSIENT_ERROR_TYPES = frozenset(
    {
        ErrorType.TIMEOUT,
        ErrorType.CONNECTION_ERROR,
        ErrorType.DNS_ERROR,
        ErrorType.NETWORK_ERROR,
    }
)

# Error classification patterns, checked against the lowercased message
ERROR_PATTERNS = {
    ErrorType.TIMEOUT: ["timeout", "timed out", "etimedout"],
    ErrorType.DNS_ERROR: ["dns", "name resolution", "nodename", "getaddrinfo"],
    ErrorType.CONNECTION_ERROR: ["connection", "refused", "reset", "econnreset"],
    ErrorType.NETWORK_ERROR: ["network", "unreachable", "no route"],
}


def _match_patterns(message: str, default: ErrorType) -> ErrorType:
    message = message.lower()
    for error_type, patterns in ERROR_PATTERNS.items():
        if any(pattern in message for pattern in patterns):
            return error_type
    return default


def classify_exception(error: BaseException) -> Optional[ErrorType]:
    """
    Classify an exception raised while fetching a URL.

    Args:
        error: Exception raised by the fetch

    Returns:
        Matching ErrorType, or None when the exception is not a known
        transport failure and should be treated as unexpected
    """
    # asyncio.TimeoutError is the builtin TimeoutError on 3.11+
    if isinstance(error, (asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorType.TIMEOUT

    # These subclass TransportError but retrying cannot fix them
    if isinstance(error, (httpx.UnsupportedProtocol, httpx.InvalidURL)):
        return ErrorType.REQUEST_ERROR
    if isinstance(error, httpx.TooManyRedirects):
        return ErrorType.REQUEST_ERROR

    if isinstance(error, httpx.ConnectError):
        return _match_patterns(str(error), ErrorType.CONNECTION_ERROR)
    if isinstance(error, httpx.TransportError):
        return _match_patterns(str(error), ErrorType.NETWORK_ERROR)

    if isinstance(error, socket.gaierror):
        return ErrorType.DNS_ERROR
    if isinstance(error, ConnectionError):
        return ErrorType.CONNECTION_ERROR
    if isinstance(error, OSError):
        return _match_patterns(str(error), ErrorType.NETWORK_ERROR)

    return None


def is_transient(error_type: ErrorType) -> bool:
    return error_type in TRANSIENT_ERROR_TYPES


class LinearBackoff:
    """Linear backoff strategy: the n-th retry waits base_delay * n."""

    def __init__(self, base_delay: float = 1.0, max_delay: float = 60.0):
        self.base_delay = base_delay
        self.max_delay = max_delay

    def get_delay(self, attempt: int) -> float:
        """Calculate delay after the given (1-based) failed attempt."""
        return min(self.base_delay * attempt, self.max_delay)


@dataclass
class RetryPolicy:
    """Bounded retry policy for a single URL."""

    max_attempts: int = 2
    backoff_base: float = 1.0

    def __post_init__(self):
        self.backoff = LinearBackoff(base_delay=self.backoff_base)

    def should_retry(self, error_type: ErrorType, attempt: int) -> bool:
        """
        Decide whether another attempt should follow.

        Args:
            error_type: Classification of the failed attempt
            attempt: 1-based number of the attempt that just failed

        Returns:
            True if the failure is transient and attempts remain
        """
        return is_transient(error_type) and attempt < self.max_attempts

    def get_delay(self, attempt: int) -> float:
        return self.backoff.get_delay(attempt)


__all__ = [
    "ErrorType",
    "TRANSIENT_ERROR_TYPES",
    "ERROR_PATTERNS",
    "classify_exception",
    "is_transient",
    "LinearBackoff",
    "RetryPolicy",
]
