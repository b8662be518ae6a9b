"""
Error Hierarchy for the Image Checker

All custom exceptions raised by the image checker are defined here.
Engine-level errors describe problems with the shape of the input and are
surfaced to the caller; fetch errors describe a single URL and never escape
the validator.
"""

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Terminal failure classes for a single URL"""

    TRANSIENT_FETCH = "transient_fetch"
    CONTENT_VALIDATION = "content_validation"
    UNEXPECTED = "unexpected"


# ============================================================================
# Base
# ============================================================================


class ImageCheckerError(Exception):
    """Base exception for all image checker errors."""

    pass


# ============================================================================
# Engine-level Errors
# ============================================================================


class InvalidInputError(ImageCheckerError):
    """Input is not a sequence of requests, or is empty."""

    pass


class NoValidInputError(ImageCheckerError):
    """Every request was malformed or a duplicate."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(ImageCheckerError):
    """Configuration-related errors."""

    pass


# ============================================================================
# Per-URL Fetch Errors
# ============================================================================


class ImageFetchError(ImageCheckerError):
    """
    A classified failure while fetching a single image URL.

    Attributes:
        error_type: Value of the matching ErrorType (e.g. "timeout")
        status_code: HTTP status of the response, when one was received
    """

    kind: FailureKind = FailureKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        error_type: str = "unexpected",
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        return self.kind is FailureKind.TRANSIENT_FETCH


class TransientFetchError(ImageFetchError):
    """Timeout, reset or network-level failure; eligible for retry."""

    kind = FailureKind.TRANSIENT_FETCH


class ContentValidationError(ImageFetchError):
    """Bad status, wrong content type or oversized payload; never retried."""

    kind = FailureKind.CONTENT_VALIDATION


__all__ = [
    "FailureKind",
    "ImageCheckerError",
    "InvalidInputError",
    "NoValidInputError",
    "ConfigurationError",
    "ImageFetchError",
    "TransientFetchError",
    "ContentValidationError",
]
