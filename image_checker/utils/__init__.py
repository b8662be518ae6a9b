"""
Utility modules for image checking.

This package contains the error hierarchy, retry classification, the async
HTTP client and logging setup.
"""

from .error_handler import (
    ContentValidationError,
    FailureKind,
    ImageCheckerError,
    ImageFetchError,
    TransientFetchError,
)
from .retry_handler import ErrorType, RetryPolicy, classify_exception

__all__ = [
    "ContentValidationError",
    "FailureKind",
    "ImageCheckerError",
    "ImageFetchError",
    "TransientFetchError",
    "ErrorType",
    "RetryPolicy",
    "classify_exception",
]
