"""
Image Validator Package

Validates a single image URL:
- per-attempt timeout
- linear backoff retry of transient failures
- status, content-type and content-length checks
- result caching

The package is organized into:
- validator: the ImageValidator retry loop
- helpers: header checks and error wrapping

Usage:
    from image_checker.core.image_validator import ImageValidator

    validator = ImageValidator(fetch=client.fetch_headers, cache=ResultCache())
    result = await validator.validate("https://example.com/logo.png")
"""

from .helpers import (
    ERROR_PREFIX,
    check_content_length,
    check_content_type,
    check_image_response,
    check_status,
)
from .validator import Fetcher, ImageValidator

__all__ = [
    "ImageValidator",
    "Fetcher",
    "ERROR_PREFIX",
    "check_image_response",
    "check_status",
    "check_content_type",
    "check_content_length",
]
