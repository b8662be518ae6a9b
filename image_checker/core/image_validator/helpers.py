"""
Helper functions for image validation.

Header checks applied to a fetched response. Each check raises
ContentValidationError, which is never retried.
"""

from ...utils.async_http import HTTPResponse
from ...utils.error_handler import ContentValidationError, TransientFetchError
from ...utils.retry_handler import ErrorType, is_transient

IMAGE_CONTENT_PREFIX = "image/"
ERROR_PREFIX = "Error fetching image: "


def format_size_limit(max_bytes: int) -> str:
    """Render a byte limit the way error messages show it, e.g. 10MB."""
    mib = max_bytes / (1024 * 1024)
    if mib >= 1 and mib == int(mib):
        return f"{int(mib)}MB"
    return f"{max_bytes} bytes"


def check_status(response: HTTPResponse) -> None:
    if not response.is_success:
        detail = f"HTTP {response.status_code}"
        if response.reason:
            detail = f"{detail}: {response.reason}"
        raise ContentValidationError(
            detail,
            error_type=ErrorType.HTTP_STATUS.value,
            status_code=response.status_code,
        )


def check_content_type(response: HTTPResponse) -> None:
    content_type = response.content_type
    if not content_type or not content_type.lower().startswith(IMAGE_CONTENT_PREFIX):
        raise ContentValidationError(
            f"Invalid content type: {content_type or 'unknown'}",
            error_type=ErrorType.INVALID_CONTENT_TYPE.value,
            status_code=response.status_code,
        )


def check_content_length(response: HTTPResponse, max_content_length: int) -> None:
    content_length = response.content_length
    if content_length is not None and content_length > max_content_length:
        raise ContentValidationError(
            f"Image too large (>{format_size_limit(max_content_length)})",
            error_type=ErrorType.TOO_LARGE.value,
            status_code=response.status_code,
        )


def check_image_response(response: HTTPResponse, max_content_length: int) -> None:
    """
    Validate status, content type and size of an image response.

    Args:
        response: Fetched status and headers
        max_content_length: Largest accepted Content-Length in bytes

    Raises:
        ContentValidationError: On the first failing check
    """
    check_status(response)
    check_content_type(response)
    check_content_length(response, max_content_length)


def fetch_error_for(error: BaseException, error_type: ErrorType, timeout: float):
    """
    Wrap a classified transport exception in the matching fetch error.

    Args:
        error: Original exception
        error_type: Classification from classify_exception
        timeout: Per-attempt timeout, quoted in timeout messages

    Returns:
        TransientFetchError or ContentValidationError
    """
    if error_type is ErrorType.TIMEOUT:
        message = f"Timeout after {timeout:g}s"
    else:
        message = str(error) or type(error).__name__

    if is_transient(error_type):
        return TransientFetchError(message, error_type=error_type.value)
    return ContentValidationError(message, error_type=error_type.value)


__all__ = [
    "IMAGE_CONTENT_PREFIX",
    "ERROR_PREFIX",
    "format_size_limit",
    "check_status",
    "check_content_type",
    "check_content_length",
    "check_image_response",
    "fetch_error_for",
]
