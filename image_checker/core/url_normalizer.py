"""
URL normalization and deduplication.

Drops entries whose URL is not an absolute URI and removes exact duplicates
while keeping the first occurrence. Dropped entries are not reported
individually; only the counts are kept for logging.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List
from urllib.parse import urlparse

from .data_models import ImageRequest

logger = logging.getLogger(__name__)


def is_valid_url_format(url: Any) -> bool:
    """
    Check if URL parses as an absolute URI.

    Args:
        url: Candidate URL

    Returns:
        True if URL has a scheme and a usable host (no whitespace, valid
        port), False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    try:
        parsed = urlparse(url)
        if not (parsed.scheme and parsed.netloc):
            return False
        host = parsed.hostname
        # Accessing port raises ValueError for non-numeric or out-of-range ports
        parsed.port
    except ValueError:
        return False

    return bool(host) and not any(ch.isspace() for ch in host)


@dataclass
class NormalizedURLs:
    """Unique well-formed URLs in first-seen order."""

    urls: List[str] = field(default_factory=list)
    malformed: int = 0
    duplicates: int = 0

    def __len__(self) -> int:
        return len(self.urls)


def normalize_requests(requests: Iterable[ImageRequest]) -> NormalizedURLs:
    """
    Filter malformed URLs and remove duplicates preserving order.

    Duplicates are compared by exact string equality; no case folding or
    trailing-slash normalization is applied.

    Args:
        requests: Ordered image requests

    Returns:
        NormalizedURLs with the surviving URLs and drop counts
    """
    result = NormalizedURLs()
    seen = set()

    for request in requests:
        url = request.url
        if not is_valid_url_format(url):
            result.malformed += 1
            continue
        if url in seen:
            result.duplicates += 1
            continue
        seen.add(url)
        result.urls.append(url)

    if result.malformed or result.duplicates:
        logger.debug(
            f"Dropped {result.malformed} malformed and "
            f"{result.duplicates} duplicate URLs"
        )

    return result


__all__ = ["is_valid_url_format", "NormalizedURLs", "normalize_requests"]
