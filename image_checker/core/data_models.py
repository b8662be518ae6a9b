"""
Data models for image validation.

Requests, per-URL results, cache entries and the summary returned by the
engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..utils.error_handler import FailureKind

SUCCESS_MESSAGE = "Image fetched successfully"
CACHED_SUFFIX = " (cached)"


@dataclass(frozen=True)
class ImageRequest:
    """A single candidate image URL supplied by the caller."""

    url: Any

    @classmethod
    def from_record(cls, record: Any, url_field: str = "imageUrl") -> "ImageRequest":
        """
        Build a request from a boundary record.

        Records that are not mappings, or lack the URL field, produce a
        request the normalizer will drop.
        """
        if isinstance(record, dict):
            return cls(url=record.get(url_field))
        return cls(url=None)


@dataclass(frozen=True)
class CacheEntry:
    """Last known outcome for a URL. Never mutated; only superseded."""

    valid: bool
    message: str
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_fresh(self, now: float, ttl: float) -> bool:
        return self.age(now) < ttl


@dataclass
class ValidationResult:
    """Result of validating one image URL"""

    url: str
    valid: bool
    message: str
    from_cache: bool = False
    failure_kind: Optional[FailureKind] = None
    error_type: Optional[str] = None
    attempts: int = 0
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    content_length: Optional[int] = None

    @classmethod
    def from_cache_entry(cls, url: str, entry: CacheEntry) -> "ValidationResult":
        return cls(
            url=url,
            valid=entry.valid,
            message=f"{entry.message}{CACHED_SUFFIX}",
            from_cache=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Boundary record shape"""
        return {
            "message": self.message,
            "valid": self.valid,
            "imageUrl": self.url,
        }


@dataclass
class BatchSummary:
    """Counters describing one engine invocation."""

    requested: int = 0
    unique: int = 0
    malformed_dropped: int = 0
    duplicates_dropped: int = 0
    valid: int = 0
    invalid: int = 0
    cache_hits: int = 0
    cancelled: bool = False
    elapsed: float = 0.0

    @classmethod
    def from_results(
        cls, results: List[ValidationResult], **kwargs: Any
    ) -> "BatchSummary":
        valid = sum(1 for r in results if r.valid)
        return cls(
            valid=valid,
            invalid=len(results) - valid,
            cache_hits=sum(1 for r in results if r.from_cache),
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requested": self.requested,
            "unique": self.unique,
            "malformedDropped": self.malformed_dropped,
            "duplicatesDropped": self.duplicates_dropped,
            "valid": self.valid,
            "invalid": self.invalid,
            "cacheHits": self.cache_hits,
            "cancelled": self.cancelled,
            "elapsed": round(self.elapsed, 3),
        }


@dataclass
class CheckReport:
    """Ordered results plus summary for one engine invocation."""

    results: List[ValidationResult] = field(default_factory=list)
    summary: BatchSummary = field(default_factory=BatchSummary)

    def to_list(self) -> List[Dict[str, Any]]:
        return [result.to_dict() for result in self.results]


@dataclass
class CacheStats:
    """Snapshot of the result cache."""

    total_entries: int
    fresh_entries: int
    expired_entries: int
    hit_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEntries": self.total_entries,
            "validEntries": self.fresh_entries,
            "expiredEntries": self.expired_entries,
            "cacheHitRatio": self.hit_ratio,
        }


__all__ = [
    "SUCCESS_MESSAGE",
    "CACHED_SUFFIX",
    "ImageRequest",
    "CacheEntry",
    "ValidationResult",
    "BatchSummary",
    "CheckReport",
    "CacheStats",
]
