"""
Core image validation modules.

This package contains the normalizer, result cache, single-URL validator,
batch dispatcher and the engine facade that ties them together.
"""

from .batch_dispatcher import BatchDispatcher, DispatchResult
from .data_models import (
    BatchSummary,
    CacheEntry,
    CacheStats,
    CheckReport,
    ImageRequest,
    ValidationResult,
)
from .engine import ImageCheckEngine
from .image_validator import ImageValidator
from .result_cache import ResultCache
from .url_normalizer import normalize_requests

__all__ = [
    "BatchDispatcher",
    "DispatchResult",
    "BatchSummary",
    "CacheEntry",
    "CacheStats",
    "CheckReport",
    "ImageRequest",
    "ValidationResult",
    "ImageCheckEngine",
    "ImageValidator",
    "ResultCache",
    "normalize_requests",
]
