"""
Image Checker

Batch validation of image URLs: bounded concurrency, per-attempt timeout,
retry with backoff, header-only content validation, deduplication and a
time-bounded result cache.
"""

__version__ = "1.0.0"

from .config.configuration import CheckerConfig, load_config
from .core.data_models import CheckReport, ImageRequest, ValidationResult
from .core.engine import ImageCheckEngine
from .core.result_cache import ResultCache
from .utils.error_handler import (
    ImageCheckerError,
    InvalidInputError,
    NoValidInputError,
)

__all__ = [
    "__version__",
    "CheckerConfig",
    "load_config",
    "ImageRequest",
    "ValidationResult",
    "CheckReport",
    "ImageCheckEngine",
    "ResultCache",
    "ImageCheckerError",
    "InvalidInputError",
    "NoValidInputError",
]
