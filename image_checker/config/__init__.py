"""Configuration for the Image Checker."""

from .configuration import (
    BatchConfig,
    CacheConfig,
    CheckerConfig,
    ConfigurationManager,
    HTTPConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "BatchConfig",
    "CacheConfig",
    "CheckerConfig",
    "ConfigurationManager",
    "HTTPConfig",
    "LoggingConfig",
    "load_config",
]
