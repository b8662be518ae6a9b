"""
Pydantic-based configuration for the Image Checker.

Settings are process-wide: they are loaded once at startup (from a TOML or
JSON file, then environment overrides) and shared by every invocation of
the engine.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..utils.error_handler import ConfigurationError

MIB = 1024 * 1024


class BatchConfig(BaseModel):
    """Concurrency, timeout and retry settings for batch validation."""

    concurrency: int = Field(
        default=3,
        ge=1,
        le=50,
        description="Maximum validations in flight (also the group size)",
    )
    request_timeout: float = Field(
        default=8.0,
        gt=0,
        le=300,
        description="Per-attempt fetch timeout in seconds",
    )
    max_attempts: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Maximum fetch attempts per URL (1 = no retry)",
    )
    backoff_base: float = Field(
        default=1.0,
        ge=0,
        le=60,
        description="Linear backoff base in seconds",
    )
    batch_delay: float = Field(
        default=0.5,
        ge=0,
        le=60,
        description="Pause between groups in seconds",
    )
    max_content_length: int = Field(
        default=10 * MIB,
        ge=1,
        description="Largest accepted Content-Length in bytes",
    )

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, v):
        """Warn about values likely to trip remote rate limits."""
        if v > 10:
            import warnings

            warnings.warn(
                f"High concurrency ({v}) may trigger rate limiting on image "
                f"hosts. Consider using 3-5.",
                UserWarning,
            )
        return v


class CacheConfig(BaseModel):
    """Result cache settings."""

    ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        le=86400,
        description="Seconds a validation result stays fresh",
    )


class HTTPConfig(BaseModel):
    """Outbound HTTP settings."""

    user_agent: str = Field(default="ImageChecker/1.0", min_length=1)
    accept: str = Field(default="image/*,*/*;q=0.8", min_length=1)
    verify_ssl: bool = True
    max_connections: int = Field(default=20, ge=1, le=1000)
    url_field: str = Field(
        default="imageUrl",
        min_length=1,
        description="Name of the URL field in request records",
    )


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Optional[Path] = None
    console_output: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class CheckerConfig(BaseModel):
    """Main configuration model."""

    batch: BatchConfig = Field(default_factory=BatchConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Environment variable -> (section, option)
ENV_OVERRIDES = {
    "IMAGE_CHECKER_CONCURRENCY": ("batch", "concurrency"),
    "IMAGE_CHECKER_REQUEST_TIMEOUT": ("batch", "request_timeout"),
    "IMAGE_CHECKER_MAX_ATTEMPTS": ("batch", "max_attempts"),
    "IMAGE_CHECKER_BATCH_DELAY": ("batch", "batch_delay"),
    "IMAGE_CHECKER_CACHE_TTL": ("cache", "ttl_seconds"),
    "IMAGE_CHECKER_USER_AGENT": ("http", "user_agent"),
    "IMAGE_CHECKER_LOG_LEVEL": ("logging", "level"),
    "IMAGE_CHECKER_LOG_FILE": ("logging", "log_file"),
}


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[CheckerConfig] = None
        self._load_configuration(config_path)

    def _get_default_config_paths(self) -> List[Path]:
        """Get list of default configuration file paths to try."""
        if getattr(sys, "frozen", False):
            base_dir = Path(sys.executable).parent
        else:
            base_dir = Path.cwd()

        return [
            base_dir / "image_checker.toml",
            base_dir / "image_checker.json",
        ]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict[str, Any] = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._apply_env_overrides(config_data)

        try:
            self._config = CheckerConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(format_config_error(e)) from e

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}"
            )

        suffix = config_path.suffix.lower()
        try:
            if suffix == ".toml":
                return toml.load(config_path)
            elif suffix == ".json":
                with open(config_path, "r", encoding="utf-8") as f:
                    return json.load(f)
        except (toml.TomlDecodeError, json.JSONDecodeError, OSError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {e}"
            ) from e

        raise ConfigurationError(
            f"Unsupported configuration file format: {config_path.suffix}"
        )

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> None:
        """Apply IMAGE_CHECKER_* environment variables over file values."""
        for env_var, (section, option) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value is None or value == "":
                continue
            config_data.setdefault(section, {})[option] = value

    @property
    def config(self) -> CheckerConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config


def _format_error_location(location: tuple) -> str:
    """Format the error location path."""
    if not location:
        return "configuration"
    return ".".join(str(part) for part in location)


def format_config_error(error: Exception) -> str:
    """
    Format a configuration error into a user-friendly message.

    Args:
        error: Exception that occurred during configuration

    Returns:
        Formatted error message
    """
    if isinstance(error, ValidationError):
        lines = ["Configuration validation failed:"]
        for detail in error.errors():
            location = _format_error_location(detail["loc"])
            input_value = detail.get("input", "N/A")
            lines.append(f"  - {location}: {detail['msg']} (got: {input_value})")
        return "\n".join(lines)

    return f"Configuration error: {error}"


def load_config(config_path: Optional[Path] = None) -> CheckerConfig:
    """
    Load the checker configuration.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Validated CheckerConfig
    """
    return ConfigurationManager(config_path).config


__all__ = [
    "BatchConfig",
    "CacheConfig",
    "HTTPConfig",
    "LoggingConfig",
    "CheckerConfig",
    "ConfigurationManager",
    "format_config_error",
    "load_config",
]
