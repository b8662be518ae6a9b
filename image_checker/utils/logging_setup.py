"""
Logging configuration for the Image Checker.

This module sets up logging based on configuration settings.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..config.configuration import LoggingConfig


def setup_logging(
    config: Optional[LoggingConfig] = None,
    log_file: Optional[str] = None,
    verbose: bool = False,
) -> None:
    """
    Set up logging configuration.

    Args:
        config: Logging section of the checker configuration
        log_file: Optional log file path override
        verbose: Force DEBUG level regardless of the configured level
    """
    config = config or LoggingConfig()
    log_level = "DEBUG" if verbose else config.level

    if log_file is None and config.log_file is not None:
        log_file = str(config.log_file)

    # Configure logging format
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure handlers
    handlers = []

    # File handler
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        handlers.append(file_handler)

    # Console handler; stderr so stdout stays clean for JSON output
    if config.console_output or not handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(log_format, date_format))
        handlers.append(console_handler)

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, log_level.upper()), handlers=handlers, force=True
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Log level: {log_level}")
    if log_file:
        logger.info(f"Image Checker logging to {log_file}")

    # Reduce noise from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
