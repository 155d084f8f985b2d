"""
Logging configuration for the bkmap project.

Provides consistent logging across the index, the metrics and the
evaluation scripts.

Usage:
    from bkmap.common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Index built")
    logger.debug("Created root node")
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Track if logging has been set up
_logging_initialized = False


def setup_logging(
    level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_file_path: Optional[str] = None
) -> None:
    """
    Initialize logging configuration for the project.

    Called once at startup (or lazily by get_logger). Subsequent calls
    are ignored until reset_logging() is used.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses config.LOG_LEVEL.
        log_to_file: Whether to also log to a file.
                     If None, uses config.LOG_TO_FILE.
        log_file_path: Path to log file.
                       If None, uses config.LOG_FILE_PATH.
    """
    global _logging_initialized

    if _logging_initialized:
        return

    # Import config here to avoid circular imports
    from bkmap import config

    level = level or config.LOG_LEVEL
    log_to_file = log_to_file if log_to_file is not None else config.LOG_TO_FILE
    log_file_path = log_file_path or config.LOG_FILE_PATH

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Only the package logger is configured so that embedding
    # applications keep control of the root logger.
    package_logger = logging.getLogger("bkmap")
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(log_file_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    _logging_initialized = True


def reset_logging() -> None:
    """Drop the package handlers so the next setup_logging() call applies."""
    global _logging_initialized

    package_logger = logging.getLogger("bkmap")
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)
    _logging_initialized = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Automatically initializes logging if not already done.

    Args:
        name: Name for the logger, typically __name__ of the calling module.
              Scripts outside the package use a "bkmap." name so their
              records reach the package handlers.

    Returns:
        Configured logger instance.
    """
    if not _logging_initialized:
        setup_logging()

    return logging.getLogger(name)
