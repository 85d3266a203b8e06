"""
Logging configuration module for inkwell.
"""

import logging
from pathlib import Path

from .display.constants import FILE_LOG_FORMAT
from .display.rich_logger import setup_rich_logger


def setup_logger(
    name: str = "inkwell", level: str = "WARNING", log_file: Path | str | None = None
) -> logging.Logger:
    """
    Set up a logger with the specified name and level.

    Console output goes through Rich; when ``log_file`` is given, records
    are also appended to that file as plain text.

    Args:
        name: The name of the logger
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file receiving a copy of the records

    Returns:
        Configured logger instance
    """
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logger = setup_rich_logger(name, level=numeric_level, show_time=False)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "inkwell") -> logging.Logger:
    """
    Get an existing logger or create a new one if it doesn't exist.

    Args:
        name: The name of the logger

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def set_log_level(level: str, logger_name: str = "inkwell") -> None:
    """
    Set the log level for an existing logger.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: The name of the logger to modify
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger(logger_name)
    logger.setLevel(numeric_level)

    # Update all handlers
    for handler in logger.handlers:
        handler.setLevel(numeric_level)


def get_valid_log_levels() -> list[str]:
    """Return a list of valid log level names."""
    return ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
