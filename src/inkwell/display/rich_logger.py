"""Rich-based logger configuration for inkwell."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .constants import DATE_FORMAT, LOG_FORMAT


def setup_rich_logger(
    name: str,
    level: int = logging.INFO,
    show_time: bool = True,
    show_path: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """
    Set up a Rich-based logger.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        show_time: Show timestamp in logs
        show_path: Show file path in logs
        console: Console to write to (default: a new stderr console)

    Returns:
        Configured logger instance
    """
    console = console or Console(stderr=True)

    # Create Rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
        log_time_format=DATE_FORMAT,
    )

    # Configure handler
    rich_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    rich_handler.setLevel(level)

    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()  # Clear any existing handlers
    logger.addHandler(rich_handler)

    return logger
