"""Logging utilities for swishpy modules."""

import logging
from typing import Iterable, Optional

# Loggers configured by setup_logging()
LOGGER_NAMES = (
    'swishpy',
    'swishpy.client',
    'swishpy.api',
    'swishpy.upload',
    'swishpy.upload.chunk',
    'swishpy.upload.file',
    'swishpy.upload.container',
    'swishpy.upload.coordinator',
    'swishpy.download',
    'swishpy.download.resolver',
    'swishpy.download.token',
    'swishpy.download.executor',
    'swishpy.download.coordinator',
    'swishpy.cli',
)


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    This ensures that loggers work with basicConfig() without needing
    explicit setup_logging() calls. The logger will:
    - Propagate to root logger (default behavior)
    - Only set a default level if root logger has no handlers

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    # basicConfig() not called yet
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger


def configure_loggers(
    level: int = logging.INFO,
    names: Optional[Iterable[str]] = None
) -> None:
    """
    Set the level of every swishpy logger and keep propagation on.

    Args:
        level: Logging level
        names: Logger names (defaults to all swishpy loggers)
    """
    for logger_name in names or LOGGER_NAMES:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


def format_size(num_bytes: int) -> str:
    """Human readable byte count used in log lines."""
    size = float(num_bytes)
    for unit in ('B', 'KB', 'MB', 'GB'):
        if size < 1024 or unit == 'GB':
            if unit == 'B':
                return f"{int(size)} {unit}"
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{num_bytes} B"
