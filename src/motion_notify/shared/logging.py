"""Centralized logging utilities."""

import logging
import sys
from typing import Optional
from pathlib import Path

PACKAGE_LOGGER = "motion_notify"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    The worker runs detached from any terminal, so its output only
    survives when a log file is given.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional file to append logs to
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if format_string is None:
        format_string = '[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s'

    formatter = logging.Formatter(format_string, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger, configuring the package logger on first use.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    package = logging.getLogger(PACKAGE_LOGGER)
    if not package.handlers:
        setup_logger(PACKAGE_LOGGER)
    return logging.getLogger(name)
