"""Structured logging configuration for showcase-scraper.

This module provides colored console logging and optional rotating file
logging, plus small timing helpers used around long-running operations.

Handlers are installed once on the package logger (``showcase_scraper``);
module loggers obtained with ``get_logger(__name__)`` are its children and
inherit its level and handlers.
"""

import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import colorlog


PACKAGE_LOGGER = "showcase_scraper"

CONSOLE_FORMAT_COLOR = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "showcase_scraper.log"


def _resolve_level(level: Optional[str]) -> int:
    """Resolve a level name: explicit argument > LOG_LEVEL env var > INFO."""
    if level is not None:
        level_str = level.upper()
    else:
        level_str = os.environ.get('LOG_LEVEL', 'INFO').upper()
    return getattr(logging, level_str, logging.INFO)


def _setup_console_handler(level: int) -> logging.Handler:
    """Create and configure the colored console handler.

    Args:
        level: Logging level

    Returns:
        Configured console handler
    """
    console_handler = colorlog.StreamHandler()
    console_handler.setLevel(level)

    formatter = colorlog.ColoredFormatter(
        CONSOLE_FORMAT_COLOR,
        datefmt=DATE_FORMAT,
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    )
    console_handler.setFormatter(formatter)
    return console_handler


def _setup_file_handler(level: int, log_dir: Path) -> logging.Handler:
    """Create and configure rotating file handler.

    Args:
        level: Logging level
        log_dir: Directory for log files

    Returns:
        Configured rotating file handler
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    # Rotating file handler: max 10MB, keep 5 backup files
    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    return file_handler


def configure_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path | str] = None,
) -> logging.Logger:
    """Install console (and optionally file) handlers on the package logger.

    Safe to call more than once: the console handler is only added once, and
    a file handler is only added when none is attached yet.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
              If None, uses LOG_LEVEL environment variable, defaulting to INFO.
        log_dir: Directory for a rotating log file. No file logging if None.

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    log_level = _resolve_level(level)
    logger.setLevel(log_level)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler)
        for h in logger.handlers
    )
    if not has_console:
        logger.addHandler(_setup_console_handler(log_level))

    if log_dir is not None and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        logger.addHandler(_setup_file_handler(log_level, Path(log_dir)))

    for handler in logger.handlers:
        handler.setLevel(log_level)

    # Keep output from being duplicated by the root logger
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package logger, configuring handlers on first use.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        configure_logging()

    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return package_logger.getChild(name)


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str):
    """Context manager to automatically log operation execution time.

    Args:
        logger: Logger instance
        operation: Name of the operation

    Usage:
        with log_execution_time(logger, "project discovery"):
            await driver.discover_all_urls()
    """
    logger.debug(f"Starting: {operation}")
    start_time = time.monotonic()

    try:
        yield
    finally:
        duration = time.monotonic() - start_time
        logger.info(f"Completed: {operation} in {duration:.2f}s")


def log_exception(logger: logging.Logger, operation: str, exception: BaseException) -> None:
    """Log an exception with context and traceback.

    Args:
        logger: Logger instance
        operation: Name of the operation that failed
        exception: The exception that was raised
    """
    logger.error(f"Failed: {operation}: {exception}", exc_info=exception)
