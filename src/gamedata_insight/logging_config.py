#!/usr/bin/env python3
"""
Logging configuration for gamedata-insight.

This module provides centralized logging configuration with support for
different log levels, formatters, and output destinations.
"""
from __future__ import annotations

import functools
import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Dict, Optional, Union

from .constants import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    LOG_FILE_BACKUP_COUNT,
    MAX_LOG_FILE_SIZE,
)

ROOT_LOGGER_NAME = "gamedata_insight"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels for console output."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"
            )

        return super().format(record)


class InsightLogger:
    """Centralized logger configuration for gamedata-insight."""

    _configured = False
    _loggers: Dict[str, logging.Logger] = {}

    @classmethod
    def setup_logging(
        cls,
        level: Union[str, int] = DEFAULT_LOG_LEVEL,
        log_file: Optional[Union[str, Path]] = None,
        console_output: bool = True,
        colored_output: bool = True,
        format_string: Optional[str] = None,
        max_file_size: int = MAX_LOG_FILE_SIZE * 1024 * 1024,
        backup_count: int = LOG_FILE_BACKUP_COUNT,
        force: bool = False,
    ) -> None:
        """
        Configure logging for gamedata-insight operations.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path to log file (None to disable file logging)
            console_output: Whether to output logs to console
            colored_output: Whether to use colored output for console
            format_string: Custom format string for log messages
            max_file_size: Maximum size of log file before rotation (bytes)
            backup_count: Number of backup log files to keep
            force: Reconfigure even if logging was already set up
        """
        if cls._configured and not force:
            return

        if isinstance(level, str):
            level = getattr(logging, level.upper())

        if format_string is None:
            format_string = DEFAULT_LOG_FORMAT

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        if console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(level)

            if colored_output and sys.stderr.isatty():
                console_formatter: logging.Formatter = ColoredFormatter(format_string)
            else:
                console_formatter = logging.Formatter(format_string)

            console_handler.setFormatter(console_formatter)
            root_logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(format_string))
            root_logger.addHandler(file_handler)

        # Prevent propagation to avoid duplicate messages
        root_logger.propagate = False

        cls._configured = True

        logger = cls.get_logger("logging_config")
        logger.debug(
            "Logging configured - Level: %s, Console: %s, File: %s",
            logging.getLevelName(level),
            console_output,
            log_file,
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger instance for the given module name.

        Args:
            name: Logger name (typically __name__ from the calling module)

        Returns:
            Logger nested under the gamedata_insight root logger
        """
        if not name.startswith(ROOT_LOGGER_NAME):
            logger_name = f"{ROOT_LOGGER_NAME}.{name}"
        else:
            logger_name = name

        if logger_name not in cls._loggers:
            cls._loggers[logger_name] = logging.getLogger(logger_name)

        return cls._loggers[logger_name]


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module.

    This is the primary function that modules should use to get their logger.

    Example:
        logger = get_logger(__name__)
        logger.debug("Aggregating %d records", len(records))
    """
    return InsightLogger.get_logger(name)


def setup_logging(
    level: Union[str, int] = DEFAULT_LOG_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    **kwargs,
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level
        log_file: Optional log file path
        **kwargs: Additional arguments passed to InsightLogger.setup_logging
    """
    InsightLogger.setup_logging(level=level, log_file=log_file, **kwargs)


def log_performance(func):
    """
    Decorator to log function performance metrics.

    Logs the execution time at DEBUG level, or an error with the elapsed time
    when the function raises.
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
            logger.debug(
                "Function %s executed in %.3f seconds",
                func.__name__,
                time.time() - start_time,
            )
            return result
        except Exception as e:
            logger.error(
                "Function %s failed after %.3f seconds: %s",
                func.__name__,
                time.time() - start_time,
                e,
            )
            raise

    return wrapper


__all__ = [
    "ROOT_LOGGER_NAME",
    "InsightLogger",
    "ColoredFormatter",
    "get_logger",
    "setup_logging",
    "log_performance",
]
