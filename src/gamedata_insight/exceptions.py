#!/usr/bin/env python3
"""
Exception hierarchy for gamedata-insight operations.

The analysis core recovers locally from bad values, empty inputs and failed
advanced analysis. These exceptions are raised by the input adapters, the
configuration layer and the CLI, and by the aggregator when it is misused.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class InsightError(Exception):
    """
    Base exception for all gamedata-insight operations.

    All gamedata-insight specific exceptions should inherit from this class
    to provide a consistent error handling interface.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ──────────────────────────────────────────────────────────────────────────────
# Input Adapter Errors
# ──────────────────────────────────────────────────────────────────────────────


class ParseError(InsightError):
    """Raised when reading a relationship catalogue or records file fails."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        parser_type: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        details = {}
        if file_path:
            details["file_path"] = file_path
        if line_number:
            details["line_number"] = str(line_number)
        if parser_type:
            details["parser_type"] = parser_type

        super().__init__(message, details, cause)
        self.file_path = file_path
        self.line_number = line_number
        self.parser_type = parser_type


class CatalogueFormatError(ParseError):
    """Raised when a relationship catalogue entry is malformed."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        entry_index: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, file_path, entry_index, "catalogue", cause)
        self.entry_index = entry_index


class RecordsFormatError(ParseError):
    """Raised when a flattened-records file cannot be decoded."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, file_path, None, "records", cause)


# ──────────────────────────────────────────────────────────────────────────────
# Configuration Errors
# ──────────────────────────────────────────────────────────────────────────────


class ConfigurationError(InsightError):
    """Raised when there's an issue with configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        cause: Optional[Exception] = None,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = config_value

        super().__init__(message, details, cause)
        self.config_key = config_key
        self.config_value = config_value


# ──────────────────────────────────────────────────────────────────────────────
# Analysis Errors
# ──────────────────────────────────────────────────────────────────────────────


class AnalysisError(InsightError):
    """Raised when one of the statistical analyses cannot complete."""

    def __init__(
        self,
        message: str,
        analysis: Optional[str] = None,
        field_name: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        details = {}
        if analysis:
            details["analysis"] = analysis
        if field_name:
            details["field"] = field_name

        super().__init__(message, details, cause)
        self.analysis = analysis
        self.field_name = field_name


class AggregatorFinalizedError(AnalysisError):
    """Raised when records are fed to an aggregator that was already finalized."""

    def __init__(self, message: str = "Aggregator was already finalized"):
        super().__init__(message, analysis="aggregation")


# ──────────────────────────────────────────────────────────────────────────────
# Error Handling Utilities
# ──────────────────────────────────────────────────────────────────────────────


def wrap_exception(
    exc: Exception,
    message: Optional[str] = None,
    exception_class: type[InsightError] = InsightError,
    **kwargs: Any,
) -> InsightError:
    """
    Wrap a generic exception in a gamedata-insight specific exception.

    Args:
        exc: The original exception to wrap
        message: Optional custom message (uses original message if not provided)
        exception_class: The gamedata-insight exception class to use
        **kwargs: Additional arguments for the exception class

    Returns:
        A gamedata-insight specific exception wrapping the original
    """
    if isinstance(exc, InsightError):
        return exc

    error_message = message or str(exc)
    return exception_class(error_message, cause=exc, **kwargs)


__all__ = [
    "InsightError",
    "ParseError",
    "CatalogueFormatError",
    "RecordsFormatError",
    "ConfigurationError",
    "AnalysisError",
    "AggregatorFinalizedError",
    "wrap_exception",
]
