"""Exceptions raised at strex's I/O edges.

The scanner itself never raises; these cover reading units, writing the
report and loading configuration.
"""

from __future__ import annotations

from typing import Any


class StrexError(Exception):
    """Base exception for all strex errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class UnitReadError(StrexError):
    """A source unit could not be read or decoded. Skips only that unit."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}", {"path": path})
        self.path = path
        self.reason = reason


class OutputWriteError(StrexError):
    """The report could not be written. Fatal to the run."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write {path}: {reason}", {"path": path})
        self.path = path


class ConfigError(StrexError):
    """The configuration file is unreadable or invalid."""
