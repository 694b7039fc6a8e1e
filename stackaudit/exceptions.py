"""
Custom exceptions for stackaudit.

All exceptions inherit from AuditorError to allow catching all auditor-specific
exceptions with a single except clause. Each exception includes context about
the error without exposing sensitive information.

Only DependencyMissingError stops a run. Everything a stage runs into is
recorded as a finding instead of raised.
"""

from __future__ import annotations

from typing import Any


class AuditorError(Exception):
    """
    Base exception for all auditor-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional context (sanitized, no secrets)
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class ConfigurationError(AuditorError):
    """
    Raised when there's an issue with configuration.

    Examples:
        - Configuration file not found or too large
        - Configuration file is not a YAML mapping
        - Values rejected by validation
    """
    pass


class DependencyMissingError(AuditorError):
    """
    Raised by the dependency gate when a required executable is not on PATH.

    This is the only fatal condition of an audit run.
    """

    def __init__(
        self,
        message: str,
        executable: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if executable:
            details["executable"] = executable
        super().__init__(message, details)


class CommandError(AuditorError):
    """
    Raised when an external command cannot be started at all.

    Note: a command that runs and exits non-zero is NOT an error;
    its exit code is returned to the caller.
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if command:
            details["command"] = command
        super().__init__(message, details)


class ReportError(AuditorError):
    """
    Raised when report generation fails.

    Examples:
        - Output directory missing or not writable
        - Disk full while writing
    """
    pass
