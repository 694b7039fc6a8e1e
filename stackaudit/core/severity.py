"""
Severity levels for audit findings.

The audit has a flat model: informational status lines, warnings that never
change control flow, and errors. Only the dependency gate turns an error into
an aborted run; every other error is recorded and the pipeline moves on.
"""

from __future__ import annotations

from enum import IntEnum


_SEVERITY_LABELS: dict[int, str] = {
    0: "[INFO]",
    1: "[WARNING]",
    2: "[ERROR]",
}

_SEVERITY_COLORS: dict[int, str] = {
    0: "green",
    1: "yellow",
    2: "red",
}

class Severity(IntEnum):
    """
    Severity levels for audit findings.

    Using IntEnum allows direct comparison: Severity.ERROR > Severity.WARNING
    """

    INFO = 0
    WARNING = 1
    ERROR = 2

    @property
    def label(self) -> str:
        """Console prefix for this severity, e.g. '[WARNING]'."""
        return _SEVERITY_LABELS[self.value]

    @property
    def color(self) -> str:
        """Rich style used for the console prefix."""
        return _SEVERITY_COLORS.get(self.value, "white")

    def __str__(self) -> str:
        """Return lowercase name for string representation."""
        return self.name.lower()

    def __repr__(self) -> str:
        return f"Severity.{self.name}"
