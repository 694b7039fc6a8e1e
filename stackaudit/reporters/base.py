"""
Abstract base class for report generators.

Rendering is kept apart from writing: generate() is a pure function of a
ReportSummary, write() handles the filesystem.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from stackaudit.constants import MAX_REPORT_VALUE_LENGTH
from stackaudit.exceptions import ReportError
from stackaudit.logging_config import get_logger

if TYPE_CHECKING:
    from stackaudit.core.result import ReportSummary

logger = get_logger("reporters")


class BaseReporter(ABC):
    """
    Abstract base class for report generators.

    Subclasses must implement:
    - format_name: Name of the output format
    - generate: Main report generation logic
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Name of the report format (e.g., 'Markdown')."""
        ...

    @abstractmethod
    def generate(self, summary: "ReportSummary") -> str:
        """
        Generate the report content.

        Args:
            summary: Values captured at report time

        Returns:
            Report content as string
        """
        ...

    def write(self, summary: "ReportSummary", file_path: Path) -> Path:
        """
        Generate and write a report to a new file.

        Args:
            summary: Values captured at report time
            file_path: Destination; must not exist yet

        Returns:
            Path to the written report file

        Raises:
            ReportError: If generating or writing fails, or the file exists
        """
        try:
            content = self.generate(summary)
        except Exception as e:
            raise ReportError(
                f"Failed to generate {self.format_name} report: {e}"
            ) from e

        try:
            # "x": never replace a report from an earlier run
            with file_path.open("x", encoding="utf-8") as handle:
                handle.write(content)
        except FileExistsError as e:
            raise ReportError(
                "Report file already exists",
                details={"file": file_path.name},
            ) from e
        except OSError as e:
            raise ReportError(
                f"Failed to write report to {file_path}: {e.strerror or e}"
            ) from e

        logger.info(f"{self.format_name} report written to: {file_path}")
        return file_path

    def _sanitize_text(self, text: str | None) -> str:
        """Truncate long values; None becomes an empty string."""
        if text is None:
            return ""

        if len(text) > MAX_REPORT_VALUE_LENGTH:
            text = text[:MAX_REPORT_VALUE_LENGTH] + "..."

        return text
