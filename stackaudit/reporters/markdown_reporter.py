"""
Markdown report generator.

The report states when the audit ran, which scans produced their artifacts,
and a fixed list of recommendations. Scanner details live in the artifacts
and the console output, not in this file.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from stackaudit.constants import (
    REPORT_DATE_FORMAT,
    REPORT_FILENAME_PREFIX,
    REPORT_NEXT_STEPS,
    REPORT_RECOMMENDATIONS,
    REPORT_TIMESTAMP_FORMAT,
)
from stackaudit.reporters.base import BaseReporter

if TYPE_CHECKING:
    from stackaudit.core.result import ReportSummary

COMPLETED = "Completed"
NOT_RUN = "Not run"


def report_filename(timestamp: datetime) -> str:
    """security-audit-report-YYYYMMDD-HHMMSS.md for the given time."""
    return f"{REPORT_FILENAME_PREFIX}{timestamp.strftime(REPORT_TIMESTAMP_FORMAT)}.md"


def format_report_date(timestamp: datetime) -> str:
    """
    date(1)-style stamp such as "Tue Mar 05 14:07:09 CET 2024".

    A naive timestamp is taken to be local time.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime(REPORT_DATE_FORMAT)


def scan_status(completed: bool) -> str:
    return COMPLETED if completed else NOT_RUN


class MarkdownReporter(BaseReporter):
    """
    Generate the security audit report in Markdown.

    Output sections:
    - Header with date and project
    - Frontend, backend and environment security
    - Recommendations and next steps
    """

    @property
    def format_name(self) -> str:
        return "Markdown"

    def generate(self, summary: "ReportSummary") -> str:
        """Generate Markdown report."""
        lines: list[str] = []

        lines.extend(self._generate_header(summary))
        lines.extend(self._generate_frontend_section())
        lines.extend(self._generate_backend_section(summary))
        lines.extend(self._generate_environment_section())
        lines.extend(self._numbered_section("Recommendations", REPORT_RECOMMENDATIONS))
        lines.extend(self._numbered_section("Next Steps", REPORT_NEXT_STEPS))

        return "\n".join(lines)

    def _generate_header(self, summary: "ReportSummary") -> list[str]:
        project = self._sanitize_text(summary.project_name)
        return [
            "# Security Audit Report",
            "",
            f"**Date**: {format_report_date(summary.timestamp)}",
            f"**Project**: {project}",
            "",
            "## Summary",
            "",
            f"This report contains the results of the security audit performed on the {project} project.",
            "",
        ]

    def _generate_frontend_section(self) -> list[str]:
        return [
            "## Frontend Security",
            "",
            "- npm audit results: See above output",
            "- Package vulnerabilities: Checked",
            "- Outdated packages: Checked",
            "",
        ]

    def _generate_backend_section(self, summary: "ReportSummary") -> list[str]:
        return [
            "## Backend Security",
            "",
            f"- Bandit scan: {scan_status(summary.bandit_completed)}",
            f"- Safety check: {scan_status(summary.safety_completed)}",
            "- Secret detection: Checked",
            "",
        ]

    def _generate_environment_section(self) -> list[str]:
        return [
            "## Environment Security",
            "",
            "- Environment file permissions: Checked",
            "- .gitignore configuration: Checked",
            "",
        ]

    def _numbered_section(self, title: str, items: tuple[str, ...]) -> list[str]:
        lines = [f"## {title}", ""]
        lines.extend(f"{i}. {item}" for i, item in enumerate(items, 1))
        lines.append("")
        return lines
