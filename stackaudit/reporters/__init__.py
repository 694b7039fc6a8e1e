"""Report generators module."""

from stackaudit.reporters.base import BaseReporter
from stackaudit.reporters.markdown_reporter import MarkdownReporter, report_filename

__all__ = [
    "BaseReporter",
    "MarkdownReporter",
    "report_filename",
]
