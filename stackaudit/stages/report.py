"""
Report generation stage.

Captures the state of the scan artifacts, renders the markdown report and
writes it under a timestamped name. Each run gets its own file.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime

from stackaudit.core.result import ReportSummary
from stackaudit.exceptions import ReportError
from stackaudit.reporters.markdown_reporter import MarkdownReporter, report_filename
from stackaudit.stages.base import BaseStage, StageContext


def local_now() -> datetime:
    """Current local time, aware of its UTC offset and zone name."""
    return datetime.now().astimezone()


class ReportStage(BaseStage):
    """Writes security-audit-report-<timestamp>.md."""

    def __init__(
        self,
        reporter: MarkdownReporter | None = None,
        clock: Callable[[], datetime] = local_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            reporter: Renderer for the report body
            clock: Returns the current local time, preferably timezone-aware
            sleep: Used to wait for the next second on a filename clash
        """
        self.reporter = reporter or MarkdownReporter()
        self.clock = clock
        self.sleep = sleep

    @property
    def id(self) -> str:
        return "report"

    @property
    def name(self) -> str:
        return "Report Generation"

    @property
    def description(self) -> str:
        return "Writes a timestamped markdown summary of the audit."

    def summarize(self, context: StageContext, timestamp: datetime) -> ReportSummary:
        """Snapshot the values the report depends on."""
        config = context.config
        return ReportSummary(
            timestamp=timestamp,
            project_name=config.report.project_name,
            bandit_completed=config.bandit_report_path.is_file(),
            safety_completed=config.safety_report_path.is_file(),
        )

    def _free_timestamp(self, context: StageContext) -> datetime:
        """Current time, moved to the next second while its filename is taken."""
        output_dir = context.config.report_dir
        timestamp = self.clock()
        # After a few attempts write() reports the clash instead
        for _ in range(5):
            if not (output_dir / report_filename(timestamp)).exists():
                break
            self.sleep(1.0 - timestamp.microsecond / 1_000_000)
            timestamp = self.clock()
        return timestamp

    def run(self, context: StageContext) -> None:
        context.info("Generating security report...")

        timestamp = self._free_timestamp(context)
        summary = self.summarize(context, timestamp)
        output_dir = context.config.report_dir

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            path = self.reporter.write(summary, output_dir / report_filename(timestamp))
        except (ReportError, OSError) as e:
            context.error(f"Failed to write security report: {e}")
            return

        context.result.report_path = path
        context.info(f"Security report generated: {path.name}")
