"""
Main audit orchestrator for stackaudit.

Runs the dependency gate, then every other stage in a fixed order. Only the
gate can end a run early; a stage that crashes is recorded and the next one
runs anyway.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from stackaudit import __version__
from stackaudit.config import AuditConfig
from stackaudit.console import AuditConsole
from stackaudit.core.process import CommandRunner
from stackaudit.core.result import AuditResult, StageResult
from stackaudit.core.severity import Severity
from stackaudit.exceptions import DependencyMissingError
from stackaudit.logging_config import get_logger
from stackaudit.stages import DependencyGate, StageContext, default_stages
from stackaudit.tools import Toolbox

if TYPE_CHECKING:
    from stackaudit.stages import BaseStage

logger = get_logger("orchestrator")


class Orchestrator:
    """
    Sequential audit pipeline.

    Example:
        config = AuditConfig(root=Path("./my-project"))
        result = Orchestrator(config).run()
        print(result.report_path)
    """

    def __init__(
        self,
        config: AuditConfig,
        tools: Toolbox | None = None,
        console: AuditConsole | None = None,
        stages: list["BaseStage"] | None = None,
        gate: DependencyGate | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: Validated audit configuration
            tools: External tool implementations (real tools by default)
            console: Status line printer
            stages: Stages run after the gate (the standard pipeline by default)
            gate: Dependency gate run first
        """
        self.config = config
        self.tools = tools or Toolbox.default(CommandRunner(timeout=config.command_timeout))
        self.console = console or AuditConsole(no_color=config.no_color)
        self.stages = stages if stages is not None else default_stages()
        self.gate = gate or DependencyGate()

    def run(self) -> AuditResult:
        """
        Run a complete security audit.

        Returns:
            Audit result with every recorded finding

        Raises:
            DependencyMissingError: If a required executable is missing
        """
        result = AuditResult(
            project_root=str(self.config.root),
            auditor_version=__version__,
        )
        context = StageContext(
            config=self.config,
            tools=self.tools,
            console=self.console,
            result=result,
        )

        logger.info(f"Starting audit of: {self.config.root.name or self.config.root}")

        try:
            self._run_stage(self.gate, context, fatal=True)
        except DependencyMissingError:
            result.complete()
            raise

        for stage in self.stages:
            self._run_stage(stage, context)

        result.complete()
        self._log_summary(result)

        self.console.info("Security audit completed!")
        self.console.info("Review the generated report and address any findings.")

        return result

    def _run_stage(
        self,
        stage: "BaseStage",
        context: StageContext,
        fatal: bool = False,
    ) -> StageResult:
        """
        Run a single stage, recording its findings.

        Args:
            stage: The stage to run
            context: Shared run context
            fatal: Let exceptions escape instead of recording them

        Returns:
            Stage result with findings
        """
        stage_result = StageResult(stage_id=stage.id, stage_name=stage.name)
        context.result.add_stage_result(stage_result)
        context.current = stage_result

        start_time = time.perf_counter()

        try:
            stage.run(context)
        except Exception as e:
            if fatal:
                raise
            logger.exception(f"Stage '{stage.name}' failed", extra={"stage": stage.id})
            stage_result.error_message = str(e)
            context.error(f"{stage.name} failed: {e}")
        finally:
            stage_result.duration_ms = (time.perf_counter() - start_time) * 1000
            context.current = None

        return stage_result

    def _log_summary(self, result: AuditResult) -> None:
        """Log audit summary."""
        severity_counts = result.severity_counts

        summary_parts = []
        for severity in (Severity.ERROR, Severity.WARNING):
            count = severity_counts.get(severity.name.lower(), 0)
            if count > 0:
                summary_parts.append(f"{severity.name}: {count}")

        if summary_parts:
            logger.info(f"Audit complete. Findings: {', '.join(summary_parts)}")
        else:
            logger.info("Audit complete. No issues found.")

        if result.duration_seconds:
            logger.debug(f"Audit duration: {result.duration_seconds:.2f}s")
