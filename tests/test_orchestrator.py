"""
Tests for the audit pipeline.
"""

from datetime import datetime, timedelta

import pytest

from stackaudit.core.orchestrator import Orchestrator
from stackaudit.core.severity import Severity
from stackaudit.exceptions import DependencyMissingError
from stackaudit.stages import (
    BackendAudit,
    BaseStage,
    EnvFileCheck,
    FrontendAudit,
    ReportStage,
    VcsHygieneCheck,
    default_stages,
)

from conftest import FakeRunner, FixedClock

START = datetime(2024, 1, 2, 3, 4, 5)


def stage_named(result, stage_id):
    return next(s for s in result.stage_results if s.stage_id == stage_id)


class ExplodingStage(BaseStage):
    @property
    def id(self) -> str:
        return "exploding"

    @property
    def name(self) -> str:
        return "Exploding Stage"

    @property
    def description(self) -> str:
        return "Always raises."

    def run(self, context) -> None:
        context.info("About to fail")
        raise RuntimeError("boom")


def pipeline(clock):
    return [
        FrontendAudit(),
        BackendAudit(),
        EnvFileCheck(),
        VcsHygieneCheck(),
        ReportStage(clock=clock, sleep=lambda seconds: None),
    ]


class TestDefaultStages:
    """Tests for the standard stage order."""

    def test_order(self):
        assert [stage.id for stage in default_stages()] == [
            "frontend", "backend", "env-files", "vcs", "report",
        ]

    def test_unique_ids(self):
        ids = [stage.id for stage in default_stages()]
        assert len(ids) == len(set(ids))


class TestOrchestrator:
    """Tests for Orchestrator.run."""

    def test_full_run(self, config, toolbox, audit_console, output):
        orchestrator = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        )

        result = orchestrator.run()

        assert [s.stage_id for s in result.stage_results] == [
            "dependencies", "frontend", "backend", "env-files", "vcs", "report",
        ]
        assert result.report_path.name == "security-audit-report-20240102-030405.md"
        assert result.completed_at is not None
        assert result.tools.complete

        text = output.getvalue()
        assert "[INFO] Security audit completed!" in text
        assert "[INFO] Review the generated report and address any findings." in text

    def test_missing_dependency_stops_run(self, config, toolbox, audit_console):
        toolbox.runner = FakeRunner({"node": "/usr/bin/node", "python3": "/usr/bin/python3"})
        orchestrator = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        )

        with pytest.raises(DependencyMissingError, match="npm is not installed"):
            orchestrator.run()

        assert toolbox.package_auditor.calls == []
        assert list(config.root.glob("security-audit-report-*.md")) == []

    def test_crashing_stage_is_recorded(self, config, toolbox, audit_console):
        stages = [ExplodingStage(), *pipeline(FixedClock(START))]
        orchestrator = Orchestrator(config, tools=toolbox, console=audit_console, stages=stages)

        result = orchestrator.run()

        exploded = stage_named(result, "exploding")
        assert exploded.error_message == "boom"
        assert [f.message for f in exploded.errors] == ["Exploding Stage failed: boom"]
        assert result.report_path is not None

    def test_stage_durations(self, config, toolbox, audit_console):
        orchestrator = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        )

        result = orchestrator.run()

        assert all(s.duration_ms >= 0 for s in result.stage_results)

    def test_findings_do_not_fail_run(self, config, toolbox, audit_console):
        toolbox.package_auditor.audit_rc = 1
        toolbox.static_scanner.returncode = 1
        (config.root / ".gitignore").write_text("node_modules/\n")
        orchestrator = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        )

        result = orchestrator.run()

        assert not result.clean
        assert result.severity_counts["error"] == 1
        assert result.report_path is not None

    def test_empty_project(self, temp_dir, toolbox, audit_console):
        """Test a root with neither frontend/ nor backend/."""
        from stackaudit.config import AuditConfig

        config = AuditConfig(root=temp_dir)
        orchestrator = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        )

        result = orchestrator.run()

        warnings = [f.message for f in result.get_findings_by_severity(Severity.WARNING)]
        assert "Frontend directory not found: frontend" in warnings
        assert "Backend directory not found: backend" in warnings
        assert stage_named(result, "vcs").errors[0].message == ".env files are not in .gitignore"

        content = result.report_path.read_text(encoding="utf-8")
        assert "- Bandit scan: Not run" in content
        assert "- Safety check: Not run" in content

    def test_consecutive_runs_keep_both_reports(self, config, toolbox, audit_console):
        first = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        ).run()
        second = Orchestrator(
            config,
            tools=toolbox,
            console=audit_console,
            stages=pipeline(FixedClock(START, START + timedelta(seconds=1))),
        ).run()

        assert first.report_path != second.report_path
        assert first.report_path.is_file()
        assert second.report_path.is_file()
        assert len(list(config.root.glob("security-audit-report-*.md"))) == 2

    def test_to_dict(self, config, toolbox, audit_console):
        result = Orchestrator(
            config, tools=toolbox, console=audit_console, stages=pipeline(FixedClock(START)),
        ).run()

        data = result.to_dict()

        assert data["project_root"] == str(config.root)
        assert len(data["stage_results"]) == 6
