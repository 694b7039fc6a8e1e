"""
Audit result data structures.

Findings are immutable; stage and audit results accumulate them for the
duration of one run. Nothing here is persisted: the console output and the
markdown report are the only traces a run leaves behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from stackaudit.core.severity import Severity


@dataclass(frozen=True)
class ToolAvailability:
    """
    Resolved locations of the executables the audit needs.

    Produced by the dependency gate. A None value means the tool was not
    found on PATH.
    """

    node: str | None = None
    npm: str | None = None
    python: str | None = None

    @property
    def complete(self) -> bool:
        return all((self.node, self.npm, self.python))

    def to_dict(self) -> dict[str, Any]:
        return {"node": self.node, "npm": self.npm, "python": self.python}


@dataclass(frozen=True)
class Finding:
    """
    A single message recorded by an audit stage.

    Immutable to ensure findings cannot be modified after creation.
    """

    stage: str
    severity: Severity
    message: str
    evidence: tuple[str, ...] = field(default_factory=tuple)  # Redacted lines
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.stage:
            raise ValueError("stage cannot be empty")
        if not self.message:
            raise ValueError("message cannot be empty")
        if not isinstance(self.severity, Severity):
            raise TypeError(f"severity must be Severity, got {type(self.severity)}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "stage": self.stage,
            "severity": str(self.severity),
            "message": self.message,
            "evidence": list(self.evidence),
            "metadata": dict(self.metadata),
        }


@dataclass
class StageResult:
    """
    Result of running a single audit stage.

    Mutable to allow accumulating findings during stage execution.
    """

    stage_id: str
    stage_name: str
    findings: list[Finding] = field(default_factory=list)
    duration_ms: float = 0.0
    error_message: str | None = None

    def add_finding(self, finding: Finding) -> None:
        self.findings.append(finding)

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def clean(self) -> bool:
        """True when the stage recorded nothing above INFO."""
        return not any(f.severity > Severity.INFO for f in self.findings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage_id": self.stage_id,
            "stage_name": self.stage_name,
            "findings": [f.to_dict() for f in self.findings],
            "duration_ms": self.duration_ms,
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class ReportSummary:
    """
    Everything the markdown report needs, captured at report time.

    The report is a pure function of this record.
    """

    timestamp: datetime
    project_name: str
    bandit_completed: bool
    safety_completed: bool


@dataclass
class AuditResult:
    """
    Complete result of an audit run.

    Contains all findings, metadata, and summary statistics.
    """

    project_root: str

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    tools: ToolAvailability | None = None
    stage_results: list[StageResult] = field(default_factory=list)
    report_path: Path | None = None

    auditor_version: str = "1.0.0"

    @property
    def duration_seconds(self) -> float | None:
        """Calculate total audit duration in seconds."""
        if self.completed_at is None:
            return None
        delta = self.completed_at - self.started_at
        return delta.total_seconds()

    @property
    def all_findings(self) -> list[Finding]:
        """Get all findings from all stages, in the order they were recorded."""
        findings = []
        for result in self.stage_results:
            findings.extend(result.findings)
        return findings

    @property
    def severity_counts(self) -> dict[str, int]:
        """Count findings by severity."""
        counts = {s.name.lower(): 0 for s in Severity}
        for finding in self.all_findings:
            counts[finding.severity.name.lower()] += 1
        return counts

    @property
    def clean(self) -> bool:
        return all(r.clean for r in self.stage_results)

    def get_findings_by_severity(
        self,
        min_severity: Severity = Severity.INFO,
    ) -> list[Finding]:
        """Get findings at or above the specified severity."""
        return [
            f for f in self.all_findings
            if f.severity >= min_severity
        ]

    def add_stage_result(self, result: StageResult) -> None:
        self.stage_results.append(result)

    def complete(self) -> None:
        """Mark the audit as complete."""
        self.completed_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "project_root": self.project_root,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "auditor_version": self.auditor_version,
            "tools": self.tools.to_dict() if self.tools else None,
            "report_path": str(self.report_path) if self.report_path else None,
            "summary": {
                "severity_counts": self.severity_counts,
                "clean": self.clean,
            },
            "stage_results": [r.to_dict() for r in self.stage_results],
        }
