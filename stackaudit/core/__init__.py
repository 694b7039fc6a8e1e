"""Core pipeline module."""

from stackaudit.core.orchestrator import Orchestrator
from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.core.result import (
    AuditResult,
    Finding,
    ReportSummary,
    StageResult,
    ToolAvailability,
)
from stackaudit.core.severity import Severity

__all__ = [
    "AuditResult",
    "CommandResult",
    "CommandRunner",
    "Finding",
    "Orchestrator",
    "ReportSummary",
    "Severity",
    "StageResult",
    "ToolAvailability",
]
