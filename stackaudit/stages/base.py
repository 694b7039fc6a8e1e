"""
Abstract base class for audit stages.

Defines the interface every stage implements, and the context object a stage
reports through. Reporting a message both prints it and records it as a
Finding on the current stage result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stackaudit.core.result import AuditResult, Finding, StageResult
from stackaudit.core.severity import Severity
from stackaudit.logging_config import get_logger
from stackaudit.utils.sanitizer import sanitize_for_display

if TYPE_CHECKING:
    from stackaudit.config import AuditConfig
    from stackaudit.console import AuditConsole
    from stackaudit.tools import Toolbox

logger = get_logger("stages")


@dataclass
class StageContext:
    """
    Shared state handed to each stage.

    Attributes:
        config: Validated configuration
        tools: External tool implementations
        console: Status line printer
        result: The audit being assembled
        current: Result of the stage currently running
    """

    config: "AuditConfig"
    tools: "Toolbox"
    console: "AuditConsole"
    result: AuditResult
    current: StageResult | None = field(default=None)

    def record(
        self,
        severity: Severity,
        message: str,
        evidence: list[str] | tuple[str, ...] = (),
        metadata: dict[str, Any] | None = None,
    ) -> Finding:
        """Print a status line and append it to the current stage."""
        if self.current is None:
            raise RuntimeError("No stage is running")

        redacted = tuple(sanitize_for_display(item) for item in evidence)
        finding = Finding(
            stage=self.current.stage_id,
            severity=severity,
            message=message,
            evidence=redacted,
            metadata=metadata or {},
        )
        self.current.add_finding(finding)
        self.console.emit(severity, message, redacted)

        if severity >= Severity.WARNING:
            logger.debug(f"[{finding.stage}] {severity}: {message}", extra={"stage": finding.stage})

        return finding

    def info(self, message: str, **metadata: Any) -> Finding:
        return self.record(Severity.INFO, message, metadata=metadata)

    def warning(
        self,
        message: str,
        evidence: list[str] | tuple[str, ...] = (),
        **metadata: Any,
    ) -> Finding:
        return self.record(Severity.WARNING, message, evidence, metadata)

    def error(self, message: str, **metadata: Any) -> Finding:
        return self.record(Severity.ERROR, message, metadata=metadata)


class BaseStage(ABC):
    """
    Abstract base class for audit stages.

    Subclasses must implement:
    - id: Unique stage identifier
    - name: Human-readable name
    - description: What the stage checks
    - run: Stage logic, reporting through the context

    A stage never raises for a finding. Non-zero exits of external tools
    are recorded as warnings and the stage carries on.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique identifier for this stage (e.g., 'frontend')."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the stage."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what this stage checks."""
        ...

    @abstractmethod
    def run(self, context: StageContext) -> None:
        """
        Run the stage.

        Args:
            context: Shared run context; report findings through it
        """
        ...
