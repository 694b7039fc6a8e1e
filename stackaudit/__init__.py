"""
stackaudit

A security auditor for full-stack project templates: a React/npm frontend
next to a Python backend. Runs npm audit, Bandit and Safety, looks for
hardcoded secrets, checks environment file and Git hygiene, and writes a
timestamped markdown report.

Licensed under the Apache License, Version 2.0
"""

from typing import Final

__version__: Final[str] = "1.0.0"
__license__: Final[str] = "Apache-2.0"

# Public API exports
from stackaudit.config import AuditConfig
from stackaudit.core.orchestrator import Orchestrator
from stackaudit.core.result import AuditResult, Finding, ToolAvailability
from stackaudit.core.severity import Severity

__all__ = [
    "__version__",
    "__license__",
    "AuditConfig",
    "AuditResult",
    "Finding",
    "Orchestrator",
    "Severity",
    "ToolAvailability",
]
