"""
Dependency gate.

Verifies that node, npm and a Python interpreter are on PATH before anything
else runs. This is the only stage whose failure ends the audit.
"""

from __future__ import annotations

from stackaudit.constants import NODE_EXECUTABLE, NPM_EXECUTABLE, PYTHON_EXECUTABLES
from stackaudit.core.result import ToolAvailability
from stackaudit.exceptions import DependencyMissingError
from stackaudit.stages.base import BaseStage, StageContext


class DependencyGate(BaseStage):
    """Fails fast when a required executable is missing."""

    @property
    def id(self) -> str:
        return "dependencies"

    @property
    def name(self) -> str:
        return "Dependency Check"

    @property
    def description(self) -> str:
        return "Verifies node, npm and python3 (or python) are available on PATH."

    def resolve(self, context: StageContext) -> ToolAvailability:
        """Look up every required executable without judging the outcome."""
        runner = context.tools.runner
        python = None
        for candidate in PYTHON_EXECUTABLES:
            python = runner.which(candidate)
            if python:
                break

        return ToolAvailability(
            node=runner.which(NODE_EXECUTABLE),
            npm=runner.which(NPM_EXECUTABLE),
            python=python,
        )

    def run(self, context: StageContext) -> None:
        context.info("Checking required dependencies...")

        tools = self.resolve(context)
        context.result.tools = tools
        if tools.complete:
            context.info("All dependencies are available")
            return

        missing = (
            (tools.node, "Node.js is not installed", NODE_EXECUTABLE),
            (tools.npm, "npm is not installed", NPM_EXECUTABLE),
            (tools.python, "Python is not installed", "/".join(PYTHON_EXECUTABLES)),
        )
        for found, message, executable in missing:
            if not found:
                context.error(message, executable=executable)
                raise DependencyMissingError(message, executable=executable)
