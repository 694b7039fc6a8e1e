"""Safety-backed VulnerabilityChecker."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.tools.base import VulnerabilityChecker


class SafetyChecker(VulnerabilityChecker):
    """Runs `safety check` against the packages installed in the environment."""

    def __init__(self, runner: CommandRunner, executable: str = "safety") -> None:
        self.runner = runner
        self.executable = executable

    @property
    def name(self) -> str:
        return "Safety"

    def is_available(self, env: Mapping[str, str]) -> bool:
        return self.runner.which(self.executable, env) is not None

    def check_to_file(
        self,
        project_dir: Path,
        output: Path,
        env: Mapping[str, str],
    ) -> CommandResult:
        return self.runner.run(
            [self.executable, "check", "--json", "--output", str(output)],
            cwd=project_dir,
            env=env,
        )

    def check(self, project_dir: Path, env: Mapping[str, str]) -> CommandResult:
        return self.runner.run(
            [self.executable, "check"],
            cwd=project_dir,
            env=env,
            capture=False,
        )
