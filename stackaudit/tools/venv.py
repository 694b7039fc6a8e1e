"""venv/pip-backed PythonEnvironmentManager."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.tools.base import PythonEnvironment, PythonEnvironmentManager


class VirtualEnvManager(PythonEnvironmentManager):
    """
    Creates environments with `python -m venv` and installs with the
    environment's own `python -m pip`.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def locate(self, project_dir: Path, names: Sequence[str]) -> PythonEnvironment | None:
        for name in names:
            environment = PythonEnvironment(project_dir / name)
            if environment.exists:
                return environment
        return None

    def create(self, project_dir: Path, name: str, python: str) -> tuple[PythonEnvironment, CommandResult]:
        result = self.runner.run([python, "-m", "venv", name], cwd=project_dir)
        return PythonEnvironment(project_dir / name), result

    def install_requirements(
        self,
        environment: PythonEnvironment,
        requirements: Path,
    ) -> CommandResult:
        return self.runner.run(
            [str(environment.python), "-m", "pip", "install", "-r", str(requirements)],
            cwd=requirements.parent,
            env=environment.environ(),
            capture=False,
        )

    def install_packages(
        self,
        environment: PythonEnvironment,
        packages: Sequence[str],
    ) -> CommandResult:
        # Output is captured; the caller reports failures
        return self.runner.run(
            [str(environment.python), "-m", "pip", "install", *packages],
            cwd=environment.root.parent,
            env=environment.environ(),
        )
