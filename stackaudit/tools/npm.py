"""npm-backed PackageAuditor."""

from __future__ import annotations

from pathlib import Path

from stackaudit.constants import NPM_EXECUTABLE
from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.tools.base import PackageAuditor


class NpmPackageAuditor(PackageAuditor):
    """
    Runs npm in the frontend directory.

    install, audit and outdated write straight to the terminal so their
    reports are visible while the audit runs; list is captured because its
    output is searched.
    """

    def __init__(self, runner: CommandRunner, executable: str = NPM_EXECUTABLE) -> None:
        self.runner = runner
        self.executable = executable

    @property
    def name(self) -> str:
        return "npm"

    def install(self, project_dir: Path) -> CommandResult:
        return self.runner.run([self.executable, "install"], cwd=project_dir, capture=False)

    def audit(self, project_dir: Path, level: str) -> CommandResult:
        return self.runner.run(
            [self.executable, "audit", f"--audit-level={level}"],
            cwd=project_dir,
            capture=False,
        )

    def list_packages(self, project_dir: Path) -> CommandResult:
        # npm list exits non-zero on peer dependency problems but still prints the tree
        return self.runner.run([self.executable, "list"], cwd=project_dir)

    def outdated(self, project_dir: Path) -> CommandResult:
        return self.runner.run([self.executable, "outdated"], cwd=project_dir, capture=False)
