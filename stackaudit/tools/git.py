"""git-backed VersionControlHistoryReader."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from stackaudit.constants import GIT_EXECUTABLE
from stackaudit.core.process import CommandRunner
from stackaudit.exceptions import CommandError
from stackaudit.tools.base import VersionControlHistoryReader


class GitHistoryReader(VersionControlHistoryReader):
    """
    Searches commit messages on every ref with `git log --grep`.

    Multiple --grep options are OR-ed by git. Matching is case-sensitive,
    like a plain `git log --grep`.
    """

    def __init__(self, runner: CommandRunner, executable: str = GIT_EXECUTABLE) -> None:
        self.runner = runner
        self.executable = executable

    def search_messages(self, repo_dir: Path, keywords: Sequence[str]) -> list[str]:
        args = [
            self.executable,
            "log",
            "--all",
            "--full-history",
            "--format=%h %s",
            *(f"--grep={kw}" for kw in keywords),
        ]
        result = self.runner.run(args, cwd=repo_dir)

        if result.not_found:
            raise CommandError("git is not installed", command=self.executable)
        if not result.ok:
            raise CommandError(
                "Could not read git history",
                command="git log",
                details={"exit_code": result.returncode},
            )

        return [line for line in result.stdout.splitlines() if line.strip()]
