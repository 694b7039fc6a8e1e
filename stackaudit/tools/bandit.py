"""Bandit-backed StaticSecurityScanner."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.tools.base import StaticSecurityScanner


class BanditScanner(StaticSecurityScanner):
    """
    Runs `bandit -r .` inside the backend directory.

    Bandit exits 1 when it finds issues, so a non-zero exit is the
    normal "something to look at" outcome.
    """

    def __init__(self, runner: CommandRunner, executable: str = "bandit") -> None:
        self.runner = runner
        self.executable = executable

    @property
    def name(self) -> str:
        return "Bandit"

    def is_available(self, env: Mapping[str, str]) -> bool:
        return self.runner.which(self.executable, env) is not None

    def _base_args(self, exclude: Sequence[str]) -> list[str]:
        args = [self.executable, "-r", "."]
        if exclude:
            args.extend(["-x", ",".join(f"./{name}" for name in exclude)])
        return args

    def scan_to_file(
        self,
        target: Path,
        output: Path,
        exclude: Sequence[str],
        env: Mapping[str, str],
    ) -> CommandResult:
        args = self._base_args(exclude) + ["-f", "json", "-o", str(output)]
        return self.runner.run(args, cwd=target, env=env)

    def scan(
        self,
        target: Path,
        exclude: Sequence[str],
        env: Mapping[str, str],
    ) -> CommandResult:
        return self.runner.run(self._base_args(exclude), cwd=target, env=env, capture=False)
