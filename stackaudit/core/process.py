"""
External process invocation.

Every tool the audit drives (npm, pip, bandit, safety, git) is started
through CommandRunner. The working directory and environment are explicit
arguments of each call; nothing relies on the auditor's own cwd or on an
"activated" shell.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from stackaudit.constants import EXIT_NOT_EXECUTABLE, EXIT_NOT_FOUND, EXIT_TIMEOUT
from stackaudit.exceptions import CommandError
from stackaudit.logging_config import get_logger

logger = get_logger("process")


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def not_found(self) -> bool:
        return self.returncode == EXIT_NOT_FOUND

    @property
    def command(self) -> str:
        return " ".join(self.args)


class CommandRunner:
    """
    Runs external commands synchronously.

    A command that cannot be started is reported as a result with exit
    code 127 (not found) or 126 (not executable), the way a shell reports
    it, so callers handle every outcome through the exit code. A timeout
    becomes exit code 124.

    Example:
        runner = CommandRunner()
        result = runner.run(["npm", "audit"], cwd=Path("frontend"))
        if not result.ok:
            ...
    """

    def __init__(self, timeout: float | None = None) -> None:
        """
        Args:
            timeout: Seconds before a command is killed; None waits forever
        """
        self.timeout = timeout

    def run(
        self,
        args: Sequence[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Program and arguments (never passed through a shell)
            cwd: Working directory for the command
            env: Full environment for the child; defaults to os.environ
            capture: If False, output goes straight to the terminal

        Returns:
            CommandResult with the exit code and captured output

        Raises:
            CommandError: If the working directory does not exist
        """
        argv = tuple(str(a) for a in args)
        if not cwd.is_dir():
            raise CommandError(
                "Working directory does not exist",
                command=argv[0] if argv else None,
                details={"cwd": cwd.name},
            )

        logger.debug(f"Running: {' '.join(argv)} (cwd={cwd})")

        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                capture_output=capture,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.debug(f"Command not found: {argv[0]}")
            return CommandResult(argv, EXIT_NOT_FOUND, stderr=f"{argv[0]}: command not found")
        except PermissionError:
            logger.debug(f"Command not executable: {argv[0]}")
            return CommandResult(argv, EXIT_NOT_EXECUTABLE, stderr=f"{argv[0]}: permission denied")
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out after {self.timeout}s: {argv[0]}")
            return CommandResult(argv, EXIT_TIMEOUT, stderr=f"{argv[0]}: timed out")

        result = CommandResult(
            argv,
            completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        logger.debug(
            f"Exit code {result.returncode}: {argv[0]}",
            extra={"command": argv[0], "returncode": result.returncode},
        )
        return result

    def which(self, name: str, env: Mapping[str, str] | None = None) -> str | None:
        """
        Resolve an executable on the PATH of the given environment.

        Args:
            name: Executable name
            env: Environment whose PATH is searched; defaults to os.environ

        Returns:
            Absolute path of the executable, or None
        """
        search_path = (env if env is not None else os.environ).get("PATH")
        return shutil.which(name, path=search_path)
