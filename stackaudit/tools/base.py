"""
Capability interfaces for the external tools the audit drives.

Each interface has exactly one real implementation in this package (npm,
Bandit, Safety, git, venv/pip). Stages only talk to these interfaces, so
tests substitute fakes and never start a real binary.

Implementations return the CommandResult of the underlying process. Deciding
what a non-zero exit code means is the stage's job.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from stackaudit.core.process import CommandResult


@dataclass(frozen=True)
class PythonEnvironment:
    """
    An isolated Python environment (a virtualenv directory).

    Instead of activating the environment in a shell, callers pass
    environ() to every command that should run inside it.
    """

    root: Path

    @property
    def bin_dir(self) -> Path:
        return self.root / ("Scripts" if os.name == "nt" else "bin")

    @property
    def python(self) -> Path:
        return self.bin_dir / ("python.exe" if os.name == "nt" else "python")

    @property
    def exists(self) -> bool:
        return self.root.is_dir()

    def environ(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """
        Environment mapping equivalent to an activated virtualenv.

        Args:
            base: Environment to start from; defaults to os.environ
        """
        env = dict(base if base is not None else os.environ)
        env.pop("PYTHONHOME", None)
        env["VIRTUAL_ENV"] = str(self.root)
        path = env.get("PATH", "")
        env["PATH"] = f"{self.bin_dir}{os.pathsep}{path}" if path else str(self.bin_dir)
        return env


class PackageAuditor(ABC):
    """Frontend package manager with a built-in vulnerability audit."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def install(self, project_dir: Path) -> CommandResult:
        """Install all declared dependencies."""
        ...

    @abstractmethod
    def audit(self, project_dir: Path, level: str) -> CommandResult:
        """Audit dependencies; non-zero when issues at or above level exist."""
        ...

    @abstractmethod
    def list_packages(self, project_dir: Path) -> CommandResult:
        """Print the resolved dependency tree (captured)."""
        ...

    @abstractmethod
    def outdated(self, project_dir: Path) -> CommandResult:
        """List outdated packages; non-zero when any are outdated."""
        ...


class StaticSecurityScanner(ABC):
    """Static-analysis security scanner for Python source."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def is_available(self, env: Mapping[str, str]) -> bool:
        ...

    @abstractmethod
    def scan_to_file(
        self,
        target: Path,
        output: Path,
        exclude: Sequence[str],
        env: Mapping[str, str],
    ) -> CommandResult:
        """Scan recursively and write a machine-readable report."""
        ...

    @abstractmethod
    def scan(
        self,
        target: Path,
        exclude: Sequence[str],
        env: Mapping[str, str],
    ) -> CommandResult:
        """Scan recursively and print human-readable results."""
        ...


class VulnerabilityChecker(ABC):
    """Checks installed Python packages against a vulnerability database."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def is_available(self, env: Mapping[str, str]) -> bool:
        ...

    @abstractmethod
    def check_to_file(
        self,
        project_dir: Path,
        output: Path,
        env: Mapping[str, str],
    ) -> CommandResult:
        """Check and write a machine-readable report."""
        ...

    @abstractmethod
    def check(self, project_dir: Path, env: Mapping[str, str]) -> CommandResult:
        """Check and print human-readable results."""
        ...


class VersionControlHistoryReader(ABC):
    """Reads commit history of the project repository."""

    @abstractmethod
    def search_messages(self, repo_dir: Path, keywords: Sequence[str]) -> list[str]:
        """
        Find commits whose message matches any keyword.

        Returns:
            One line per matching commit, newest first

        Raises:
            CommandError: If the history cannot be read
        """
        ...


class PythonEnvironmentManager(ABC):
    """Creates and populates isolated Python environments."""

    @abstractmethod
    def locate(self, project_dir: Path, names: Sequence[str]) -> PythonEnvironment | None:
        """Return the first existing environment among names, in order."""
        ...

    @abstractmethod
    def create(self, project_dir: Path, name: str, python: str) -> tuple[PythonEnvironment, CommandResult]:
        """Create a new environment with the given interpreter."""
        ...

    @abstractmethod
    def install_requirements(
        self,
        environment: PythonEnvironment,
        requirements: Path,
    ) -> CommandResult:
        ...

    @abstractmethod
    def install_packages(
        self,
        environment: PythonEnvironment,
        packages: Sequence[str],
    ) -> CommandResult:
        ...
