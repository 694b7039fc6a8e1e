"""External tool adapters and the interfaces stages depend on."""

from __future__ import annotations

from dataclasses import dataclass

from stackaudit.core.process import CommandRunner
from stackaudit.tools.bandit import BanditScanner
from stackaudit.tools.base import (
    PackageAuditor,
    PythonEnvironment,
    PythonEnvironmentManager,
    StaticSecurityScanner,
    VersionControlHistoryReader,
    VulnerabilityChecker,
)
from stackaudit.tools.git import GitHistoryReader
from stackaudit.tools.npm import NpmPackageAuditor
from stackaudit.tools.safety import SafetyChecker
from stackaudit.tools.venv import VirtualEnvManager


@dataclass
class Toolbox:
    """The set of tool implementations one audit run uses."""

    runner: CommandRunner
    package_auditor: PackageAuditor
    environments: PythonEnvironmentManager
    static_scanner: StaticSecurityScanner
    vulnerability_checker: VulnerabilityChecker
    history_reader: VersionControlHistoryReader

    @classmethod
    def default(cls, runner: CommandRunner | None = None) -> "Toolbox":
        """Real tools, all sharing one CommandRunner."""
        runner = runner or CommandRunner()
        return cls(
            runner=runner,
            package_auditor=NpmPackageAuditor(runner),
            environments=VirtualEnvManager(runner),
            static_scanner=BanditScanner(runner),
            vulnerability_checker=SafetyChecker(runner),
            history_reader=GitHistoryReader(runner),
        )


__all__ = [
    "BanditScanner",
    "GitHistoryReader",
    "NpmPackageAuditor",
    "PackageAuditor",
    "PythonEnvironment",
    "PythonEnvironmentManager",
    "SafetyChecker",
    "StaticSecurityScanner",
    "Toolbox",
    "VersionControlHistoryReader",
    "VirtualEnvManager",
    "VulnerabilityChecker",
]
