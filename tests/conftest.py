"""
Pytest fixtures and configuration.

External tools are replaced by in-memory fakes; no test starts npm, pip,
bandit, safety or git.
"""

from __future__ import annotations

import io
import tempfile
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Generator

import pytest
from rich.console import Console

from stackaudit.config import AuditConfig
from stackaudit.console import AuditConsole
from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.core.result import AuditResult, StageResult, ToolAvailability
from stackaudit.exceptions import CommandError
from stackaudit.stages.base import BaseStage, StageContext
from stackaudit.tools import Toolbox
from stackaudit.tools.base import (
    PackageAuditor,
    PythonEnvironment,
    PythonEnvironmentManager,
    StaticSecurityScanner,
    VersionControlHistoryReader,
    VulnerabilityChecker,
)

ALL_EXECUTABLES = {
    "node": "/usr/bin/node",
    "npm": "/usr/bin/npm",
    "python3": "/usr/bin/python3",
}


def _result(args: Sequence[str], returncode: int = 0, stdout: str = "") -> CommandResult:
    return CommandResult(tuple(str(a) for a in args), returncode, stdout=stdout)


class FakeRunner(CommandRunner):
    """Resolves executables from a dict and never starts a process."""

    def __init__(self, available: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self.available = dict(ALL_EXECUTABLES if available is None else available)
        self.calls: list[tuple[str, ...]] = []

    def run(self, args, cwd, env=None, capture=True) -> CommandResult:
        self.calls.append(tuple(args))
        return _result(args)

    def which(self, name, env=None):
        return self.available.get(name)


class FakePackageAuditor(PackageAuditor):
    def __init__(self) -> None:
        self.install_rc = 0
        self.audit_rc = 0
        self.outdated_rc = 0
        self.tree = "frontend@0.1.0\n├── react@18.2.0\n└── axios@1.6.0\n"
        self.calls: list[str] = []
        self.audit_levels: list[str] = []

    @property
    def name(self) -> str:
        return "fake-npm"

    def install(self, project_dir: Path) -> CommandResult:
        self.calls.append("install")
        return _result(["npm", "install"], self.install_rc)

    def audit(self, project_dir: Path, level: str) -> CommandResult:
        self.calls.append("audit")
        self.audit_levels.append(level)
        return _result(["npm", "audit"], self.audit_rc)

    def list_packages(self, project_dir: Path) -> CommandResult:
        self.calls.append("list")
        return _result(["npm", "list"], 0, stdout=self.tree)

    def outdated(self, project_dir: Path) -> CommandResult:
        self.calls.append("outdated")
        return _result(["npm", "outdated"], self.outdated_rc)


class FakeEnvironmentManager(PythonEnvironmentManager):
    def __init__(self) -> None:
        self.create_rc = 0
        self.requirements_rc = 0
        self.packages_rc = 0
        self.created: list[str] = []
        self.installed_requirements: list[Path] = []
        self.installed_packages: list[tuple[str, ...]] = []

    def locate(self, project_dir, names):
        for name in names:
            environment = PythonEnvironment(project_dir / name)
            if environment.exists:
                return environment
        return None

    def create(self, project_dir, name, python):
        self.created.append(name)
        if self.create_rc == 0:
            (project_dir / name).mkdir()
        return PythonEnvironment(project_dir / name), _result([python, "-m", "venv", name], self.create_rc)

    def install_requirements(self, environment, requirements):
        self.installed_requirements.append(requirements)
        return _result(["pip", "install", "-r", requirements], self.requirements_rc)

    def install_packages(self, environment, packages):
        self.installed_packages.append(tuple(packages))
        return _result(["pip", "install", *packages], self.packages_rc)


class FakeScanner(StaticSecurityScanner):
    """Writes its report file like bandit does, then exits with returncode."""

    def __init__(self) -> None:
        self.available = True
        self.returncode = 0
        self.write_report = True
        self.calls: list[str] = []
        self.envs: list[Mapping[str, str]] = []

    @property
    def name(self) -> str:
        return "fake-bandit"

    def is_available(self, env):
        self.envs.append(env)
        return self.available

    def scan_to_file(self, target, output, exclude, env):
        self.calls.append("scan_to_file")
        if self.write_report:
            output.write_text('{"results": []}')
        return _result(["bandit", "-r", "."], self.returncode)

    def scan(self, target, exclude, env):
        self.calls.append("scan")
        return _result(["bandit", "-r", "."], self.returncode)


class FakeChecker(VulnerabilityChecker):
    def __init__(self) -> None:
        self.available = True
        self.returncode = 0
        self.write_report = True
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake-safety"

    def is_available(self, env):
        return self.available

    def check_to_file(self, project_dir, output, env):
        self.calls.append("check_to_file")
        if self.write_report:
            output.write_text("[]")
        return _result(["safety", "check"], self.returncode)

    def check(self, project_dir, env):
        self.calls.append("check")
        return _result(["safety", "check"], self.returncode)


class FakeHistoryReader(VersionControlHistoryReader):
    def __init__(self) -> None:
        self.matches: list[str] = []
        self.error: CommandError | None = None
        self.keywords: list[str] = []

    def search_messages(self, repo_dir, keywords):
        self.keywords = list(keywords)
        if self.error is not None:
            raise self.error
        return list(self.matches)


class FixedClock:
    """Returns queued datetimes, repeating the last one."""

    def __init__(self, *times: datetime) -> None:
        self.times = list(times)

    def __call__(self) -> datetime:
        if len(self.times) > 1:
            return self.times.pop(0)
        return self.times[0]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """A project with frontend/ and backend/ manifests and a .gitignore."""
    frontend = temp_dir / "frontend"
    backend = temp_dir / "backend"
    frontend.mkdir()
    backend.mkdir()
    (frontend / "package.json").write_text('{"name": "frontend"}')
    (backend / "requirements.txt").write_text("fastapi\nmotor\n")
    (backend / "main.py").write_text("from fastapi import FastAPI\n\napp = FastAPI()\n")
    (temp_dir / ".gitignore").write_text("node_modules/\n.env\n")
    return temp_dir


@pytest.fixture
def config(project_dir: Path) -> AuditConfig:
    return AuditConfig(root=project_dir)


@pytest.fixture
def toolbox() -> Toolbox:
    return Toolbox(
        runner=FakeRunner(),
        package_auditor=FakePackageAuditor(),
        environments=FakeEnvironmentManager(),
        static_scanner=FakeScanner(),
        vulnerability_checker=FakeChecker(),
        history_reader=FakeHistoryReader(),
    )


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def audit_console(output: io.StringIO) -> AuditConsole:
    return AuditConsole(console=Console(file=output, no_color=True, width=200))


@pytest.fixture
def context(config: AuditConfig, toolbox: Toolbox, audit_console: AuditConsole) -> StageContext:
    result = AuditResult(project_root=str(config.root))
    result.tools = ToolAvailability(node="node", npm="npm", python="python3")
    return StageContext(
        config=config,
        tools=toolbox,
        console=audit_console,
        result=result,
    )


def run_stage(stage: BaseStage, context: StageContext) -> StageResult:
    """Run one stage outside the orchestrator and return what it recorded."""
    stage_result = StageResult(stage_id=stage.id, stage_name=stage.name)
    context.result.add_stage_result(stage_result)
    context.current = stage_result
    try:
        stage.run(context)
    finally:
        context.current = None
    return stage_result


def messages(stage_result: StageResult) -> list[str]:
    return [f.message for f in stage_result.findings]
