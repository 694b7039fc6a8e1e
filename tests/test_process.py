"""
Tests for external command execution and tool wrappers.
"""

import os
import sys

import pytest

from stackaudit.core.process import CommandResult, CommandRunner
from stackaudit.exceptions import CommandError
from stackaudit.tools import BanditScanner, GitHistoryReader, NpmPackageAuditor, PythonEnvironment

from conftest import FakeRunner


class RecordingRunner(FakeRunner):
    """Returns queued results and remembers the cwd of each call."""

    def __init__(self, *results: CommandResult) -> None:
        super().__init__()
        self.results = list(results)
        self.cwds = []

    def run(self, args, cwd, env=None, capture=True):
        self.calls.append(tuple(args))
        self.cwds.append(cwd)
        if self.results:
            return self.results.pop(0)
        return CommandResult(tuple(args), 0)


class TestCommandRunner:
    """Tests for CommandRunner."""

    def test_exit_code(self, temp_dir):
        result = CommandRunner().run(
            [sys.executable, "-c", "import sys; sys.exit(3)"], cwd=temp_dir,
        )

        assert result.returncode == 3
        assert not result.ok

    def test_captures_output_and_cwd(self, temp_dir):
        result = CommandRunner().run(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=temp_dir,
        )

        assert result.ok
        assert os.path.realpath(result.stdout.strip()) == os.path.realpath(temp_dir)

    def test_missing_executable(self, temp_dir):
        result = CommandRunner().run(["definitely-not-a-real-tool-xyz"], cwd=temp_dir)

        assert result.returncode == 127
        assert result.not_found

    def test_missing_cwd(self, temp_dir):
        with pytest.raises(CommandError):
            CommandRunner().run([sys.executable, "--version"], cwd=temp_dir / "missing")

    def test_timeout(self, temp_dir):
        result = CommandRunner(timeout=0.5).run(
            [sys.executable, "-c", "import time; time.sleep(10)"], cwd=temp_dir,
        )

        assert result.returncode == 124

    def test_which_uses_given_path(self, temp_dir):
        assert CommandRunner().which("python-nowhere", env={"PATH": str(temp_dir)}) is None
        assert CommandRunner().which("python3", env={"PATH": ""}) is None


class TestPythonEnvironment:
    """Tests for the activation-free virtualenv environment."""

    def test_environ(self, temp_dir):
        environment = PythonEnvironment(temp_dir / "venv")

        env = environment.environ({"PATH": "/usr/bin", "PYTHONHOME": "/opt/python"})

        assert env["VIRTUAL_ENV"] == str(temp_dir / "venv")
        assert env["PATH"].split(os.pathsep) == [str(environment.bin_dir), "/usr/bin"]
        assert "PYTHONHOME" not in env

    def test_environ_does_not_touch_process(self, temp_dir):
        before = dict(os.environ)
        PythonEnvironment(temp_dir / "venv").environ()
        assert dict(os.environ) == before

    def test_exists(self, temp_dir):
        environment = PythonEnvironment(temp_dir / ".venv")
        assert not environment.exists
        (temp_dir / ".venv").mkdir()
        assert environment.exists


class TestToolWrappers:
    """Tests for the command lines the wrappers build."""

    def test_npm_audit_level(self, temp_dir):
        runner = RecordingRunner()
        NpmPackageAuditor(runner).audit(temp_dir, "high")

        assert runner.calls == [("npm", "audit", "--audit-level=high")]
        assert runner.cwds == [temp_dir]

    def test_bandit_report(self, temp_dir):
        runner = RecordingRunner()
        output = temp_dir / "bandit-report.json"

        BanditScanner(runner).scan_to_file(temp_dir, output, ["venv", ".venv"], env={})

        args = runner.calls[0]
        assert args[:3] == ("bandit", "-r", ".")
        assert "./venv,./.venv" in args
        assert args[-4:] == ("-f", "json", "-o", str(output))

    def test_git_history(self, temp_dir):
        runner = RecordingRunner(
            CommandResult(("git",), 0, stdout="a1b2c3d remove api token\n\nd4e5f6a rotate secret\n")
        )

        matches = GitHistoryReader(runner).search_messages(temp_dir, ["token", "secret"])

        assert matches == ["a1b2c3d remove api token", "d4e5f6a rotate secret"]
        assert "--grep=token" in runner.calls[0]
        assert "--grep=secret" in runner.calls[0]

    def test_git_not_a_repository(self, temp_dir):
        runner = RecordingRunner(
            CommandResult(("git",), 128, stderr="fatal: not a git repository")
        )

        with pytest.raises(CommandError):
            GitHistoryReader(runner).search_messages(temp_dir, ["token"])

    def test_git_not_installed(self, temp_dir):
        runner = RecordingRunner(CommandResult(("git",), 127))

        with pytest.raises(CommandError, match="git is not installed"):
            GitHistoryReader(runner).search_messages(temp_dir, ["token"])
