"""
Backend audit.

Prepares an isolated Python environment for the backend, installs the
scanners into it, runs Bandit and Safety, and searches the source for
hardcoded secrets. The environment is never activated; its environ()
mapping is passed to every command instead.
"""

from __future__ import annotations

from stackaudit.stages.base import BaseStage, StageContext
from stackaudit.stages.secrets import SecretScanner
from stackaudit.tools.base import PythonEnvironment


class BackendAudit(BaseStage):
    """Bandit, Safety and a keyword secret scan over the backend."""

    @property
    def id(self) -> str:
        return "backend"

    @property
    def name(self) -> str:
        return "Backend Security Audit"

    @property
    def description(self) -> str:
        return (
            "Prepares a virtual environment, installs bandit/safety/semgrep, "
            "runs Bandit and Safety, and scans source for hardcoded secrets."
        )

    def run(self, context: StageContext) -> None:
        context.info("Running Backend Security Audit...")

        project_dir = context.config.backend_path
        if not project_dir.is_dir():
            context.warning(f"Backend directory not found: {context.config.backend.directory}")
            return

        environment = self._prepare_environment(context)
        env = environment.environ()

        context.info("Installing security tools...")
        installed = context.tools.environments.install_packages(
            environment, context.config.backend.security_tools
        )
        if not installed.ok:
            context.warning("Some security tools failed to install")

        self._run_bandit(context, env)
        self._run_safety(context, env)
        self._scan_secrets(context)

    def _prepare_environment(self, context: StageContext) -> PythonEnvironment:
        """Use the first existing venv directory, or create the preferred one."""
        backend = context.config.backend
        project_dir = context.config.backend_path
        manager = context.tools.environments

        existing = manager.locate(project_dir, backend.venv_dirs)
        if existing is not None:
            context.info(f"Using virtual environment: {existing.root.name}")
            return existing

        context.warning("Virtual environment not found. Creating one...")
        python = (context.result.tools.python if context.result.tools else None) or "python3"
        environment, created = manager.create(project_dir, backend.venv_dirs[0], python)
        if not created.ok:
            context.warning("Virtual environment creation failed")
            return environment

        requirements = project_dir / backend.requirements_file
        if not requirements.is_file():
            context.warning(f"{backend.requirements_file} not found, skipping dependency install")
        elif not manager.install_requirements(environment, requirements).ok:
            context.warning("Backend dependency installation failed")

        return environment

    def _run_bandit(self, context: StageContext, env: dict[str, str]) -> None:
        context.info("Running Bandit security scanner...")
        scanner = context.tools.static_scanner
        if not scanner.is_available(env):
            context.warning("Bandit not available")
            return

        project_dir = context.config.backend_path
        exclude = context.config.backend.venv_dirs
        report = context.config.bandit_report_path

        if not scanner.scan_to_file(project_dir, report, exclude, env).ok:
            context.warning("Bandit found security issues", report=report.name)
        if not scanner.scan(project_dir, exclude, env).ok:
            context.warning("Bandit found security issues")

    def _run_safety(self, context: StageContext, env: dict[str, str]) -> None:
        context.info("Running Safety check for known vulnerabilities...")
        checker = context.tools.vulnerability_checker
        if not checker.is_available(env):
            context.warning("Safety not available")
            return

        project_dir = context.config.backend_path
        report = context.config.safety_report_path

        if not checker.check_to_file(project_dir, report, env).ok:
            context.warning("Safety found vulnerabilities", report=report.name)
        if not checker.check(project_dir, env).ok:
            context.warning("Safety found vulnerabilities")

    def _scan_secrets(self, context: StageContext) -> None:
        context.info("Checking for hardcoded secrets...")
        settings = context.config.secrets
        scanner = SecretScanner(
            keywords=settings.keywords,
            exclusions=settings.exclusions,
            extensions=settings.extensions,
            excluded_suffixes=settings.excluded_suffixes,
        )
        matches = scanner.scan(
            context.config.backend_path,
            excluded_dirs=context.config.backend.venv_dirs,
        )
        if not matches:
            return

        shown = [m.to_string() for m in matches[:settings.max_matches_shown]]
        if len(matches) > len(shown):
            shown.append(f"... and {len(matches) - len(shown)} more")
        context.warning(
            "Potential hardcoded secrets found",
            evidence=shown,
            match_count=len(matches),
        )
