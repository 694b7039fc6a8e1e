"""
Frontend audit.

Runs npm's own audit against the frontend project, looks for packages known
to enable dynamic evaluation or unsafe serialization, and lists outdated
packages. Every step is best-effort.
"""

from __future__ import annotations

from stackaudit.constants import NODE_MODULES_DIR
from stackaudit.stages.base import BaseStage, StageContext


class FrontendAudit(BaseStage):
    """npm audit, unsafe-package scan and outdated check."""

    @property
    def id(self) -> str:
        return "frontend"

    @property
    def name(self) -> str:
        return "Frontend Security Audit"

    @property
    def description(self) -> str:
        return (
            "Installs frontend dependencies if needed, runs npm audit, flags "
            "unsafe packages and lists outdated ones."
        )

    def run(self, context: StageContext) -> None:
        context.info("Running Frontend Security Audit...")

        project_dir = context.config.frontend_path
        if not project_dir.is_dir():
            context.warning(f"Frontend directory not found: {context.config.frontend.directory}")
            return

        npm = context.tools.package_auditor

        if not (project_dir / NODE_MODULES_DIR).is_dir():
            context.info("Installing frontend dependencies...")
            if not npm.install(project_dir).ok:
                context.warning("Frontend dependency installation failed")

        context.info("Running npm audit...")
        if not npm.audit(project_dir, context.config.frontend.audit_level).ok:
            context.warning("npm audit found vulnerabilities")

        context.info("Checking for security-sensitive packages...")
        listing = npm.list_packages(project_dir)
        unsafe = find_unsafe_packages(listing.stdout, context.config.frontend.unsafe_packages)
        if unsafe:
            context.warning("Potentially unsafe packages detected", evidence=unsafe)

        context.info("Checking for outdated packages...")
        if not npm.outdated(project_dir).ok:
            context.warning("Some packages are outdated")


def find_unsafe_packages(tree: str, patterns: list[str]) -> list[str]:
    """
    Lines of an `npm list` tree containing any denylisted substring.

    Args:
        tree: Output of npm list
        patterns: Package name substrings to look for

    Returns:
        Matching lines, stripped of tree drawing characters
    """
    matches = []
    for line in tree.splitlines():
        if any(pattern in line for pattern in patterns):
            matches.append(line.lstrip(" │├└─┬`|+-\\"))
    return matches
