"""
Version-control hygiene check.

Makes sure .env files are ignored by Git and looks for commit messages that
suggest a secret was committed at some point.
"""

from __future__ import annotations

from pathlib import Path

from stackaudit.exceptions import CommandError
from stackaudit.stages.base import BaseStage, StageContext

ENV_IGNORE_MARKER = ".env"


def ignores_env_files(ignore_file: Path) -> bool:
    """
    True if any line of the ignore file mentions .env.

    A missing or unreadable file counts as not ignoring them.
    """
    try:
        content = ignore_file.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return any(ENV_IGNORE_MARKER in line for line in content.splitlines())


class VcsHygieneCheck(BaseStage):
    """.gitignore coverage and commit-history keyword search."""

    @property
    def id(self) -> str:
        return "vcs"

    @property
    def name(self) -> str:
        return "Git Security"

    @property
    def description(self) -> str:
        return (
            "Checks that .env files are listed in .gitignore and searches "
            "commit messages for secret-related keywords."
        )

    def run(self, context: StageContext) -> None:
        context.info("Checking Git security...")
        root = context.config.root
        settings = context.config.vcs

        # Recorded at error level, yet the run goes on
        if not ignores_env_files(root / settings.ignore_file):
            context.error(f".env files are not in {settings.ignore_file}")

        context.info("Checking for secrets in git history...")
        try:
            matches = context.tools.history_reader.search_messages(root, settings.history_keywords)
        except CommandError as e:
            context.warning(f"Could not search git history: {e.message}")
            return

        if matches:
            context.warning(
                "Potential secrets found in git history",
                evidence=matches[:settings.max_history_matches],
                match_count=len(matches),
            )
