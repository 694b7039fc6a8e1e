"""
Environment file check.

.env files hold secrets and should be readable by their owner only. Example
variants document which variables a developer has to provide.
"""

from __future__ import annotations

import stat

from stackaudit.stages.base import BaseStage, StageContext

# Any permission bit for group or other
GROUP_OTHER_MASK = stat.S_IRWXG | stat.S_IRWXO


def is_owner_only(mode: int) -> bool:
    """True if neither group nor other has any permission bit set."""
    return (mode & GROUP_OTHER_MASK) == 0


class EnvFileCheck(BaseStage):
    """Permissions of .env files and presence of .env.example files."""

    @property
    def id(self) -> str:
        return "env-files"

    @property
    def name(self) -> str:
        return "Environment File Security"

    @property
    def description(self) -> str:
        return (
            "Warns about .env files readable by group or others and about "
            "missing .env.example files."
        )

    def run(self, context: StageContext) -> None:
        context.info("Checking environment file security...")
        root = context.config.root
        settings = context.config.env_files

        for name in settings.env_files:
            path = root / name
            if not path.is_file():
                continue
            mode = path.stat().st_mode
            if not is_owner_only(mode):
                context.warning(
                    f"{name} has overly permissive permissions ({stat.filemode(mode)})",
                    file=name,
                )

        for name in settings.example_files:
            if not (root / name).is_file():
                context.warning(f"{name} not found", file=name)
