"""Audit stages, in pipeline order."""

from stackaudit.stages.backend import BackendAudit
from stackaudit.stages.base import BaseStage, StageContext
from stackaudit.stages.dependencies import DependencyGate
from stackaudit.stages.env_files import EnvFileCheck
from stackaudit.stages.frontend import FrontendAudit
from stackaudit.stages.report import ReportStage
from stackaudit.stages.secrets import SecretMatch, SecretScanner
from stackaudit.stages.vcs import VcsHygieneCheck


def default_stages() -> list[BaseStage]:
    """Every stage after the dependency gate, in the order they run."""
    return [
        FrontendAudit(),
        BackendAudit(),
        EnvFileCheck(),
        VcsHygieneCheck(),
        ReportStage(),
    ]


__all__ = [
    "BackendAudit",
    "BaseStage",
    "DependencyGate",
    "EnvFileCheck",
    "FrontendAudit",
    "ReportStage",
    "SecretMatch",
    "SecretScanner",
    "StageContext",
    "VcsHygieneCheck",
    "default_stages",
]
