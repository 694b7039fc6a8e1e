"""
Configuration management for stackaudit.

Uses Pydantic for validation, type safety, and environment variable support.
Configuration values are validated at load time to fail fast on invalid configs.

Every default reproduces the stock audit of a frontend/ + backend/ project,
so running without any configuration file is the normal case.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stackaudit import constants
from stackaudit.exceptions import ConfigurationError


def _validate_relative(value: str) -> str:
    """Project-relative paths must stay inside the project root."""
    path = Path(value)
    if path.is_absolute() or ".." in path.parts:
        raise ValueError(f"Path must be relative to the project root: {value}")
    return value


class FrontendConfig(BaseModel):
    """Configuration for the npm frontend audit."""

    directory: str = constants.FRONTEND_DIR
    audit_level: Literal["low", "moderate", "high", "critical"] = constants.DEFAULT_NPM_AUDIT_LEVEL
    unsafe_packages: list[str] = Field(
        default_factory=lambda: list(constants.UNSAFE_PACKAGE_PATTERNS)
    )

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        return _validate_relative(v)

    @field_validator("unsafe_packages")
    @classmethod
    def validate_unsafe_packages(cls, v: list[str]) -> list[str]:
        """Drop blank entries."""
        return [p.strip() for p in v if p and p.strip()]


class BackendConfig(BaseModel):
    """Configuration for the Python backend audit."""

    directory: str = constants.BACKEND_DIR
    venv_dirs: list[str] = Field(
        default_factory=lambda: list(constants.VENV_DIRS),
        min_length=1,
    )
    requirements_file: str = constants.REQUIREMENTS_FILE
    security_tools: list[str] = Field(
        default_factory=lambda: list(constants.SECURITY_TOOLS)
    )
    bandit_report: str = constants.BANDIT_REPORT_FILE
    safety_report: str = constants.SAFETY_REPORT_FILE

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        return _validate_relative(v)

    @field_validator("venv_dirs")
    @classmethod
    def validate_venv_dirs(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name or "/" in name or name in (".", ".."):
                raise ValueError(f"Invalid virtual environment directory name: {name!r}")
        return v


class SecretScanConfig(BaseModel):
    """Configuration for the textual secret scan."""

    keywords: list[str] = Field(
        default_factory=lambda: list(constants.SOURCE_SECRET_KEYWORDS),
        min_length=1,
    )
    exclusions: list[str] = Field(
        default_factory=lambda: list(constants.SECRET_PLACEHOLDER_MARKERS)
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(constants.SOURCE_EXTENSIONS)
    )
    excluded_suffixes: list[str] = Field(
        default_factory=lambda: list(constants.SCAN_EXCLUDED_SUFFIXES)
    )
    max_matches_shown: int = Field(default=50, ge=1, le=10000)

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: list[str]) -> list[str]:
        """Validate keywords are not empty and reasonable length."""
        validated = []
        for keyword in v:
            if not keyword or not keyword.strip():
                continue
            if len(keyword) > 100:
                raise ValueError("Keyword too long (max 100 chars)")
            validated.append(keyword.strip())
        if not validated:
            raise ValueError("At least one keyword is required")
        return validated

    @field_validator("extensions", "excluded_suffixes")
    @classmethod
    def validate_suffixes(cls, v: list[str]) -> list[str]:
        """Normalize to a leading dot."""
        return [s if s.startswith(".") else f".{s}" for s in v if s]


class EnvFilesConfig(BaseModel):
    """Configuration for the environment file check."""

    env_files: list[str] = Field(default_factory=lambda: list(constants.ENV_FILES))
    example_files: list[str] = Field(
        default_factory=lambda: list(constants.ENV_EXAMPLE_FILES)
    )

    @field_validator("env_files", "example_files")
    @classmethod
    def validate_paths(cls, v: list[str]) -> list[str]:
        return [_validate_relative(p) for p in v]


class VcsConfig(BaseModel):
    """Configuration for the version-control hygiene check."""

    ignore_file: str = constants.GITIGNORE_FILE
    history_keywords: list[str] = Field(
        default_factory=lambda: list(constants.HISTORY_SECRET_KEYWORDS),
        min_length=1,
    )
    max_history_matches: int = Field(default=constants.MAX_HISTORY_MATCHES, ge=1, le=1000)


class ReportConfig(BaseModel):
    """Configuration for report generation."""

    project_name: str = constants.DEFAULT_PROJECT_NAME
    # Relative to the project root unless absolute
    output_dir: Path = Field(default=Path("."))


class AuditConfig(BaseSettings):
    """
    Main configuration for stackaudit.

    Configuration precedence (highest to lowest):
    1. Init arguments (command-line options, config file values)
    2. Environment variables (STACKAUDIT_*)
    3. Default values

    Example environment variables:
        STACKAUDIT_LOG_LEVEL=DEBUG
        STACKAUDIT_FRONTEND__AUDIT_LEVEL=high
    """

    model_config = SettingsConfigDict(
        env_prefix="STACKAUDIT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # General settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    no_color: bool = False

    # Project root holding frontend/ and backend/
    root: Path = Field(default=Path("."))

    # None means wait for every command to finish
    command_timeout: float | None = Field(default=None, gt=0)

    # Sub-configurations
    frontend: FrontendConfig = Field(default_factory=FrontendConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    secrets: SecretScanConfig = Field(default_factory=SecretScanConfig)
    env_files: EnvFilesConfig = Field(default_factory=EnvFilesConfig)
    vcs: VcsConfig = Field(default_factory=VcsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: Path) -> Path:
        """Validate and resolve the project root."""
        resolved = v.resolve()
        if not resolved.is_dir():
            raise ValueError(f"Project root is not a directory: {v}")
        return resolved

    @property
    def frontend_path(self) -> Path:
        return self.root / self.frontend.directory

    @property
    def backend_path(self) -> Path:
        return self.root / self.backend.directory

    @property
    def report_dir(self) -> Path:
        if self.report.output_dir.is_absolute():
            return self.report.output_dir
        return self.root / self.report.output_dir

    @property
    def bandit_report_path(self) -> Path:
        return self.backend_path / self.backend.bandit_report

    @property
    def safety_report_path(self) -> Path:
        return self.backend_path / self.backend.safety_report

    @classmethod
    def from_yaml_file(cls, path: Path, **overrides: Any) -> "AuditConfig":
        """
        Load configuration from a YAML file.

        SECURITY: Uses safe_load to prevent code execution.
        """
        import yaml

        if not path.is_file():
            raise ConfigurationError("Config file not found", details={"file": path.name})

        if path.stat().st_size > constants.MAX_CONFIG_FILE_BYTES:
            raise ConfigurationError("Config file too large", details={"file": path.name})

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Config file is not valid YAML: {e}",
                details={"file": path.name},
            ) from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a YAML mapping",
                details={"file": path.name},
            )

        _deep_update(data, overrides)
        return cls(**data)


def load_config(
    config_path: Path | None = None,
    **overrides: Any,
) -> AuditConfig:
    """
    Load configuration from file and/or environment with overrides.

    Args:
        config_path: Optional path to YAML config file
        **overrides: Direct overrides for config values (e.g. from the CLI)

    Returns:
        Validated AuditConfig instance

    Raises:
        ConfigurationError: If the file cannot be read or validation fails
    """
    from pydantic import ValidationError as PydanticValidationError

    try:
        if config_path:
            return AuditConfig.from_yaml_file(config_path, **overrides)
        return AuditConfig(**overrides)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details={"errors": "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )},
        ) from e


def _deep_update(base: dict[str, Any], updates: dict[str, Any]) -> None:
    """Recursively update a dictionary."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
