"""
Command-line interface for stackaudit.

Running `stackaudit` with no arguments audits the current directory. Every
option is optional; the defaults reproduce the standard audit.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click
from click.core import ParameterSource
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stackaudit import __version__
from stackaudit.config import load_config
from stackaudit.console import AuditConsole
from stackaudit.core.orchestrator import Orchestrator
from stackaudit.core.result import AuditResult
from stackaudit.core.severity import Severity
from stackaudit.exceptions import ConfigurationError, DependencyMissingError
from stackaudit.logging_config import setup_logging, get_logger

logger = get_logger("cli")


class DefaultCommandGroup(click.Group):
    """Group that runs `audit` when the first argument is not a subcommand."""

    default_command = "audit"

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args or (args[0] not in self.commands and args[0] not in ("--help", "--version")):
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)


@click.group(cls=DefaultCommandGroup)
@click.version_option(version=__version__, prog_name="stackaudit")
def main() -> None:
    """
    stackaudit - Security audit for frontend/backend project templates.

    Runs npm audit, Bandit and Safety, looks for hardcoded secrets, checks
    .env files and Git hygiene, and writes a markdown report.

    Examples:

        # Audit the current directory
        stackaudit

        # Audit another project with a config file
        stackaudit ../my-app --config audit.yml
    """


@main.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=".",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to YAML configuration file"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable debug logging"
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Only print warnings and errors"
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output"
)
@click.option(
    "--log-json",
    is_flag=True,
    help="Write log records to stderr as JSON lines"
)
@click.option(
    "--json-summary",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the audit result as JSON to this file"
)
@click.pass_context
def audit(
    ctx: click.Context,
    path: Path,
    config: Optional[Path],
    verbose: bool,
    quiet: bool,
    no_color: bool,
    log_json: bool,
    json_summary: Optional[Path],
) -> None:
    """
    Audit the project at PATH (defaults to the current directory).

    Exits 0 once the audit has run, whatever it found. Exits 1 only when
    node, npm or Python is missing.
    """
    try:
        overrides: dict = {}
        # Without an explicit PATH the config file or STACKAUDIT_ROOT decides
        if ctx.get_parameter_source("path") is not ParameterSource.DEFAULT:
            overrides["root"] = path
        if no_color:
            overrides["no_color"] = True
        if verbose or quiet:
            overrides["log_level"] = "DEBUG" if verbose else "WARNING"
        audit_config = load_config(config, **overrides)
    except ConfigurationError as e:
        Console(no_color=no_color, highlight=False).print(
            Text.assemble(("Configuration Error:", "red"), f" {e}")
        )
        sys.exit(2)

    setup_logging(
        level=audit_config.log_level,
        json_output=log_json,
        no_color=audit_config.no_color,
    )

    console = Console(no_color=audit_config.no_color, highlight=False)
    status = AuditConsole(console=console, quiet=quiet)

    if not quiet:
        status.heading("🔒 Running Security Audit for " + audit_config.report.project_name)

    try:
        result = Orchestrator(audit_config, console=status).run()
    except DependencyMissingError:
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Audit cancelled by user[/yellow]")
        sys.exit(130)

    if json_summary:
        _write_json_summary(console, result, json_summary)

    if not quiet:
        _display_summary(console, result)

    sys.exit(0)


@main.command()
def stages() -> None:
    """List the audit stages in the order they run."""
    from stackaudit.stages import DependencyGate, default_stages

    table = Table(title="Audit Stages")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description")

    for i, stage in enumerate([DependencyGate(), *default_stages()], 1):
        table.add_row(str(i), stage.id, stage.name, stage.description)

    Console().print(table)


def _display_summary(console: Console, result: AuditResult) -> None:
    """Display per-stage warning and error counts."""
    console.print()

    table = Table(title="Audit Summary", show_header=True)
    table.add_column("Stage", style="bold")
    table.add_column("Warnings", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Duration", justify="right")

    for stage_result in result.stage_results:
        warnings = len(stage_result.warnings)
        errors = len(stage_result.errors)
        table.add_row(
            stage_result.stage_name,
            f"[yellow]{warnings}[/yellow]" if warnings else "0",
            f"[red]{errors}[/red]" if errors else "0",
            f"{stage_result.duration_ms / 1000:.1f}s",
        )

    console.print(table)

    issues = len(result.get_findings_by_severity(Severity.WARNING))
    if result.clean:
        panel = Panel("[green bold]✓ No issues recorded[/green bold]", border_style="green")
    else:
        panel = Panel(
            f"[yellow bold]⚠ {issues} issue(s) recorded[/yellow bold]",
            border_style="yellow",
        )
    console.print(panel)

    if result.report_path:
        console.print(f"  📄 Report: {result.report_path}")


def _write_json_summary(console: Console, result: AuditResult, path: Path) -> None:
    """Write AuditResult.to_dict() as JSON; a failure is printed, not raised."""
    try:
        path.write_text(
            json.dumps(result.to_dict(), indent=2, default=str, ensure_ascii=False),
            encoding="utf-8",
        )
    except OSError as e:
        console.print(Text.assemble(("Failed to write JSON summary:", "red"), f" {e.strerror or e}"))
        return
    logger.info(f"JSON summary written to: {path}")


if __name__ == "__main__":
    main()
