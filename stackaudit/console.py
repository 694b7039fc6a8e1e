"""
Console status output.

Prints the colored [INFO]/[WARNING]/[ERROR] lines the audit reports its
progress with. Lines go to stdout so they interleave with the output of the
scanners, which also write to the terminal.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from stackaudit.core.severity import Severity
from stackaudit.utils.sanitizer import sanitize_for_display


class AuditConsole:
    """
    Writes status lines for an audit run.

    Messages are plain Text, never rich markup, so brackets in tool output
    or file names are printed as-is.
    """

    def __init__(
        self,
        console: Console | None = None,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self.console = console or Console(no_color=no_color, highlight=False)
        self.quiet = quiet

    def emit(self, severity: Severity, message: str, evidence: tuple[str, ...] = ()) -> None:
        """
        Print one status line and its evidence lines.

        In quiet mode INFO lines are dropped; warnings and errors always print.
        """
        if self.quiet and severity == Severity.INFO:
            return

        line = Text.assemble(
            (severity.label, f"bold {severity.color}"),
            " ",
            message,
        )
        self.console.print(line)
        for item in evidence:
            self.console.print(Text(f"  {sanitize_for_display(item)}"))

    def info(self, message: str) -> None:
        self.emit(Severity.INFO, message)

    def warning(self, message: str, evidence: tuple[str, ...] = ()) -> None:
        self.emit(Severity.WARNING, message, evidence)

    def error(self, message: str) -> None:
        self.emit(Severity.ERROR, message)

    def heading(self, title: str) -> None:
        if self.quiet:
            return
        self.console.print(Text(title, style="bold"))
        self.console.print(Text("=" * len(title)))
