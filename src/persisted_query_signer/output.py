"""Output - the signature file writer and human-readable run reports."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .aggregator import RunResult, signatures_to_json
from .errors import OutputWriteError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MISSING_INPUT = 2


def write_signatures(signatures: dict[str, str], output: Path) -> None:
    """
    Write the signature map to a file in one step.

    The JSON is written to a temporary file next to the target and moved
    into place, so the target is either fully written or untouched.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    data = signatures_to_json(signatures)

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=output.parent, prefix=f".{output.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise OutputWriteError(f"Could not create {output}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_name, output)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise OutputWriteError(f"Could not write {output}: {e}") from e


class HumanReporter:
    """Colored terminal report of a signing run using Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def report(self, result: RunResult, output: Optional[Path] = None) -> None:
        """Print the summary, collisions and failures of a run."""
        self._print_header(result)
        self._print_summary(result)

        if result.collisions:
            self._print_collisions(result)
        if result.failures:
            self._print_failures(result)

        self._print_footer(result, output)

    def _print_header(self, result: RunResult) -> None:
        title = Text("Persisted Query Signer", style="bold blue")
        subtitle = Text(f"{len(result.signatures)} operations signed", style="dim")
        self.console.print()
        self.console.print(Panel(subtitle, title=title, border_style="blue"))
        self.console.print()

    def _print_summary(self, result: RunResult) -> None:
        table = Table(title="Summary", show_header=True, header_style="bold")
        table.add_column("Category", style="dim")
        table.add_column("Count", justify="right")
        table.add_column("Status")

        self._add_summary_row(table, "Files Scanned", result.files_scanned, "blue", "📊")
        self._add_summary_row(table, "Signed", len(result.signatures), "green", "✓")
        self._add_summary_row(
            table,
            "No Descriptor",
            result.files_without_descriptor,
            "dim",
            "-",
        )
        self._add_summary_row(
            table,
            "Name Collisions",
            len(result.collisions),
            "yellow" if result.collisions else "dim",
            "⚠" if result.collisions else "-",
        )
        self._add_summary_row(
            table,
            "Failed",
            len(result.failures),
            "red" if result.failures else "dim",
            "✗" if result.failures else "-",
        )

        self.console.print(table)
        self.console.print()

    def _add_summary_row(
        self,
        table: Table,
        label: str,
        count: int,
        style: str,
        icon: str,
    ) -> None:
        table.add_row(label, str(count), Text(icon, style=style))

    def _print_collisions(self, result: RunResult) -> None:
        self.console.print("[bold]Name collisions:[/bold]")
        for collision in result.collisions:
            self.console.print(f"  [yellow]⚠ {escape(collision.name)}[/yellow]")
            self.console.print(f"       kept    {escape(str(collision.kept))}")
            self.console.print(f"       [dim]dropped {escape(str(collision.dropped))}[/dim]")
        self.console.print()

    def _print_failures(self, result: RunResult) -> None:
        self.console.print("[bold]Failures:[/bold]")
        for failure in result.failures:
            self.console.print(f"[bold cyan]{escape(str(failure.path))}[/bold cyan]")
            self.console.print(f"  [red]✗[/red] {escape(failure.message)}")
        self.console.print()

    def _print_footer(self, result: RunResult, output: Optional[Path]) -> None:
        if output is not None:
            self.console.print(f"[green bold]✓ Wrote {escape(str(output))}[/green bold]")
        elif result.failures:
            self.console.print(
                "[red bold]✗ Some files could not be processed; no signatures written[/red bold]"
            )
            self.console.print(
                "[dim]Fix the files above or pass --allow-failures to write the rest[/dim]"
            )


def get_exit_code(result: RunResult, allow_failures: bool = False) -> int:
    """
    Determine the exit code based on the run result.

    Returns:
        0: All files processed (or failures allowed)
        1: At least one file failed
    """
    if result.failures and not allow_failures:
        return EXIT_FAILURE
    return EXIT_OK
