"""Terminal reporter with rich output formatting.

Everything here goes to stderr so that stdout carries nothing but the
rendered Markdown.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from scoverage_comment.reporters.markdown import DEFAULT_THRESHOLDS, format_count

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoverage_comment.config import RunConfig
    from scoverage_comment.models.coverage import Report

console = Console(stderr=True)

_MAX_CHANGED_FILES_DISPLAY = 50


def _rate_color(rate: float) -> str:
    """Return a Rich color name for a coverage fraction."""
    good, acceptable = DEFAULT_THRESHOLDS
    if rate >= good:
        return "green"
    if rate >= acceptable:
        return "yellow"
    return "red"


class CLIReporter:
    """Rich terminal output for a coverage comment run."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_run_context(self, config: RunConfig) -> None:
        """Show which repository, pull request and revisions the run targets."""
        self.print_info(f"Repository {config.repository or '-'}")
        pr = f"#{config.pr_number}" if config.pr_number is not None else "-"
        self.print_info(f"Pull request {pr}")
        self.print_info(f"Base ref {config.base_ref or '-'}")
        self.print_info(f"Head ref {config.head_ref or '-'}")

    def print_changed_files(self, changed_files: Sequence[str]) -> None:
        """List the changed files, truncated for very large pull requests."""
        self.print_info(f"Changed files ({len(changed_files)}):")
        for path in changed_files[:_MAX_CHANGED_FILES_DISPLAY]:
            self.console.print(f"  - {path}", markup=False, highlight=False)
        hidden = len(changed_files) - _MAX_CHANGED_FILES_DISPLAY
        if hidden > 0:
            self.print_info(f"  ... and {hidden} more")

    def print_coverage_summary(self, report: Report) -> None:
        """Print a compact table with one row per bucket."""
        table = Table(title="Statement coverage", title_style="bold")
        table.add_column("Bucket")
        table.add_column("Classes", justify="right")
        table.add_column("Statements", justify="right")
        table.add_column("Coverage", justify="right")

        for title, bucket in (("All files", report.all), ("Changed files", report.changed)):
            rate = bucket.summary.statement_rate
            if math.isfinite(rate):
                color = _rate_color(rate / 100)
                coverage = f"[{color}]{rate:.1f}%[/{color}]"
            else:
                coverage = "[dim]n/a[/dim]"
            table.add_row(
                title,
                str(len(bucket.records)),
                format_count(bucket.summary.statements_total),
                coverage,
            )

        self.console.print(table)


reporter = CLIReporter()
