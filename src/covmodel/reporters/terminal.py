"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from covmodel.models.coverage import CoverageModel

console = Console()

_HIGH_COVERAGE = 80.0
_MEDIUM_COVERAGE = 50.0


def _format_rate(percentage: float | None) -> str:
    """Format a coverage percentage, or a dash when there is no data."""
    if percentage is None:
        return "[dim]-[/dim]"
    color = _coverage_color(percentage)
    return f"[{color}]{percentage:.1f}%[/{color}]"


def _coverage_color(percentage: float) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percentage >= _HIGH_COVERAGE:
        return "green"
    if percentage >= _MEDIUM_COVERAGE:
        return "yellow"
    return "red"


class CLIReporter:
    """Rich terminal output for coverage models."""

    def __init__(self) -> None:
        self.console = console

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

    def print_model_summary(self, model: CoverageModel) -> None:
        """Print a table of assemblies and classes with their line coverage."""
        if not model.assemblies:
            self.print_warning("No assemblies left after filtering")
            return

        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Assembly / Class", style="bold")
        table.add_column("Files", justify="right")
        table.add_column("Covered", justify="right")
        table.add_column("Coverable", justify="right")
        table.add_column("Line Coverage", justify="right")

        for assembly in model.assemblies:
            table.add_row(
                f"[bold]{assembly.name}[/bold]",
                str(sum(len(c.files) for c in assembly.classes)),
                str(assembly.covered_lines),
                str(assembly.coverable_lines),
                _format_rate(assembly.line_coverage),
            )
            for cls in assembly.classes:
                table.add_row(
                    f"  {cls.name}",
                    str(len(cls.files)),
                    str(cls.covered_lines),
                    str(cls.coverable_lines),
                    _format_rate(cls.line_coverage),
                )

        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            "",
            str(model.covered_lines),
            str(model.coverable_lines),
            _format_rate(model.line_coverage),
        )
        self.console.print(table)


# Singleton instance for easy import
reporter = CLIReporter()
