"""Rich output helpers for build and check results.

This module renders call-site tables and build summaries using Rich
components (Table, Panel).
"""

from pathlib import Path
from typing import Iterable, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from loadfile.build.callsites import CallSite
from loadfile.build.tree import BuildReport

CheckRow = Tuple[str, CallSite, Path, Optional[str]]


def _display_path(path: Path, root: Optional[Path]) -> str:
    if root is not None and path.is_relative_to(root):
        return str(path.relative_to(root))
    return str(path)


def render_build_summary(report: BuildReport, console: Console) -> None:
    """
    Print a summary panel for a finished build.

    Args:
        report: Result of ``build_tree``.
        console: Console to print to.
    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column(style="white")

    mode_style = "yellow" if report.mode.value == "embed" else "green"
    table.add_row("Source:", str(report.source_dir))
    table.add_row("Output:", f"[bold]{report.output_dir}[/bold]")
    table.add_row("Mode:", f"[{mode_style}]{report.mode.value}[/{mode_style}]")
    table.add_row("Modules scanned:", f"[yellow]{report.modules_scanned}[/yellow]")
    table.add_row("Modules rewritten:", f"[yellow]{report.modules_rewritten}[/yellow]")
    table.add_row("Call sites:", f"[yellow]{report.sites_expanded}[/yellow]")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Build complete[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
    )


def render_callsites(
    rows: Iterable[CheckRow],
    console: Console,
    root: Optional[Path] = None,
    title: str = "Call sites",
) -> None:
    """
    Print one table row per call site.

    Args:
        rows: ``(module, site, resolved, problem)`` tuples; *problem* is
            ``None`` when the file loads cleanly.
        console: Console to print to.
        root: Directory that module and file paths are shown relative to.
        title: Table title.
    """
    table = Table(title=f"[bold]{title}[/bold]", show_header=True, header_style="bold")
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Call", style="magenta")
    table.add_column("Resolved path", style="white")
    table.add_column("Status", justify="right")

    for module, site, resolved, problem in rows:
        location = f"{_display_path(Path(module), root)}:{site.lineno}"
        status = "[green]ok[/green]" if problem is None else f"[red]{problem}[/red]"
        table.add_row(
            location,
            f"{site.entry_point}({site.literal!r})",
            _display_path(resolved, root),
            status,
        )

    console.print(table)
