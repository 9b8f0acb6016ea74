"""Implementation of the build and check CLI commands.

Both functions take a Rich console so tests can capture their output,
and turn loadfile errors into ``typer.Exit(code=1)``.
"""

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from loadfile.build.callsites import scan_callsites
from loadfile.build.config import BuildConfig, load_config
from loadfile.build.tree import build_tree, iter_modules
from loadfile.content import read_content
from loadfile.exceptions import ContentError, LoadFileError
from loadfile.resolver import resolve_path
from loadfile.utils.rich_output import CheckRow, render_build_summary, render_callsites


def _load_config_or_exit(console: Console, **overrides: object) -> BuildConfig:
    try:
        return load_config(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(code=1) from e


def run_build(
    source: Path,
    output: Path,
    mode: Optional[str] = None,
    early_check: Optional[bool] = None,
    force: bool = False,
    verbose: Optional[bool] = None,
    exclude: Optional[List[str]] = None,
    console: Optional[Console] = None,
) -> None:
    """Build *source* into *output* and print a summary.

    Args:
        source: Source tree to build.
        output: Artifact directory to create.
        mode: ``embed`` or ``runtime``; falls back to env/pyproject/default.
        early_check: Check file existence at build time in runtime mode.
        force: Replace an existing output directory.
        verbose: Log every call site.
        exclude: Glob patterns of modules to copy unexpanded.
        console: Rich console instance for output.
    """
    if console is None:
        console = Console()

    config = _load_config_or_exit(
        console,
        mode=mode,
        early_check=early_check,
        verbose=verbose,
        exclude=exclude or None,
        project_dir=source,
    )

    try:
        report = build_tree(source, output, config, force=force)
    except LoadFileError as e:
        console.print(f"[red]✗[/red] Build failed: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    render_build_summary(report, console)


def collect_check_rows(source: Path, exclude: Optional[List[str]] = None) -> List[CheckRow]:
    """Scan *source* and try to load every call site's file as embed would.

    Resolution errors propagate; content errors become the row's problem.
    """
    source = Path(source).resolve()
    rows: List[CheckRow] = []
    for path in iter_modules(source, exclude):
        filename = str(path)
        text = path.read_bytes().decode("utf-8-sig")
        for site in scan_callsites(text, filename):
            resolved = resolve_path(site.literal, filename)
            problem: Optional[str] = None
            try:
                read_content(resolved, site.kind, site.literal)
            except ContentError as e:
                problem = e.reason.value
            rows.append((filename, site, resolved, problem))
    return rows


def run_check(
    source: Path,
    exclude: Optional[List[str]] = None,
    console: Optional[Console] = None,
) -> None:
    """List every call site under *source* with its resolved path and status.

    Exits with code 1 if any call site would fail an embed build.
    """
    if console is None:
        console = Console()

    if not Path(source).is_dir():
        console.print(f"[red]✗[/red] Source directory not found: {source}")
        raise typer.Exit(code=1)

    try:
        rows = collect_check_rows(source, exclude)
    except (LoadFileError, UnicodeDecodeError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if not rows:
        console.print("[dim]No load_str/load_bytes call sites found.[/dim]")
        return

    render_callsites(rows, console, root=Path(source).resolve())
    failures = sum(1 for row in rows if row[3] is not None)
    if failures:
        console.print(
            f"[red]✗[/red] {failures} of {len(rows)} call sites would fail an embed build"
        )
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] All {len(rows)} call sites load cleanly")
