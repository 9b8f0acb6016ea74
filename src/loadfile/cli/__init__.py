"""CLI module for loadfile.

This module provides the command-line interface for building artifacts
and checking call sites.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from loadfile._version import __version__
from loadfile.cli.build_commands import run_build, run_check
from loadfile.utils.logging import level_for, set_verbosity, setup_logging

app = typer.Typer(
    name="loadfile",
    help="loadfile - embed files at build time or read them at runtime",
    add_completion=False,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"loadfile {__version__}")
        raise typer.Exit()


@app.callback()
def _main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """loadfile - embed files at build time or read them at runtime."""


def _configure_logging(verbose: bool) -> None:
    setup_logging(level_for(verbose))
    set_verbosity(verbose)


@app.command()
def build(
    source: Path = typer.Argument(..., help="Source tree to build"),
    output: Path = typer.Argument(..., help="Output directory for the artifact"),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        "-m",
        help="embed or runtime (default: LOADFILE_MODE, [tool.loadfile], embed)",
    ),
    early_check: Optional[bool] = typer.Option(
        None,
        "--early-check/--no-early-check",
        help="In runtime mode, fail the build if a referenced file is missing",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x", help="Glob of modules to copy unexpanded"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Replace an existing output directory"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every call site"
    ),
) -> None:
    """Build SOURCE into OUTPUT, rewriting every load_str/load_bytes call."""
    _configure_logging(verbose)
    run_build(
        source,
        output,
        mode=mode,
        early_check=early_check,
        force=force,
        verbose=verbose or None,
        exclude=exclude,
        console=console,
    )


@app.command()
def check(
    source: Path = typer.Argument(..., help="Source tree to scan"),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x", help="Glob of modules to skip"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
) -> None:
    """List call sites with their resolved paths and whether they load."""
    _configure_logging(verbose)
    run_check(source, exclude=exclude, console=console)


if __name__ == "__main__":
    app()
