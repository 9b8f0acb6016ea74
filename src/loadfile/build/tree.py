"""Build an artifact directory from a source tree.

Every module is expanded in memory before anything is written, so a
failing call site leaves no partial output behind.
"""

from __future__ import annotations

import fnmatch
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from rich.markup import escape

from loadfile.build.config import BuildConfig, LoadMode
from loadfile.build.expander import SOURCE_ENCODING, ExpandedModule, expand_file
from loadfile.exceptions import BuildError
from loadfile.utils.logging import configure_module_logger

logger = configure_module_logger(__name__, level=logging.INFO)

IGNORED_DIRS = (
    "__pycache__",
    ".git",
    ".hg",
    ".svn",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".tox",
    ".venv",
)


@dataclass
class BuildReport:
    """Summary of one tree build."""

    source_dir: Path
    output_dir: Path
    mode: LoadMode
    modules_scanned: int = 0
    modules: list[ExpandedModule] = field(default_factory=list)

    @property
    def modules_rewritten(self) -> int:
        return sum(1 for module in self.modules if module.changed)

    @property
    def sites_expanded(self) -> int:
        return sum(len(module.sites) for module in self.modules)


def _is_ignored(relative: Path) -> bool:
    return any(part in IGNORED_DIRS for part in relative.parts)


def _is_excluded(relative: Path, patterns: list[str]) -> bool:
    posix = relative.as_posix()
    return any(fnmatch.fnmatch(posix, pattern) for pattern in patterns)


def iter_modules(source_dir: Path, exclude: list[str] | None = None) -> Iterator[Path]:
    """Yield the Python modules under *source_dir* that should be expanded."""
    for path in sorted(source_dir.rglob("*.py")):
        relative = path.relative_to(source_dir)
        if _is_ignored(relative) or not path.is_file():
            continue
        if exclude and _is_excluded(relative, exclude):
            logger.debug(f"Skipping excluded module {escape(str(relative))}")
            continue
        yield path


def _check_dirs(source_dir: Path, output_dir: Path, force: bool) -> None:
    if not source_dir.is_dir():
        raise BuildError(f"source directory not found: {source_dir}")
    if output_dir == source_dir or output_dir.is_relative_to(source_dir):
        raise BuildError(f"output directory {output_dir} is inside the source tree")
    if source_dir.is_relative_to(output_dir):
        raise BuildError(f"source tree {source_dir} is inside the output directory")
    if output_dir.exists() and not force:
        raise BuildError(
            f"output directory already exists: {output_dir} (use --force to replace)"
        )


def build_tree(
    source_dir: Path,
    output_dir: Path,
    config: BuildConfig,
    force: bool = False,
) -> BuildReport:
    """Copy *source_dir* to *output_dir*, expanding every call site.

    Args:
        source_dir: Root of the tree to build.
        output_dir: Artifact directory; must not exist unless *force*.
        config: Build configuration.
        force: Remove an existing *output_dir* first.

    Returns:
        BuildReport describing what was expanded.

    Raises:
        BuildError: If the directories are unusable.
        ResolutionError: If a call site cannot be resolved.
        ContentError: In embed mode, if a referenced file cannot be loaded.
    """
    source_dir = Path(source_dir).resolve()
    output_dir = Path(output_dir).resolve()
    _check_dirs(source_dir, output_dir, force)

    report = BuildReport(source_dir=source_dir, output_dir=output_dir, mode=config.mode)
    for path in iter_modules(source_dir, config.exclude):
        report.modules_scanned += 1
        module = expand_file(path, config)
        if module.changed:
            report.modules.append(module)

    if output_dir.exists():
        logger.info(f"Removing existing output directory {escape(str(output_dir))}")
        shutil.rmtree(output_dir)
    shutil.copytree(source_dir, output_dir, ignore=shutil.ignore_patterns(*IGNORED_DIRS))

    for module in report.modules:
        target = output_dir / Path(module.filename).relative_to(source_dir)
        target.write_bytes(module.source.encode(SOURCE_ENCODING))

    logger.info(
        f"Built {escape(str(output_dir))} in [bold]{config.mode.value}[/bold] mode: "
        f"{report.sites_expanded} call sites in {report.modules_rewritten} "
        f"of {report.modules_scanned} modules"
    )
    return report
