"""Strategy selection: the code shape emitted for one call site.

=======  ======  ===================================================
mode     kind    emitted code
=======  ======  ===================================================
embed    text    ``'...'`` literal replacing the whole call
embed    bytes   ``b'...'`` literal replacing the whole call
runtime  text    ``load_str('/abs/path')``, argument replaced only
runtime  bytes   ``load_bytes('/abs/path')``, argument replaced only
=======  ======  ===================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from loadfile.build.callsites import CallSite, SourceSpan
from loadfile.build.config import BuildConfig, LoadMode
from loadfile.content import ContentKind, read_content
from loadfile.exceptions import ContentError, ContentErrorReason
from loadfile.utils.logging import configure_module_logger

logger = configure_module_logger(__name__, level=logging.INFO)


@dataclass(frozen=True)
class Replacement:
    """Source text to splice over *span*."""

    span: SourceSpan
    text: str


def embed_literal(resolved: Path, kind: ContentKind, literal: str | None = None) -> str:
    """Read *resolved* now and return it as a Python literal expression.

    Raises:
        ContentError: If the file is missing, unreadable or (for text)
            not valid UTF-8.
    """
    return repr(read_content(resolved, kind, literal))


def runtime_literal(
    resolved: Path,
    kind: ContentKind,
    literal: str | None = None,
    early_check: bool = False,
) -> str:
    """Return the absolute path as a string literal for a call-time read.

    The path the user wrote is not kept in the artifact, so a call-time
    ``ContentError`` reports ``load_str('/abs/path')`` rather than the
    original relative literal. ``loadfile check`` on the source tree
    maps call sites back to their literals.
    """
    if early_check and not resolved.is_file():
        raise ContentError(
            ContentErrorReason.NOT_FOUND, resolved, kind.entry_point, literal
        )
    return repr(str(resolved))


def select(config: BuildConfig, site: CallSite, resolved: Path) -> Replacement:
    """Choose and render the code shape for *site* under *config*.

    Args:
        config: Build configuration; only ``mode`` and ``early_check``
            matter here.
        site: The call site being expanded.
        resolved: Absolute path the call site refers to.

    Returns:
        The replacement to apply to the module source.
    """
    if config.mode is LoadMode.EMBED:
        text = embed_literal(resolved, site.kind, site.literal)
        if config.verbose:
            logger.info(
                f"[cyan]embed[/cyan] {site.entry_point}({escape(repr(site.literal))}) "
                f"-> {escape(str(resolved))} ({len(text)} chars of literal)"
            )
        return Replacement(site.call, text)

    text = runtime_literal(resolved, site.kind, site.literal, config.early_check)
    if config.verbose:
        logger.info(
            f"[green]runtime[/green] {site.entry_point}({escape(repr(site.literal))}) "
            f"-> {escape(str(resolved))}"
        )
    return Replacement(site.arg, text)
