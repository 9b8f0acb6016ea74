"""Rewrite the call sites of a single module.

Replacements are spliced into the original text by byte offset, so
everything outside the call sites (comments, formatting) is kept as is.

Call sites inside f-string replacement fields are the exception: their
literal is bound to a module-level name on one line inserted before the
first statement after the docstring and ``__future__`` imports, and the
call site refers to that name instead. Later lines shift down by one.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path

from loadfile.build.callsites import CallSite, SourceSpan, scan_callsites
from loadfile.build.config import BuildConfig
from loadfile.build.selector import Replacement, select
from loadfile.exceptions import BuildError
from loadfile.resolver import resolve_path

SOURCE_ENCODING = "utf-8"
HOISTED_NAME = "_LOADFILE_{}"


@dataclass
class ExpandedModule:
    """A module after expansion."""

    filename: str
    original: str
    source: str
    sites: list[tuple[CallSite, Path]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.sites)


def _line_offsets(data: bytes) -> list[int]:
    offsets = [0]
    for line in data.splitlines(keepends=True):
        offsets.append(offsets[-1] + len(line))
    return offsets


def _byte_range(span: SourceSpan, offsets: list[int]) -> tuple[int, int]:
    start = offsets[span.lineno - 1] + span.col_offset
    end = offsets[span.end_lineno - 1] + span.end_col_offset
    return start, end


def _hoist_line(tree: ast.Module, filename: str) -> int:
    """Line before which hoisted constants are inserted."""
    body = tree.body
    index = 0
    if (
        body
        and isinstance(body[0], ast.Expr)
        and isinstance(body[0].value, ast.Constant)
        and isinstance(body[0].value.value, str)
    ):
        index = 1
    while (
        index < len(body)
        and isinstance(body[index], ast.ImportFrom)
        and body[index].module == "__future__"  # type: ignore[attr-defined]
    ):
        index += 1
    if index == len(body):
        raise BuildError(f"{filename}: no statement to place embedded constants before")

    stmt = body[index]
    decorators = getattr(stmt, "decorator_list", [])
    line = min([stmt.lineno] + [d.lineno for d in decorators])
    if index and (body[index - 1].end_lineno or 0) >= line:
        raise BuildError(
            f"{filename}:{line}: embedded constants need the first statement "
            "after the module header on its own line"
        )
    return line


def apply_replacements(source: str, replacements: list[Replacement]) -> str:
    """Splice *replacements* into *source*.

    Spans must not overlap. They are applied last to first so earlier
    offsets stay valid.
    """
    data = source.encode(SOURCE_ENCODING)
    offsets = _line_offsets(data)
    # on a shared start the wider span goes first, so insertions land before it
    ranges = sorted(
        ((*_byte_range(r.span, offsets), r.text) for r in replacements),
        key=lambda item: (item[0], item[1]),
        reverse=True,
    )
    for start, end, text in ranges:
        data = data[:start] + text.encode(SOURCE_ENCODING) + data[end:]
    return data.decode(SOURCE_ENCODING)


def expand_source(source: str, filename: str, config: BuildConfig) -> ExpandedModule:
    """Expand every call site in *source*.

    Args:
        source: Module source text.
        filename: Path of the module on disk; relative literals resolve
            against its directory.
        config: Build configuration selecting the load mode.

    Returns:
        ExpandedModule with the rewritten source. ``source`` is returned
        unchanged when the module has no call sites.

    Raises:
        ResolutionError: If a call site's argument cannot be resolved.
        ContentError: In embed mode, if a referenced file cannot be loaded.
    """
    module = ExpandedModule(filename=filename, original=source, source=source)
    replacements: list[Replacement] = []
    hoisted: list[str] = []
    for site in scan_callsites(source, filename):
        resolved = resolve_path(site.literal, filename)
        replacement = select(config, site, resolved)
        if site.in_fstring:
            name = HOISTED_NAME.format(len(hoisted))
            hoisted.append(f"{name} = {replacement.text}")
            replacement = Replacement(replacement.span, name)
        replacements.append(replacement)
        module.sites.append((site, resolved))

    if not replacements:
        return module

    if hoisted:
        line = _hoist_line(ast.parse(source, filename=filename), filename)
        newline = "\r\n" if "\r\n" in source else "\n"
        replacements.append(
            Replacement(SourceSpan(line, 0, line, 0), "; ".join(hoisted) + newline)
        )

    module.source = apply_replacements(source, replacements)
    try:
        compile(module.source, filename, "exec", dont_inherit=True)
    except SyntaxError as e:
        raise BuildError(
            f"expansion of {filename} produced invalid Python: {e.msg}"
        ) from e
    return module


def expand_file(path: Path, config: BuildConfig) -> ExpandedModule:
    """Read the module at *path* and expand it.

    Relative literals resolve against ``path``'s directory, wherever the
    expanded source is later written.
    """
    path = Path(path).absolute()
    # bytes, not read_text(), so line endings survive untranslated
    try:
        source = path.read_bytes().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise BuildError(f"{path} is not UTF-8 encoded Python source") from e
    return expand_source(source, str(path), config)
