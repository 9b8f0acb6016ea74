"""Locate ``load_str``/``load_bytes`` call sites in Python source.

The scanner follows the module's imports so aliased forms are found too::

    from loadfile import load_str as read_template
    import loadfile as lf          # lf.load_bytes("logo.png")
    from loadfile import runtime   # runtime.load_str("query.sql")

Name shadowing inside functions is not tracked: any call through an
imported name is treated as a call site.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Iterator, cast

from loadfile.content import ContentKind
from loadfile.exceptions import BuildError, ResolutionError

ENTRY_POINTS: dict[str, ContentKind] = {
    "load_str": ContentKind.TEXT,
    "load_bytes": ContentKind.BYTES,
}

_PROVIDER_MODULES = ("loadfile", "loadfile.runtime")


@dataclass(frozen=True)
class SourceSpan:
    """Location of a node, using ``ast`` conventions.

    Lines are 1-based; columns are UTF-8 byte offsets into the line.
    """

    lineno: int
    col_offset: int
    end_lineno: int
    end_col_offset: int

    @classmethod
    def of(cls, node: ast.expr) -> SourceSpan:
        # end positions are always set on trees produced by ast.parse
        return cls(
            node.lineno,
            node.col_offset,
            cast(int, node.end_lineno),
            cast(int, node.end_col_offset),
        )


@dataclass(frozen=True)
class CallSite:
    """One invocation of an entry point with a literal path.

    ``in_fstring`` is set when the call is part of an f-string
    replacement field, where older interpreters reject backslashes and
    reused quotes in the emitted literal.
    """

    entry_point: str
    kind: ContentKind
    literal: str
    call: SourceSpan
    arg: SourceSpan
    in_fstring: bool = False

    @property
    def lineno(self) -> int:
        return self.call.lineno


def _dotted_name(node: ast.expr) -> str | None:
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    return ".".join(reversed(parts))


class _ImportTable:
    """Names under which the entry points are reachable in one module."""

    def __init__(self) -> None:
        self.functions: dict[str, str] = {}
        self.modules: dict[str, str] = {}

    def collect(self, tree: ast.AST) -> None:
        for node in ast.walk(tree):
            if isinstance(node, ast.ImportFrom):
                self._add_import_from(node)
            elif isinstance(node, ast.Import):
                self._add_import(node)

    def _add_import_from(self, node: ast.ImportFrom) -> None:
        if node.level or node.module not in _PROVIDER_MODULES:
            return
        for alias in node.names:
            bound = alias.asname or alias.name
            if alias.name in ENTRY_POINTS:
                self.functions[bound] = alias.name
            elif node.module == "loadfile" and alias.name == "runtime":
                self.modules[bound] = "loadfile.runtime"

    def _add_import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.name not in _PROVIDER_MODULES:
                continue
            if alias.asname:
                self.modules[alias.asname] = alias.name
                continue
            # "import loadfile.runtime" binds "loadfile" as well
            self.modules["loadfile"] = "loadfile"
            self.modules[alias.name] = alias.name

    def provider_for(self, prefix: str) -> str | None:
        """Module that *prefix* refers to, if it is one of ours."""
        if prefix in self.modules:
            return self.modules[prefix]
        # "loadfile" imports its runtime submodule, so "lf.runtime" works
        # whenever "lf" is bound to the package
        parent, _, child = prefix.rpartition(".")
        if child == "runtime" and self.modules.get(parent) == "loadfile":
            return "loadfile.runtime"
        return None

    def entry_point_for(self, func: ast.expr) -> str | None:
        if isinstance(func, ast.Name):
            return self.functions.get(func.id)
        dotted = _dotted_name(func)
        if dotted is None or "." not in dotted:
            return None
        prefix, _, attr = dotted.rpartition(".")
        if attr in ENTRY_POINTS and self.provider_for(prefix) is not None:
            return attr
        return None

    def __bool__(self) -> bool:
        return bool(self.functions or self.modules)


def _literal_argument(node: ast.Call, entry_point: str, filename: str) -> ast.Constant:
    if node.keywords or len(node.args) != 1 or isinstance(node.args[0], ast.Starred):
        raise ResolutionError(
            f"{entry_point}() takes exactly one positional path argument",
            filename,
            node.lineno,
        )
    arg = node.args[0]
    if not isinstance(arg, ast.Constant) or not isinstance(arg.value, str):
        raise ResolutionError(
            f"{entry_point}() path must be a string literal, "
            f"got {ast.unparse(arg)!r}",
            filename,
            node.lineno,
        )
    return arg


def iter_callsites(tree: ast.AST, filename: str) -> Iterator[CallSite]:
    """Yield call sites of an already parsed module in source order."""
    imports = _ImportTable()
    imports.collect(tree)
    if not imports:
        return

    calls = [node for node in ast.walk(tree) if isinstance(node, ast.Call)]
    calls.sort(key=lambda n: (n.lineno, n.col_offset))
    formatted = {
        id(node)
        for joined in ast.walk(tree)
        if isinstance(joined, ast.JoinedStr)
        for node in ast.walk(joined)
        if isinstance(node, ast.Call)
    }
    for node in calls:
        entry_point = imports.entry_point_for(node.func)
        if entry_point is None:
            continue
        arg = _literal_argument(node, entry_point, filename)
        yield CallSite(
            entry_point=entry_point,
            kind=ENTRY_POINTS[entry_point],
            literal=arg.value,
            call=SourceSpan.of(node),
            arg=SourceSpan.of(arg),
            in_fstring=id(node) in formatted,
        )


def scan_callsites(source: str, filename: str) -> list[CallSite]:
    """Parse *source* and return its call sites in source order.

    Args:
        source: Module source text.
        filename: Name used in diagnostics.

    Raises:
        BuildError: If *source* is not valid Python.
        ResolutionError: If a call site's argument is not a single
            string literal.
    """
    if not any(name in source for name in ENTRY_POINTS):
        return []
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise BuildError(f"cannot parse {filename}: {e.msg} (line {e.lineno})") from e
    return list(iter_callsites(tree, filename))
