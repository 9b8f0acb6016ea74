"""loadfile - embed a file at build time or read it fresh at runtime.

Call sites look the same in both modes::

    from loadfile import load_bytes, load_str

    TEMPLATE = load_str("templates/page.html")
    LOGO = load_bytes("static/logo.png")

Paths are relative to the module containing the call. Run as-is, every
call reads the file from disk. ``loadfile build src/ dist/`` writes a copy
of the tree in which each call is either replaced by the file's content
(``--mode embed``, the default) or pinned to the resolved absolute path
(``--mode runtime``).
"""

from loadfile._version import __version__
from loadfile.build import BuildConfig, LoadMode, build_tree, expand_source, load_config
from loadfile.content import ContentKind
from loadfile.exceptions import (
    BuildError,
    ContentError,
    ContentErrorReason,
    LoadFileError,
    ResolutionError,
)
from loadfile.resolver import resolve_path
from loadfile.runtime import load_bytes, load_str

__all__ = [
    "__version__",
    "BuildConfig",
    "BuildError",
    "ContentError",
    "ContentErrorReason",
    "ContentKind",
    "LoadFileError",
    "LoadMode",
    "ResolutionError",
    "build_tree",
    "expand_source",
    "load_bytes",
    "load_config",
    "load_str",
    "resolve_path",
]
