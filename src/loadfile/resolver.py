"""Path resolution shared by the build pass and the runtime entry points.

A path literal is resolved against the directory of the source file that
contains the call site, the same rule file-embedding primitives use. The
process working directory only matters when the source file name itself
is relative.
"""

import os
import sys
from pathlib import Path
from typing import Union

from loadfile.exceptions import ResolutionError


def _is_pseudo_file(source_file: str) -> bool:
    return not source_file or (source_file.startswith("<") and source_file.endswith(">"))


def resolve_path(literal: str, source_file: Union[str, "os.PathLike[str]"]) -> Path:
    """Resolve *literal* relative to the directory containing *source_file*.

    Args:
        literal: Path written at the call site. Absolute paths are
            returned unchanged.
        source_file: Filename of the module containing the call site.

    Returns:
        Absolute path of the file the call site refers to.

    Raises:
        ResolutionError: If *literal* is not a non-empty string, or if a
            relative literal is used from a source location without a
            directory (``<stdin>``, ``<string>``, ...).
    """
    if not isinstance(literal, str):
        raise ResolutionError(
            f"path must be a string literal, got {type(literal).__name__}"
        )
    if not literal:
        raise ResolutionError("path must not be empty")

    candidate = Path(literal)
    if candidate.is_absolute():
        return candidate

    source = os.fspath(source_file)
    if _is_pseudo_file(source):
        raise ResolutionError(f"invalid source file path {source!r}")

    return Path(os.path.abspath(source)).parent / candidate


def caller_source_file(depth: int = 1) -> str:
    """Return the filename of the frame *depth* levels above the caller.

    ``depth=1`` is the caller of the function that calls this one.
    """
    frame = sys._getframe(depth + 1)
    return frame.f_code.co_filename
