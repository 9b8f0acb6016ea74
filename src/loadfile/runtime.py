"""Runtime entry points.

``load_str`` and ``load_bytes`` read the file fresh on every call. Source
that has not been through ``loadfile build`` resolves paths against the
calling module's file; a runtime-mode build rewrites each argument to the
absolute path it resolved, so the call reads the same file either way.
Errors raised from a built tree therefore name that absolute path.
"""

from loadfile.content import read_bytes, read_text
from loadfile.resolver import caller_source_file, resolve_path


def load_str(path: str) -> str:
    """Return the UTF-8 text of *path*, read now.

    Args:
        path: File path, relative to the directory of the calling module
            or absolute.

    Raises:
        ResolutionError: If *path* is not a usable string.
        ContentError: If the file is missing, unreadable or not UTF-8.
    """
    resolved = resolve_path(path, caller_source_file())
    return read_text(resolved, "load_str", path)


def load_bytes(path: str) -> bytes:
    """Return the raw bytes of *path*, read now.

    Args:
        path: File path, relative to the directory of the calling module
            or absolute.

    Raises:
        ResolutionError: If *path* is not a usable string.
        ContentError: If the file is missing or unreadable.
    """
    resolved = resolve_path(path, caller_source_file())
    return read_bytes(resolved, "load_bytes", path)
