"""Exception classes raised while resolving and loading files.

Every failure is either a resolution error (the call site itself is bad) or
a content error (the file cannot be turned into the requested content).
Embed builds surface both at build time; runtime calls surface content
errors at the point of use.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ContentErrorReason(str, Enum):
    """Why a file could not be loaded."""

    NOT_FOUND = "file not found"
    UNREADABLE = "unable to read the file"
    INVALID_TEXT = "invalid utf8"


class LoadFileError(Exception):
    """Base exception for all loadfile errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResolutionError(LoadFileError):
    """Raised when a call site's path argument cannot be resolved.

    Covers non-literal arguments, wrong argument counts and source
    locations that have no directory to resolve against.
    """

    def __init__(
        self,
        message: str,
        filename: Optional[str] = None,
        lineno: Optional[int] = None,
    ) -> None:
        self.filename = filename
        self.lineno = lineno
        if filename is not None:
            location = filename if lineno is None else f"{filename}:{lineno}"
            message = f"{location}: {message}"
        super().__init__(message)


class ContentError(LoadFileError):
    """Raised when a resolved file is missing, unreadable or not valid text."""

    def __init__(
        self,
        reason: ContentErrorReason,
        path: Union[str, Path],
        entry_point: str = "load_bytes",
        literal: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.path = Path(path)
        self.entry_point = entry_point
        self.literal = literal if literal is not None else str(path)
        super().__init__(
            f"{reason.value} in {entry_point}({self.literal!r}): {self.path}"
        )


class BuildError(LoadFileError):
    """Raised when the build output cannot be produced from the source tree."""
