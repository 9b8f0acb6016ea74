"""Whole-file readers used by both load modes.

Each read opens the file, reads it to the end and closes it before
returning or raising. OS and decoding failures are reported as
``ContentError`` with the original exception chained.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from loadfile.exceptions import ContentError, ContentErrorReason

TEXT_ENCODING = "utf-8"


class ContentKind(str, Enum):
    """What a call site asks for: decoded text or raw bytes."""

    TEXT = "text"
    BYTES = "bytes"

    @property
    def entry_point(self) -> str:
        return "load_str" if self is ContentKind.TEXT else "load_bytes"


def read_bytes(
    path: Path,
    entry_point: str = "load_bytes",
    literal: Optional[str] = None,
) -> bytes:
    """Read *path* fully and return its bytes.

    Raises:
        ContentError: If the file does not exist or cannot be read.
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError as e:
        raise ContentError(
            ContentErrorReason.NOT_FOUND, path, entry_point, literal
        ) from e
    except OSError as e:
        raise ContentError(
            ContentErrorReason.UNREADABLE, path, entry_point, literal
        ) from e


def decode_text(
    data: bytes,
    path: Path,
    entry_point: str = "load_str",
    literal: Optional[str] = None,
) -> str:
    """Decode *data* strictly as UTF-8.

    Line endings are kept as stored on disk.
    """
    try:
        return data.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        raise ContentError(
            ContentErrorReason.INVALID_TEXT, path, entry_point, literal
        ) from e


def read_text(
    path: Path,
    entry_point: str = "load_str",
    literal: Optional[str] = None,
) -> str:
    """Read *path* fully and return it decoded as UTF-8."""
    return decode_text(read_bytes(path, entry_point, literal), path, entry_point, literal)


def read_content(
    path: Path,
    kind: ContentKind,
    literal: Optional[str] = None,
) -> "str | bytes":
    """Read *path* as the content *kind* asks for."""
    if kind is ContentKind.TEXT:
        return read_text(path, kind.entry_point, literal)
    return read_bytes(path, kind.entry_point, literal)
