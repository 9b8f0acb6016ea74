"""Logging configuration with Rich formatting.

Build diagnostics go to stderr through a ``RichHandler`` so that call
site decisions and failures stay readable next to the CLI's own output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_HIGHLIGHT_KEYWORDS = ["embed", "runtime", "load_str", "load_bytes"]


def level_for(verbose: bool) -> int:
    """Map a ``--verbose`` flag to a logging level."""
    return logging.DEBUG if verbose else logging.INFO


def setup_logging(
    level: int = logging.INFO,
    show_path: bool = False,
    show_time: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Install a Rich handler on the root logger.

    Args:
        level: Logging level (default: INFO).
        show_path: Show file path in log messages (default: False).
        show_time: Show timestamp in log messages (default: True).
        console: Optional Rich Console instance (default: stderr console).
    """
    if console is None:
        console = Console(stderr=True)

    handler = RichHandler(
        console=console,
        show_path=show_path,
        show_time=show_time,
        rich_tracebacks=True,
        markup=True,
        show_level=True,
        level=level,
        omit_repeated_times=False,
        keywords=_HIGHLIGHT_KEYWORDS,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


def configure_module_logger(
    module_name: str,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure a module-specific logger with its own Rich handler on stderr.

    Args:
        module_name: Module name (typically __name__).
        level: Logging level.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)
    logger.handlers.clear()

    console = Console(stderr=True, legacy_windows=False)
    handler = RichHandler(
        console=console,
        show_path=False,
        show_time=True,
        rich_tracebacks=True,
        markup=True,
        show_level=True,
        level=logging.NOTSET,  # logger level does the filtering
        omit_repeated_times=False,
        keywords=_HIGHLIGHT_KEYWORDS,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def set_verbosity(verbose: bool) -> None:
    """Apply a ``--verbose`` flag to every ``loadfile`` logger."""
    level = level_for(verbose)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith("loadfile") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
