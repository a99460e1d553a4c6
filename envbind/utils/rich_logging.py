"""Shared rich console and logging setup for envbind output."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_CONSOLE = Console()

LOGGER_NAME = "envbind"


def get_console() -> Console:
    """Return the shared console used for usage output and log records."""
    return _CONSOLE


def configure_logging(level: int = logging.INFO, console: Console | None = None) -> logging.Logger:
    """
    Route envbind log records through a RichHandler.

    Only the ``envbind`` logger is touched; calling this again replaces the
    handler installed by a previous call instead of adding a second one.

    Args:
        level: Level for the envbind logger
        console: Console to write to, the shared one by default

    Returns:
        The configured ``envbind`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or get_console(),
        rich_tracebacks=True,
        markup=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
