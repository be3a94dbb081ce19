"""Logging configuration for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Route the package's log records to a rich handler on stderr.

    Args:
        verbose: Log debug messages instead of warnings and errors only.
        console: Console to write to. Defaults to a new stderr console.

    Returns:
        The package logger.
    """
    logger = logging.getLogger("bulkrename")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
