"""Logging configuration for the gitflow CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAMESPACES = ("gitflow_core", "gitflow_cli")


def setup_logging(verbose: int = 0) -> None:
    """Attach a stderr RichHandler to the gitflow loggers.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
    """
    if verbose == 0:
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO

    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
