"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from buildwatch.cli.common.output import console


def setup_logging(verbose: bool) -> None:
    """Route `buildwatch` loggers through Rich; DEBUG when verbose, else WARNING."""
    logger = logging.getLogger("buildwatch")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(
            RichHandler(console=console, show_path=False, rich_tracebacks=True)
        )
    logger.propagate = False
