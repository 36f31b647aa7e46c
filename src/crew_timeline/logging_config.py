"""Logging setup for the CLI and embedding applications."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(log_level: str = "WARNING", console: Optional[Console] = None) -> None:
    """Configure the crew_timeline logger hierarchy.

    Library modules only call ``logging.getLogger(__name__)``; handlers are
    attached here so an embedding application can skip this and use its own.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        console: Optional rich console to write to (default: stderr)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))

    logger = logging.getLogger("crew_timeline")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(log_level.upper())
    logger.propagate = False
