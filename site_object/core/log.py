# @file purpose: Logging setup shared by the CLI and test sessions.

import logging

from rich.console import Console
from rich.logging import RichHandler

from .settings import settings


def setup_logging(level: str | None = None, *, console: Console | None = None) -> None:
    """
    Route site_object's module loggers through rich. The library itself only
    logs at DEBUG (navigation, page resolution, delegation).
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )
