"""Rich-formatted logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(level: str | int = logging.WARNING, rich_tracebacks: bool = True) -> None:
    """
    Route log records through a Rich console handler.

    Args:
        level: Logging level name or number
        rich_tracebacks: Render exceptions with Rich tracebacks
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    handler.setLevel(level)
    root_logger.addHandler(handler)
