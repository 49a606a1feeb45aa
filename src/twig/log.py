"""Logging configuration."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route log records through rich. Debug output only when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console or Console(stderr=True),
                show_time=True,
                show_level=True,
                show_path=verbose,
            )
        ],
        force=True,
    )
    # GitPython is chatty at debug level
    logging.getLogger("git").setLevel(logging.WARNING)
