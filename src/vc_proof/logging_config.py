"""Logging setup for the command-line interface.

The library itself only creates module loggers; applications decide where
records go.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route ``vc_proof`` log records to stderr through rich.

    Args:
        verbose: Log pipeline steps at DEBUG instead of WARNING and above.
        console: Console to write to. A stderr console if not provided.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger("vc_proof")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
