"""Console logging setup for the command line interface."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False, *, console: Console | None = None) -> None:
    """Install a Rich handler on the root logger.

    Log records go to stderr so they never mix with results written to
    stdout.

    Args:
        verbose: Log INFO and above when True, WARNING and above otherwise
        console: Console to render to (defaults to a stderr console)
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        handlers=[handler],
        force=True,
    )
