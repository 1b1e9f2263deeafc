"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; this routes those records
through Rich so server and CLI output share one look.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(debug: bool = False, console: Optional[Console] = None) -> None:
    """Configure the root logger once per process.

    Args:
        debug: Log at DEBUG instead of INFO
        console: Console to write to; stderr when omitted
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=debug,
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO if debug else logging.WARNING)
