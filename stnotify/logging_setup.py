"""Logging configuration for the watcher process.

All logs go to stderr with Rich formatting. Modules log through
``logging.getLogger(__name__)``.
"""

import logging
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(
    verbosity: Literal["debug", "info", "warning", "error"] = "info",
) -> logging.Logger:
    """Configure the root logger with a Rich handler on stderr.

    Args:
        verbosity: Console verbosity level (debug, info, warning, error)

    Returns:
        Configured root logger instance
    """
    log_level = LEVELS.get(verbosity, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Avoid duplicate handlers on re-initialization
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(log_level)
    root_logger.addHandler(rich_handler)

    # requests/urllib3 log every connection at debug level
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))

    return root_logger
