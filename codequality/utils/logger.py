"""
Logging setup for the code model builder.

Library modules log through ``logging.getLogger(__name__)`` and never
print. Interactive callers install a Rich console handler once with
:func:`setup_logging`.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from ..config import get_config


PACKAGE_LOGGER = "codequality"


def setup_logging(level: Optional[str] = None, console: Optional[Console] = None) -> logging.Logger:
    """
    Attach a RichHandler to the package logger.

    Calling this more than once replaces the previous Rich handler
    instead of stacking a second one.

    Args:
        level: Log level name (DEBUG, INFO, ...); defaults to the
               configured CODEQUALITY_LOG_LEVEL
        console: Rich console to write to (default: stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel((level or get_config().log_level).upper())

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
