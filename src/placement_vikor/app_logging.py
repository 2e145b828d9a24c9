"""
Console logging for the placement engine.

Engine modules log through ``logging.getLogger(__name__)`` and stay silent
until an application (the CLI, a notebook, a web adapter) calls
``setup_logging`` once.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


_THEME = Theme({
    "logging.level.debug": "dim",
    "logging.level.info": "cyan",
    "logging.level.warning": "bold yellow",
    "logging.level.error": "bold red",
    "log.time": "dim",
})

# Logs go to stderr so `run -j` keeps stdout as pure JSON
_stderr_console = Console(theme=_THEME, stderr=True)

ROOT_LOGGER_NAME = 'placement_vikor'
DEFAULT_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def setup_logging(
    level: str = 'INFO',
    log_format: Optional[str] = None,
    dev_mode: bool = True,
    show_path: bool = False,
    show_time: bool = True,
) -> logging.Logger:
    """
    Attach a console handler to the ``placement_vikor`` logger.

    Calling it again replaces the previous handler, so the CLI can switch
    to DEBUG for ``--verbose`` without duplicating output.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_format: Format for the plain handler; ``DEFAULT_FORMAT`` if None
        dev_mode: Rich console output when True, plain stderr lines otherwise
        show_path: Show the emitting module path (rich only)
        show_time: Show timestamps (rich only)

    Returns:
        The package logger.
    """
    level_value = getattr(logging, level.upper())

    if dev_mode:
        handler: logging.Handler = RichHandler(
            console=_stderr_console,
            show_time=show_time,
            show_path=show_path,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(log_format or DEFAULT_FORMAT))
    handler.setLevel(level_value)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level_value)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger


logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())
