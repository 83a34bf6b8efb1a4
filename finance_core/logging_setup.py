"""Logging helpers for the ``finance_core`` package.

The console menu, the desktop app and the API factory call
:func:`configure_logging` with ``Settings.log_level``. Library modules only
use :func:`get_logger`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union

ROOT_LOGGER = "finance_core"
CONSOLE_HANDLER = "finance_core.console"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """Turn ``"debug"``, ``"10"`` or ``logging.DEBUG`` into a numeric level."""
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == CONSOLE_HANDLER:
            return handler
    return None


def configure_logging(level: Union[int, str] = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Send ``finance_core`` records to ``stream`` (stderr by default).

    A second call updates the level, and the stream when one is given,
    of the handler installed by the first call.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    handler = _console_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(CONSOLE_HANDLER)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)
    logger.setLevel(resolve_level(level))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    # Keeps library use silent until an entry point configures output.
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
