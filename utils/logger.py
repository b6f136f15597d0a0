"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.

The root logger carries exactly one handler owned by this module, found by
name. `configure_logging` swaps it out, so the bootstrap (or a test) can call
it again to change the level or the stream without stacking handlers.
"""

import logging
import sys
from typing import Optional, TextIO, Union

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_HANDLER_NAME = "greenlight"


def _own_handler(root: logging.Logger) -> Optional[logging.Handler]:
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return handler
    return None


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric


def configure_logging(
    level: Union[str, int] = "INFO", stream: Optional[TextIO] = None
) -> logging.Handler:
    """
    Install the stdout handler on the root logger and set its level.

    Args:
        level: A level name such as ``"DEBUG"``, or a numeric level.
        stream: Where records go. Defaults to stdout.

    Returns:
        The installed handler.

    Raises:
        ValueError: If the level name is unknown. Nothing is changed then.
    """
    numeric = _resolve_level(level)
    root = logging.getLogger()

    previous = _own_handler(root)
    if previous is not None:
        root.removeHandler(previous)
        previous.close()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(numeric)
    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance, installing the default handler on first use.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    if _own_handler(logging.getLogger()) is None:
        configure_logging()
    return logging.getLogger(name)
