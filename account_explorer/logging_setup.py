"""
Package logging.

Modules log through ``get_logger(__name__)``.  The streamlit page calls
``configure_logging(settings.log_level)`` at the top of every rerun: the
console handler is attached on the first call, later calls only move the
level.
"""

import logging
from typing import Union

PACKAGE = "account_explorer"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_package_logger = logging.getLogger(PACKAGE)
# Silent until the app configures it
_package_logger.addHandler(logging.NullHandler())


def level_number(level: Union[int, str]) -> int:
    """``logging.ERROR``, ``"debug"`` or ``"15"``; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name.isdigit():
        return int(name)
    number = logging.getLevelName(name)
    return number if isinstance(number, int) else logging.INFO


def _console_handler() -> Union[logging.StreamHandler, None]:
    for handler in _package_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            return handler
    return None


def configure_logging(level: Union[int, str] = "INFO") -> None:
    if _console_handler() is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _package_logger.addHandler(handler)
        _package_logger.propagate = False
    _package_logger.setLevel(level_number(level))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
