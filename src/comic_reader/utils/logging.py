"""Logging helpers.

Every module asks for a named logger here so handlers are attached once and
the level follows ``COMIC_READER_LOG_LEVEL`` (read at first use, after the
settings manager has loaded ``.env``).
"""

from __future__ import annotations

import logging
import os
import threading

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV = "COMIC_READER_LOG_LEVEL"
ROOT_LOGGER_NAME = "comic_reader"

_LOCK = threading.Lock()
_CONFIGURED = False


def log_level_name() -> str:
    return (os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()


def _configure_root() -> None:
    global _CONFIGURED
    with _LOCK:
        if _CONFIGURED:
            return
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(getattr(logging, log_level_name(), logging.INFO))
        if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[comic_reader] %(asctime)s %(levelname)s %(name)s %(message)s"))
            root.addHandler(handler)
        root.propagate = False
        _CONFIGURED = True


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger under the ``comic_reader`` hierarchy."""
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_level(level_name: str) -> None:
    """Change the level of every reader logger at runtime."""
    _configure_root()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(getattr(logging, level_name.upper(), logging.INFO))


__all__ = ["get_logger", "log_level_name", "set_level"]
