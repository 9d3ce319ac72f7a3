"""
Logger helper shared by the hdkeys modules. Messages never carry key material.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from hdkeys.core.formats import LOGGING

__all__ = ["get_logger"]


def _resolve_level(log_level: str | int) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return level


def _attach(logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter):
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: str, log_level: str | int = LOGGING.DEFAULT_LEVEL, log_file: Optional[Path] = None,
               format_string: Optional[str] = None) -> logging.Logger:
    """
    Returns the named logger, configured on first use with a stdout handler and an optional file handler.

    Later calls for the same name return the logger as first configured; log_level, log_file and format_string
    are then ignored.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(_resolve_level(log_level))
    formatter = logging.Formatter(format_string or LOGGING.FORMAT)

    _attach(logger, logging.StreamHandler(stream=sys.stdout), formatter)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file), formatter)

    return logger
