# MIT License (see LICENSE)
"""
Logging setup for the `scene_forces` namespace.

Library modules only call `logging.getLogger(__name__)`; applications,
examples and benchmarks call setup_logging() once to attach handlers.
"""
from __future__ import annotations
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def parse_level(level_str: str | None, default: int = logging.INFO) -> int:
    """Map a level name such as "debug" or "WARN" to a logging constant."""
    if not level_str:
        return default
    return _LEVELS.get(level_str.strip().upper(), default)


def setup_logging(level: int | None = None, log_file: str | None = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level; when None the LOG_LEVEL environment variable
               is consulted, falling back to INFO.
        log_file: Optional path for an additional file handler.

    Returns:
        The configured `scene_forces` logger.
    """
    chosen = level if level is not None else parse_level(os.environ.get("LOG_LEVEL"))

    logger = logging.getLogger("scene_forces")
    logger.setLevel(chosen)

    # re-running setup must not duplicate output
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(chosen)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(chosen)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
