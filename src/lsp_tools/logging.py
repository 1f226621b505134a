"""Logging setup for lsp-tools.

The ``lsp_tools`` logger writes to stderr (stdout is reserved for tool output)
and optionally to a file. It does not propagate and avoids duplicate handlers
across repeated initializations.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from lsp_tools.config import LogLevel

LOGGER_NAME = "lsp_tools"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    log_level: LogLevel | str = LogLevel.INFO,
    *,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the package logger.

    Subsequent calls update the level but never add a second handler of the
    same kind.
    """

    logger = logging.getLogger(LOGGER_NAME)
    level_value = _to_logging_level(log_level)
    logger.setLevel(level_value)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)
    if not any(getattr(h, "_lsp_tools_stream", False) for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.__stderr__)
        stream_handler._lsp_tools_stream = True  # type: ignore[attr-defined]
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if log_file is not None and not _has_file_handler(logger, log_file):
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for handler in owned_handlers(logger):
        handler.setLevel(level_value)
    return logger


def owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    """Return the handlers installed by ``configure_logging``."""

    return [
        h for h in logger.handlers if getattr(h, "_lsp_tools_stream", False) or isinstance(h, logging.FileHandler)
    ]


def _has_file_handler(logger: logging.Logger, log_file: Path) -> bool:
    target = os.path.abspath(log_file)
    return any(isinstance(h, logging.FileHandler) and h.baseFilename == target for h in logger.handlers)


def _to_logging_level(value: LogLevel | str) -> int:
    mapping = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }
    if isinstance(value, LogLevel):
        return mapping[value]
    if isinstance(value, str):
        try:
            return mapping[LogLevel(value)]
        except ValueError:
            return logging.WARNING
    return logging.WARNING


__all__ = [
    "LOGGER_NAME",
    "configure_logging",
    "owned_handlers",
    "_to_logging_level",
]
