"""Logging utilities for cachewarm runs.

Console records render as ``[LEVEL] message``. On a terminal the level name is
tinted, INFO in the light blue that marks stage transitions.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Dict

_LOGGER_NAME = "cachewarm"

_RESET = "\x1b[0m"
_LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[38;2;0;160;240m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1;31m",
}


class ConsoleFormatter(logging.Formatter):
    """Formats ``[LEVEL] message``, optionally with an ANSI-coloured level."""

    def __init__(self, *, color: bool = False) -> None:
        super().__init__("[%(levelname)s] %(message)s")
        self.color = color

    def formatMessage(self, record: logging.LogRecord) -> str:
        text = super().formatMessage(record)
        tint = _LEVEL_COLORS.get(record.levelno) if self.color else None
        if tint is None:
            return text
        label = f"[{record.levelname}]"
        return f"[{tint}{record.levelname}{_RESET}]{text[len(label):]}"


def stream_supports_color(stream: IO[str]) -> bool:
    """Return True for interactive streams when ``NO_COLOR`` is unset."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the cachewarm hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    color: bool | None = None,
) -> logging.Logger:
    """Attach console (and optional file) output to the cachewarm logger.

    ``color`` defaults to whether stderr is a terminal.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    if color is None:
        color = stream_supports_color(stream_handler.stream)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(ConsoleFormatter(color=color))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ConsoleFormatter", "configure_logging", "get_logger", "stream_supports_color"]
