"""Logging utilities for depinfer commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "depinfer"
_CONSOLE_HANDLER = "depinfer.console"
_FILE_HANDLER = "depinfer.file"

_CONSOLE_FORMAT = "[depinfer] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the depinfer hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def console_level(verbose: bool) -> int:
    """Console threshold for ``--verbose``: pipeline progress, or only problems."""
    return logging.DEBUG if verbose else logging.WARNING


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the CLI's console handler and optional debug log file.

    Handlers installed by an earlier call are replaced; handlers added by
    the embedding application are left alone.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        if handler.get_name() in (_CONSOLE_HANDLER, _FILE_HANDLER):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.set_name(_CONSOLE_HANDLER)
    console.setLevel(console_level(verbose))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.set_name(_FILE_HANDLER)
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(sink)

    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(min(handler.level for handler in handlers))
    logger.propagate = False
    return logger


__all__ = ["configure_logging", "console_level", "get_logger"]
