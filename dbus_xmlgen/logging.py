"""Logging for dbus-xmlgen: one logger tree, verbosity from the -v count."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "dbus_xmlgen"

# -v count -> level; anything past the last entry stays at DEBUG
_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``dbus_xmlgen`` (``dbus_xmlgen.<name>``)."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def level_for(verbosity: int) -> int:
    return _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> logging.Logger:
    """Route the package's records to stderr and, optionally, a file.

    The console shows warnings by default, INFO with one ``-v`` and DEBUG
    with two. The file, when given, always receives DEBUG records.
    """
    console_level = level_for(verbosity)
    root = logging.getLogger(_LOGGER_NAME)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("[dbus-xmlgen] %(levelname)s %(message)s"))
    root.addHandler(console)

    root_level = console_level
    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(sink)
        root_level = logging.DEBUG
    root.setLevel(root_level)
    return root


@contextmanager
def timed(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log the wall time of the enclosed block at DEBUG."""
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s took %.2f ms", label, (time.perf_counter() - start) * 1000)


__all__ = ["configure_logging", "get_logger", "level_for", "timed"]
