# src/brnch/logging_setup.py

"""
Process-wide logging for brnch.

Two root handlers:
- "brnch.console": stderr, filtered; only useful before and after the curses screen
- "brnch.file": everything from DEBUG up in <log_dir>/brnch.log

While curses owns the terminal the console handler is muted with console_muted();
records still reach the log file.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

LOG_FILENAME = "brnch.log"
CONSOLE_HANDLER = "brnch.console"
FILE_HANDLER = "brnch.file"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_MUTED = logging.CRITICAL + 1


class _BrnchConsoleFilter(logging.Filter):
    """Own records pass at the handler level; anything else only from ERROR up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "brnch" or record.name.startswith("brnch."):
            return True
        return record.levelno >= logging.ERROR


def _console_handler(level: int, fmt: logging.Formatter) -> logging.Handler:
    h = logging.StreamHandler(sys.stderr)
    h.set_name(CONSOLE_HANDLER)
    h.setLevel(level)
    h.setFormatter(fmt)
    h.addFilter(_BrnchConsoleFilter())
    return h


def _file_handler(path: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    h = logging.FileHandler(str(path), encoding="utf-8")
    h.set_name(FILE_HANDLER)
    h.setLevel(level)
    h.setFormatter(fmt)
    return h


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the console and file handlers on the root logger, replacing any others.

    Call once from main(), before the first record. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    root.addHandler(_console_handler(console_level, fmt))
    root.addHandler(_file_handler(log_file, file_level, fmt))

    logging.captureWarnings(True)
    return log_file


@contextlib.contextmanager
def console_muted() -> Iterator[None]:
    """Silence the stderr handler for the duration of the block (no-op if not installed)."""
    handlers = [h for h in logging.getLogger().handlers if h.get_name() == CONSOLE_HANDLER]
    saved = [h.level for h in handlers]
    for h in handlers:
        h.setLevel(_MUTED)
    try:
        yield
    finally:
        for h, level in zip(handlers, saved):
            h.setLevel(level)
