"""LitFetch logging utilities.

All modules log through the single package logger `log`. Console lines look
like ``mm-dd HH:MM:SS [INFO] message`` and go to stderr so stdout stays free
for rendered output. File logs add the emitting module and line.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

LOG_FORMAT: Final = "%(asctime)s [%(levelabbr)s] %(message)s"
FILE_LOG_FORMAT: Final = "%(asctime)s [%(levelabbr)s] %(module)s:%(lineno)d %(message)s"
DATE_FORMAT: Final = "%m-%d %H:%M:%S"


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("LitFetch")


def log_file_path(log_dir: str, action: str, *, now: datetime | None = None) -> Path:
    """Return ``<log_dir>/<action>/<action>_<mmddHHMMSS>.log``."""
    stamp = (now or datetime.now()).strftime("%m%d%H%M%S")
    return Path(log_dir or "log") / action / f"{action}_{stamp}.log"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(_AbbrevLevelFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    # the file keeps request-level detail regardless of the console level
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_AbbrevLevelFormatter(fmt=FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """(Re)configure the LitFetch logger; previous handlers are closed.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ...). Unknown names
            fall back to INFO.
        action: CLI action name; names the log file.
        log_to_file: Mirror logs to ``log_file_path(log_dir, action)``.
        log_dir: Base directory for log files.
    """
    console_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    handlers = [_console_handler(console_level)]
    with_file = bool(log_to_file and action)
    if with_file:
        handlers.append(_file_handler(log_file_path(log_dir, action)))

    for old in log.handlers:
        old.close()
    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if with_file else console_level)
    log.propagate = False
