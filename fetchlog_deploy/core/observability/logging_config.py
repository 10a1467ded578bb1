"""
Logging configuration for the fetchlog-deploy CLI.

main.py calls ``resolve_level`` and ``configure_from_environment`` once,
before any command runs.  Modules log through
``logging.getLogger(__name__)`` and never add handlers themselves.

Level precedence:
    --debug / --verbose / --quiet  >  FETCHLOG_LOG_LEVEL  >  WARNING

FETCHLOG_LOG_FILE adds a file handler; FETCHLOG_LOG_FILE_LEVEL sets
its level independently of the console.

Logging carries diagnostics (commands run, exit codes, skipped
files).  Operator progress lines are printed by console.py.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV = "FETCHLOG_LOG_LEVEL"
LOG_FILE_ENV = "FETCHLOG_LOG_FILE"
LOG_FILE_LEVEL_ENV = "FETCHLOG_LOG_FILE_LEVEL"

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ConsoleTagFormatter(logging.Formatter):
    """Prefix each record with the tag console.py uses for that severity.

    At WARNING and above the console shows only ``[WARN]  message``,
    so log lines and progress lines read the same.  At INFO and DEBUG
    the logger name (and line number) are added for tracing.
    """

    _TAGS = {
        logging.DEBUG: "[DEBUG] ",
        logging.INFO: "[INFO]  ",
        logging.WARNING: "[WARN]  ",
        logging.ERROR: "[ERROR] ",
        logging.CRITICAL: "[ERROR] ",
    }

    def __init__(self, threshold: int):
        if threshold <= logging.DEBUG:
            fmt = "%(name)s:%(lineno)d  %(message)s"
        elif threshold <= logging.INFO:
            fmt = "%(name)s  %(message)s"
        else:
            fmt = "%(message)s"
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        return self._TAGS.get(record.levelno, "") + super().format(record)


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return level_number((environ or {}).get(LOG_LEVEL_ENV))


def level_number(name: str | int | None, default: int = logging.WARNING) -> int:
    """``"info"`` → ``logging.INFO``; unknown or empty names give ``default``."""
    if isinstance(name, int):
        return name
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def setup_logging(
    level: str | int = logging.WARNING,
    log_file: str | None = None,
    log_file_level: str | int | None = None,
) -> None:
    """Replace the root logger's handlers with ours.

    Args:
        level: Console level, as a name or number.
        log_file: Optional file that receives records in full detail.
        log_file_level: Level for ``log_file``; defaults to ``level``.
    """
    console_level = level_number(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]

    if log_file:
        file_level = level_number(log_file_level, default=console_level)
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    # a broken log stream must not abort a deployment
    logging.raiseExceptions = False


def configure_from_environment(level: int, environ: Mapping[str, str]) -> None:
    """``setup_logging`` with the file settings taken from ``environ``."""
    setup_logging(
        level,
        log_file=environ.get(LOG_FILE_ENV) or None,
        log_file_level=environ.get(LOG_FILE_LEVEL_ENV) or None,
    )


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ConsoleTagFormatter(level))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler
