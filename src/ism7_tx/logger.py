#!/usr/bin/env python3
"""ISM7 TX - logging, and the telegram log.

The telegram log is a dedicated logger (TLG_LOGGER) that does not propagate: it gets
its own file (optionally rotated) and, optionally, coloured console output.
"""

from __future__ import annotations

import logging
import shutil
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Final, TextIO

import colorlog

from .const import DEV_MODE
from .version import VERSION

_LOGGER = logging.getLogger(__name__)
if DEV_MODE:
    _LOGGER.setLevel(logging.DEBUG)


TLG_LOGGER: Final = logging.getLogger("ism7_tx.telegrams")

DEFAULT_FMT: Final = "%(asctime)s.%(msecs)03d %(message)s"
DEFAULT_DATEFMT: Final = "%H:%M:%S"

CONSOLE_COLS: Final = shutil.get_terminal_size(fallback=(2000, 24)).columns - 1
CONSOLE_FMT: Final = f"%(asctime)s.%(msecs)03d %(message).{CONSOLE_COLS - 13}s"

TLG_LOG_FMT: Final = "%(asctime)s.%(msecs)03d %(message)s"
TLG_LOG_DATEFMT: Final = "%Y-%m-%dT%H:%M:%S"

DEFAULT_ROTATE_BACKUPS: Final = 2  # when rotating by size, but no count is given

LOG_COLOURS: Final = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}


class LevelFilter(logging.Filter):
    """Pass only the records with a level in the range: min_level <= level < max_level."""

    def __init__(self, min_level: int = logging.NOTSET, max_level: int | None = None):
        super().__init__()
        self.min_level = min_level
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno < self.min_level:
            return False
        return self.max_level is None or record.levelno < self.max_level


def console_formatter(colored: bool = True) -> logging.Formatter:
    """Return a formatter for console output (coloured by level, if wanted)."""
    if colored:
        return colorlog.ColoredFormatter(
            fmt=f"%(log_color)s{CONSOLE_FMT}",
            datefmt=DEFAULT_DATEFMT,
            reset=True,
            log_colors=LOG_COLOURS,
        )
    return logging.Formatter(fmt=CONSOLE_FMT, datefmt=DEFAULT_DATEFMT)


def _console_handler(
    stream: TextIO, min_level: int, max_level: int | None = None
) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setFormatter(console_formatter(colored=stream.isatty()))
    handler.addFilter(LevelFilter(min_level, max_level))
    return handler


def _file_handler(
    file_name: str, rotate_backups: int = 0, rotate_bytes: int | None = None
) -> logging.Handler:
    """Return a handler for the telegram log file.

    The file is rotated by size if rotate_bytes is set, otherwise at midnight if
    rotate_backups is set. Otherwise, it is not rotated at all.
    """

    handler: logging.Handler
    if rotate_bytes:
        handler = RotatingFileHandler(
            file_name,
            maxBytes=rotate_bytes,
            backupCount=rotate_backups or DEFAULT_ROTATE_BACKUPS,
        )
    elif rotate_backups:
        handler = TimedRotatingFileHandler(
            file_name, when="midnight", backupCount=rotate_backups
        )
    else:
        handler = logging.FileHandler(file_name)

    handler.setFormatter(logging.Formatter(fmt=TLG_LOG_FMT, datefmt=TLG_LOG_DATEFMT))
    handler.addFilter(LevelFilter(logging.INFO, logging.ERROR))  # INFO & WARNING
    return handler


def set_telegram_logging(
    logger: logging.Logger = TLG_LOGGER,
    cc_console: bool = False,
    file_name: str | None = None,
    rotate_backups: int = 0,
    rotate_bytes: int | None = None,
) -> None:
    """Configure the telegram log, replacing any existing handlers.

    If there is neither a file nor console output, the telegram log is silenced.
    """

    logger.propagate = False

    for handler in list(logger.handlers):  # may be called more than once
        logger.removeHandler(handler)
        handler.close()

    if not file_name and not cc_console:
        logger.setLevel(logging.CRITICAL)
        return

    logger.setLevel(logging.DEBUG)

    if file_name:
        logger.addHandler(_file_handler(file_name, rotate_backups, rotate_bytes))

    if cc_console:
        logger.addHandler(_console_handler(sys.stdout, logging.DEBUG, logging.WARNING))
        logger.addHandler(_console_handler(sys.stderr, logging.WARNING))

    _LOGGER.debug("Telegram log: file=%s, console=%s", file_name, cc_console)
    logger.warning("# ism7_tx %s", VERSION)  # the first line of each log
