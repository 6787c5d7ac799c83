# Filename: logger.py
# Author: Rich Lewis @RichLewis007
# Description: Logging configuration utilities. Sets up a rotating file log that always
#              records debug detail and a console handler whose level follows user settings.

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Final

from platformdirs import PlatformDirs

from .config import APP_NAME, ORG_NAME

LOG_FILENAME: Final[str] = "temp-shelf.log"
LOG_MAX_BYTES: Final[int] = 2 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 5

# Verification work is spread over worker threads, so records carry the thread name.
_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def get_log_path(log_dir: Path | None = None) -> Path:
    # Return the path to the rotating log file, creating folders as needed.
    if log_dir is None:
        log_dir = Path(PlatformDirs(appname=APP_NAME, appauthor=ORG_NAME).user_log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / LOG_FILENAME


def console_level(log_level: str | None, *, debug: bool = False) -> int:
    """Resolve the console threshold.

    An explicit ``log_level`` wins; otherwise the persisted debug switch selects
    DEBUG and everything else falls back to WARNING.
    """
    if log_level:
        return getattr(logging, log_level.upper(), logging.WARNING)
    return logging.DEBUG if debug else logging.WARNING


def configure(
    *,
    log_level: str | None = None,
    log_dir: Path | None = None,
    debug: bool = False,
) -> Path:
    # Configure root logger with rotating file and console handlers; returns the log file.
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    log_path = get_log_path(log_dir)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level(log_level, debug=debug))

    # Avoid duplicate handlers when reconfiguring.
    root.handlers.clear()
    root.addHandler(file_handler)
    root.addHandler(console_handler)
    return log_path
