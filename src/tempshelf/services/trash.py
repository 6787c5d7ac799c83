# Filename: trash.py
# Author: Rich Lewis @RichLewis007
# Description: Utilities for safely moving files to system trash. Wraps send2trash library
#              and absorbs failures for paths that are already gone.

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from send2trash import send2trash

logger = logging.getLogger(__name__)

Trasher = Callable[[Path], None]


def send_path_to_trash(path: Path) -> None:
    # Move a file or directory to the system Trash.
    send2trash(str(path))


def trash_quietly(path: Path, *, trasher: Trasher | None = None) -> bool:
    # Trash ``path``, returning False instead of raising when it cannot be moved.
    if not path.exists() and not path.is_symlink():
        logger.debug("Nothing to trash at %s", path)
        return False
    try:
        (trasher or send_path_to_trash)(path)
    except OSError as exc:
        logger.debug("Failed to trash %s: %s", path, exc)
        return False
    logger.info("Moved %s to Trash", path)
    return True


def trash_all_quietly(paths: Iterable[Path], *, trasher: Trasher | None = None) -> list[Path]:
    # Trash every path, returning those that were actually moved.
    return [path for path in paths if trash_quietly(path, trasher=trasher)]
