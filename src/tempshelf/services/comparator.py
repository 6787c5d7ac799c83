# Filename: comparator.py
# Author: Rich Lewis @RichLewis007
# Description: File identity comparison for verified deletion. Decides whether two paths hold
#              the same content using a size check first and a byte comparison second.

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

_CHUNK_SIZE: Final[int] = 1024 * 1024


def file_size(path: Path) -> int | None:
    # Return the size of ``path`` in bytes, or None when it cannot be read.
    try:
        return path.stat().st_size
    except OSError as exc:
        logger.debug("Cannot read size of %s: %s", path, exc)
        return None


def is_same_file(a: Path, b: Path) -> bool:
    # True when both paths name one file, including via symlinks or /tmp-style aliases.
    if os.path.realpath(a) == os.path.realpath(b):
        return True
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def same_content(a: Path, b: Path) -> bool:
    """Return True when ``a`` and ``b`` appear to hold identical content.

    Unreadable sizes never match. When the sizes agree but either file cannot be
    read (for instance a destination outside the readable scope), the size match
    alone is accepted. Callers must not pass the same path twice.
    """
    size_a = file_size(a)
    size_b = file_size(b)
    if size_a is None or size_b is None:
        return False
    if size_a != size_b:
        return False

    equal = _bytes_equal(a, b)
    if equal is None:
        logger.info("Content of %s or %s unreadable; accepting size match", a, b)
        return True
    return equal


def _bytes_equal(a: Path, b: Path) -> bool | None:
    # Compare both files chunk by chunk. None means one of them could not be read.
    try:
        with a.open("rb") as handle_a, b.open("rb") as handle_b:
            while True:
                chunk_a = handle_a.read(_CHUNK_SIZE)
                chunk_b = handle_b.read(_CHUNK_SIZE)
                if chunk_a != chunk_b:
                    return False
                if not chunk_a:
                    return True
    except OSError as exc:
        logger.debug("Content comparison of %s and %s failed: %s", a, b, exc)
        return None
