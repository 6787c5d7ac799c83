# Filename: formatting.py
# Author: Rich Lewis @RichLewis007
# Description: Formatting helpers for user-facing values. Formats file sizes for shelf entry
#              tooltips, plus delays and counts shown in logs and command-line output.

from __future__ import annotations

from typing import Final

_SIZE_UNITS: Final[tuple[str, ...]] = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def format_bytes(
    num_bytes: int | float | None,
    *,
    empty: str = "",
    decimals: int = 2,
) -> str:
    """Return a human-friendly string for a byte count.

    Uses binary multiples (powers of 1024) up to exabytes. Plain byte counts
    are shown without decimals since fractions of a byte never occur.
    """
    if num_bytes is None:
        return empty

    value = float(max(num_bytes, 0))
    if value < 1024:
        return f"{int(value):,} B"

    unit_index = 0
    while value >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:,.{max(decimals, 0)}f} {_SIZE_UNITS[unit_index]}"


def format_duration(seconds: float) -> str:
    # Short delay label: "0 s", "250 ms", "1.5 s", "2 min 5 s".
    seconds = max(seconds, 0.0)
    if seconds == 0:
        return "0 s"
    if seconds < 1:
        return f"{round(seconds * 1000)} ms"
    if seconds < 60:
        return f"{seconds:g} s"
    minutes, rest = divmod(round(seconds), 60)
    return f"{minutes} min {rest} s" if rest else f"{minutes} min"


def format_count(count: int, noun: str, plural: str | None = None) -> str:
    # "1 path", "3 paths"; pass ``plural`` for irregular nouns.
    word = noun if count == 1 else (plural or f"{noun}s")
    return f"{count:,} {word}"


__all__ = ["format_bytes", "format_count", "format_duration"]
