# Filename: copy_scan_worker.py
# Author: Rich Lewis @RichLewis007
# Description: Background worker that searches folders for files sharing a dragged-out file's
#              name. Repeats its walk until a copy shows up or the owner cancels it.

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from threading import Event

from PySide6.QtCore import QObject, Signal

from tempshelf.services.comparator import is_same_file

logger = logging.getLogger(__name__)


class CopyScanWorker(QObject):
    # Worker object that looks for same-named files beneath a set of roots.

    matched = Signal(object)  # list[Path]
    finished = Signal()

    def __init__(
        self,
        *,
        source: Path,
        roots: Iterable[Path],
        poll_interval: float = 0.5,
    ) -> None:
        super().__init__()
        self._source = source
        self._name = source.name
        self._roots = list(roots)
        self._poll_interval = max(poll_interval, 0.0)
        self._cancel_requested = False
        self._wake = Event()

    def request_cancel(self) -> None:
        # Signal the worker to stop at the next opportunity.
        self._cancel_requested = True
        self._wake.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    def start(self) -> None:
        # Entry point executed inside the worker thread.
        passes = 0
        try:
            while not self._cancel_requested:
                passes += 1
                found = self.scan_once()
                if found is None:
                    break
                if any(not is_same_file(path, self._source) for path in found):
                    logger.debug(
                        "Scan pass %d found %d candidates for %s", passes, len(found), self._name
                    )
                    self.matched.emit(found)
                    break
                self._wake.wait(self._poll_interval)
        finally:
            self.finished.emit()

    def scan_once(self) -> list[Path] | None:
        # Walk every root once. Returns None when cancelled part way through.
        found: list[Path] = []
        for root in self._roots:
            for dirpath, _dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
                if self._cancel_requested:
                    return None
                if self._name in filenames:
                    found.append(Path(dirpath) / self._name)
        return found

    @staticmethod
    def _on_walk_error(exc: OSError) -> None:
        # Skip unreadable directories but continue scanning.
        logger.debug("Skipping unreadable directory: %s", exc)
