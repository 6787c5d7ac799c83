# Filename: verification_worker.py
# Author: Rich Lewis @RichLewis007
# Description: Background worker that compares a dragged-out file with its candidate copies
#              and moves the original to Trash when one matches, off the owning thread.

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from tempshelf.services.comparator import is_same_file
from tempshelf.services.trash import Trasher, trash_quietly

logger = logging.getLogger(__name__)

Comparator = Callable[[Path, Path], bool]


@dataclass(slots=True, frozen=True)
class VerificationResult:
    # Outcome of verifying one source path.

    source: Path
    matched: Path | None = None
    trashed: bool = False

    @property
    def safe_to_delete(self) -> bool:
        return self.matched is not None


class VerificationWorker(QObject):
    # Checks candidates for one source in a worker thread.

    finished = Signal(object)  # VerificationResult

    def __init__(
        self,
        *,
        source: Path,
        candidates: Iterable[Path],
        comparator: Comparator,
        trasher: Trasher,
    ) -> None:
        super().__init__()
        self._source = source
        self._candidates = list(candidates)
        self._comparator = comparator
        self._trasher = trasher
        self._cancel_requested = False
        self._done = False

    @property
    def source(self) -> Path:
        return self._source

    @property
    def is_done(self) -> bool:
        return self._done

    def request_cancel(self) -> None:
        # Stop before the next candidate; the source is kept.
        self._cancel_requested = True

    def start(self) -> None:
        # Entry point executed inside the worker thread.
        result = VerificationResult(source=self._source)
        try:
            result = self.evaluate()
        finally:
            self._done = True
            self.finished.emit(result)

    def evaluate(self) -> VerificationResult:
        source = self._source
        for candidate in self._candidates:
            if self._cancel_requested:
                logger.info("Verification of %s cancelled; keeping it", source)
                return VerificationResult(source=source)
            if is_same_file(candidate, source):
                continue
            if not self._comparator(source, candidate):
                logger.debug("Candidate %s does not match %s", candidate, source)
                continue
            logger.info("Verified copy of %s at %s", source, candidate)
            trashed = trash_quietly(source, trasher=self._trasher)
            return VerificationResult(source=source, matched=candidate, trashed=trashed)

        logger.info("No verified copy of %s; keeping it", source)
        return VerificationResult(source=source)
