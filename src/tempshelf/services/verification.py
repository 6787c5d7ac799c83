# Filename: verification.py
# Author: Rich Lewis @RichLewis007
# Description: Verified deletion engine. Trashes dragged-out source files only after a
#              content-identical copy has been found elsewhere on disk.

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from PySide6.QtCore import QObject, Qt, QThread, QTimer, Signal, Slot

from tempshelf.services.comparator import same_content
from tempshelf.services.copy_locator import DEFAULT_TIMEOUT, CandidateSearch, CopyLocator
from tempshelf.services.trash import Trasher, send_path_to_trash, trash_all_quietly
from tempshelf.workers.verification_worker import (
    Comparator,
    VerificationResult,
    VerificationWorker,
)

logger = logging.getLogger(__name__)

__all__ = ["Comparator", "VerificationResult", "VerifiedDeletionEngine"]


class VerifiedDeletionEngine(QObject):
    """Trash source files once a matching copy is confirmed.

    ``verify_and_delete`` returns immediately; each source is handled on its own
    and reports through ``verified``. Content comparison and trashing run in a
    ``VerificationWorker`` on its own ``QThread`` and the result is delivered back
    on the engine's thread. ``idle`` fires whenever the last pending verification
    completes. Nothing here raises to the caller: every failure resolves to
    keeping the source file.
    """

    verified = Signal(object)  # VerificationResult
    idle = Signal()

    def __init__(
        self,
        locator: CopyLocator,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        comparator: Comparator = same_content,
        trasher: Trasher = send_path_to_trash,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._locator = locator
        self._timeout = timeout
        self._comparator = comparator
        self._trasher = trasher
        self._pending = 0
        self._searches: dict[int, CandidateSearch] = {}
        self._threads: dict[QThread, VerificationWorker] = {}

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def active_threads(self) -> int:
        return len(self._threads)

    def verify_and_delete(self, sources: Iterable[Path]) -> None:
        for source in list(sources):
            self._start(source)

    def delete_unconditionally(self, sources: Iterable[Path]) -> list[Path]:
        # Trash every source without verification; missing files are skipped.
        return trash_all_quietly(sources, trasher=self._trasher)

    def shutdown(self, *, wait: bool = True) -> None:
        # Cancel running searches and workers, optionally waiting for worker threads.
        for search in list(self._searches.values()):
            if not search.is_finished:
                search.cancel()
        for thread, worker in list(self._threads.items()):
            worker.request_cancel()
            if wait and thread.wait(3000):
                del self._threads[thread]

    def _start(self, source: Path) -> None:
        self._pending += 1
        logger.debug("Looking for copies of %s", source)

        def on_candidates(candidates: list[Path]) -> None:
            self._launch_worker(source, candidates)

        search = self._locator.find_candidates(source, self._timeout, on_candidates)
        if search is not None and not search.is_finished:
            # Held until the turn after completion, when the search has retired itself.
            key = id(search)
            self._searches[key] = search
            search.finished.connect(
                lambda _paths: QTimer.singleShot(0, lambda: self._searches.pop(key, None))
            )

    def _launch_worker(self, source: Path, candidates: list[Path]) -> None:
        worker = VerificationWorker(
            source=source,
            candidates=candidates,
            comparator=self._comparator,
            trasher=self._trasher,
        )
        thread = QThread()
        worker.moveToThread(thread)

        thread.started.connect(worker.start)
        worker.finished.connect(thread.quit, Qt.ConnectionType.DirectConnection)
        worker.finished.connect(self._on_worker_finished)

        self._threads[thread] = worker
        thread.start()

    @Slot(object)
    def _on_worker_finished(self, result: VerificationResult) -> None:
        # Runs on the engine's thread once a worker reports.
        self._reap_threads()
        try:
            self.verified.emit(result)
        finally:
            self._pending -= 1
            if self._pending == 0:
                self.idle.emit()

    def _reap_threads(self) -> None:
        # Join threads whose worker has reported; they are exiting already.
        for thread, worker in list(self._threads.items()):
            if worker.is_done:
                thread.wait()
                del self._threads[thread]
