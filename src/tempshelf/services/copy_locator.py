# Filename: copy_locator.py
# Author: Rich Lewis @RichLewis007
# Description: Copy location for verified deletion. Searches for files that share a dragged-out
#              file's name, waiting for new copies to appear until a timeout expires.

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Final, Protocol

from PySide6.QtCore import QObject, QProcess, Qt, QThread, QTimer, Signal, Slot

from tempshelf.services.comparator import is_same_file
from tempshelf.workers.copy_scan_worker import CopyScanWorker

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final[float] = 10.0
DEFAULT_POLL_INTERVAL: Final[float] = 0.5
MDFIND_PROGRAM: Final[str] = "mdfind"

Completion = Callable[[list[Path]], None]


class CopyLocator(Protocol):
    # Finds candidate copies of a file. ``completion`` must be called exactly once.

    def find_candidates(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
    ) -> CandidateSearch | None: ...


def has_other_path(source: Path, paths: Iterable[Path]) -> bool:
    # True when ``paths`` holds anything besides ``source`` itself.
    return any(not is_same_file(path, source) for path in paths)


class CandidateSearch(QObject):
    """One running search for copies of ``source``.

    The search completes exactly once: with the first observation that contains
    a path other than the source, with an empty list when the timeout fires, or
    with an empty list when cancelled. Subclasses provide ``_begin`` to start
    observing and ``_release`` to tear down whatever ``_begin`` acquired; the
    teardown runs on every exit path before the completion is delivered. A
    finished search deletes itself (and its timers) on the next event loop pass.
    """

    finished = Signal(object)  # list[Path]

    def __init__(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.source = source
        self._completion = completion
        self._done = False
        self._timeout_timer = QTimer(self)
        self._timeout_timer.setSingleShot(True)
        self._timeout_timer.setInterval(max(int(timeout * 1000), 0))
        self._timeout_timer.timeout.connect(self._on_timeout)

    @property
    def is_finished(self) -> bool:
        return self._done

    def start(self) -> None:
        self._timeout_timer.start()
        self._begin()

    def cancel(self) -> None:
        self._finish([])

    def observe(self, paths: list[Path]) -> bool:
        # Feed one observation; completes the search when it qualifies.
        if self._done:
            return True
        if has_other_path(self.source, paths):
            self._finish(paths)
            return True
        return False

    def _on_timeout(self) -> None:
        logger.info("No copies of %s found before timeout", self.source)
        self._finish([])

    def _finish(self, paths: list[Path]) -> None:
        if self._done:
            return
        self._done = True
        self._timeout_timer.stop()
        self._release()
        self.finished.emit(paths)
        try:
            self._completion(paths)
        finally:
            self.deleteLater()

    def _begin(self) -> None:
        raise NotImplementedError

    def _release(self) -> None:
        pass


# ----------------------------------------------------------------------
# Spotlight


def spotlight_query(name: str) -> str:
    # Build an exact file-name Spotlight query for ``name``.
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'kMDItemFSName == "{escaped}"'


def parse_mdfind_output(output: str, name: str) -> list[Path]:
    # Return the listed paths whose final component is exactly ``name``.
    paths: list[Path] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        path = Path(line)
        if path.name == name:
            paths.append(path)
    return paths


class SpotlightSearch(CandidateSearch):
    # Live Spotlight search: re-queries the index until a copy is indexed.

    def __init__(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
        *,
        program: str = MDFIND_PROGRAM,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(source, timeout, completion, parent)
        self._program = program
        self._process: QProcess | None = None
        self._poll_timer = QTimer(self)
        self._poll_timer.setSingleShot(True)
        self._poll_timer.setInterval(max(int(poll_interval * 1000), 0))
        self._poll_timer.timeout.connect(self._run_query)
        self._queries = 0

    def _begin(self) -> None:
        self._run_query()

    def _run_query(self) -> None:
        if self.is_finished:
            return
        self._queries += 1
        process = QProcess(self)
        process.finished.connect(self._on_query_finished)
        process.errorOccurred.connect(self._on_query_error)
        self._process = process
        process.start(self._program, [spotlight_query(self.source.name)])

    @Slot(int, QProcess.ExitStatus)
    def _on_query_finished(self, exit_code: int, _status: QProcess.ExitStatus) -> None:
        process = self._process
        self._process = None
        if process is None or self.is_finished:
            return
        output = process.readAllStandardOutput().data().decode("utf-8", "replace")
        process.deleteLater()
        paths = parse_mdfind_output(output, self.source.name)
        logger.debug(
            "Spotlight query %d for %s returned %d paths (exit %d)",
            self._queries,
            self.source.name,
            len(paths),
            exit_code,
        )
        if not self.observe(paths):
            self._poll_timer.start()

    @Slot(QProcess.ProcessError)
    def _on_query_error(self, error: QProcess.ProcessError) -> None:
        if error != QProcess.ProcessError.FailedToStart:
            return
        logger.warning("Unable to start %s; keeping %s", self._program, self.source)
        self._finish([])

    def _release(self) -> None:
        self._poll_timer.stop()
        process = self._process
        self._process = None
        if process is not None:
            process.finished.disconnect(self._on_query_finished)
            process.errorOccurred.disconnect(self._on_query_error)
            if process.state() != QProcess.ProcessState.NotRunning:
                process.kill()
            process.deleteLater()


class SpotlightCopyLocator:
    # Copy locator backed by the macOS Spotlight index.

    def __init__(
        self,
        *,
        program: str = MDFIND_PROGRAM,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        parent: QObject | None = None,
    ) -> None:
        self._program = program
        self._poll_interval = poll_interval
        self._parent = parent

    def find_candidates(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
    ) -> CandidateSearch:
        search = SpotlightSearch(
            source,
            timeout,
            completion,
            program=self._program,
            poll_interval=self._poll_interval,
            parent=self._parent,
        )
        search.start()
        return search


# ----------------------------------------------------------------------
# Folder scan


class ScanSearch(CandidateSearch):
    # Search that walks folders in a worker thread until a copy appears.

    def __init__(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
        *,
        locator: ScanCopyLocator,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(source, timeout, completion, parent)
        self._locator = locator
        self._worker: CopyScanWorker | None = None

    def _begin(self) -> None:
        worker = self._locator.launch_worker(self.source)
        worker.matched.connect(self._on_matched)
        self._worker = worker

    @Slot(object)
    def _on_matched(self, paths: list[Path]) -> None:
        self.observe(paths)

    def _release(self) -> None:
        worker = self._worker
        self._worker = None
        if worker is not None:
            worker.request_cancel()


class ScanCopyLocator:
    """Copy locator that walks a set of root folders.

    Used where no system content index is available. Each search runs its walk in
    a dedicated ``QThread``; the locator keeps the thread alive until it exits.
    """

    def __init__(
        self,
        roots: Sequence[Path],
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        parent: QObject | None = None,
    ) -> None:
        self._roots = list(roots)
        self._poll_interval = poll_interval
        self._parent = parent
        self._threads: dict[QThread, CopyScanWorker] = {}

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    @property
    def active_threads(self) -> int:
        self._prune_threads()
        return len(self._threads)

    def find_candidates(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
    ) -> CandidateSearch:
        search = ScanSearch(source, timeout, completion, locator=self, parent=self._parent)
        search.start()
        return search

    def launch_worker(self, source: Path) -> CopyScanWorker:
        # Start a scan worker for ``source`` on its own thread.
        self._prune_threads()
        worker = CopyScanWorker(source=source, roots=self._roots, poll_interval=self._poll_interval)
        thread = QThread()
        worker.moveToThread(thread)

        thread.started.connect(worker.start)
        worker.finished.connect(thread.quit, Qt.ConnectionType.DirectConnection)

        self._threads[thread] = worker
        thread.start()
        return worker

    def shutdown(self, *, wait: bool = True) -> None:
        # Cancel running workers, optionally waiting for their threads to exit.
        for thread, worker in list(self._threads.items()):
            worker.request_cancel()
            thread.quit()
            if wait:
                thread.wait(3000)
        self._prune_threads()

    def _prune_threads(self) -> None:
        # Drop references to threads that have exited; Python owns both objects.
        for thread in [thread for thread in self._threads if thread.isFinished()]:
            del self._threads[thread]


# ----------------------------------------------------------------------
# Static


class StaticCopyLocator:
    # Deterministic locator returning fixed candidates synchronously.

    def __init__(self, candidates: Sequence[Path] | Callable[[Path], Sequence[Path]] = ()) -> None:
        self._candidates = candidates
        self.requests: list[Path] = []

    def find_candidates(
        self,
        source: Path,
        timeout: float,
        completion: Completion,
    ) -> None:
        self.requests.append(source)
        if callable(self._candidates):
            found = list(self._candidates(source))
        else:
            found = list(self._candidates)
        completion(found)
        return None


def default_copy_locator(
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    scan_roots: Sequence[Path] | None = None,
    parent: QObject | None = None,
) -> CopyLocator:
    # Spotlight on macOS; folder scanning elsewhere.
    if sys.platform == "darwin":
        return SpotlightCopyLocator(poll_interval=poll_interval, parent=parent)
    roots = list(scan_roots) if scan_roots else [Path.home()]
    return ScanCopyLocator(roots, poll_interval=poll_interval, parent=parent)
