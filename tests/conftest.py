"""Shared fixtures for shelf tests."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop

import tempshelf.services.trash as trash_module

WaitUntil = Callable[..., bool]


@pytest.fixture(scope="session", autouse=True)
def qapp() -> QCoreApplication:
    """Provide one headless Qt application for timers, threads, and processes."""
    existing = QCoreApplication.instance()
    if existing is not None:
        return existing
    return QCoreApplication([])


@pytest.fixture(name="wait_until")
def fixture_wait_until(qapp: QCoreApplication) -> WaitUntil:
    """Spin the Qt event loop until ``predicate`` holds or ``timeout`` passes."""

    def _wait(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while not predicate():
            if time.monotonic() > deadline:
                return False
            qapp.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 50)
            time.sleep(0.01)
        return True

    return _wait


@pytest.fixture(name="make_file")
def fixture_make_file(tmp_path: Path) -> Callable[..., Path]:
    """Create a file beneath ``tmp_path`` with the given content."""

    def _make(relative: str, content: bytes | str = b"data") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture(name="fake_trash")
def fixture_fake_trash(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    """Replace send2trash with an unlink that records what was trashed."""
    trashed: list[Path] = []

    def _send2trash(path: str) -> None:
        target = Path(path)
        target.unlink()
        trashed.append(target)

    monkeypatch.setattr(trash_module, "send2trash", _send2trash)
    return trashed


@pytest.fixture(name="restore_logging")
def fixture_restore_logging() -> Iterator[None]:
    """Put the root logger's handlers back after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
