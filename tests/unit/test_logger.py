import logging
from pathlib import Path

import pytest

from tempshelf.services import logger as logger_service


@pytest.mark.usefixtures("restore_logging")
def test_configure_writes_rotating_log(tmp_path: Path) -> None:
    log_path = logger_service.configure(log_level="WARNING", log_dir=tmp_path / "logs")

    logging.getLogger("tempshelf.test").debug("verification detail")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "logs" / logger_service.LOG_FILENAME
    assert "verification detail" in log_path.read_text(encoding="utf-8")


@pytest.mark.usefixtures("restore_logging")
def test_configure_does_not_duplicate_handlers(tmp_path: Path) -> None:
    logger_service.configure(log_dir=tmp_path)
    logger_service.configure(log_level="DEBUG", log_dir=tmp_path)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 2
    assert handlers[1].level == logging.DEBUG


@pytest.mark.parametrize(
    ("log_level", "debug", "expected"),
    [
        (None, False, logging.WARNING),
        (None, True, logging.DEBUG),
        ("error", True, logging.ERROR),
        ("INFO", False, logging.INFO),
        ("bogus", False, logging.WARNING),
    ],
)
def test_console_level(log_level: str | None, debug: bool, expected: int) -> None:
    assert logger_service.console_level(log_level, debug=debug) == expected


@pytest.mark.usefixtures("restore_logging")
def test_records_carry_thread_name(tmp_path: Path) -> None:
    log_path = logger_service.configure(log_dir=tmp_path)

    logging.getLogger("tempshelf.test").warning("from the main thread")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "MainThread tempshelf.test: from the main thread" in log_path.read_text(encoding="utf-8")
