from pathlib import Path

import pytest

from tempshelf.services.config import SettingsStore, VerificationSettings


@pytest.fixture(name="store")
def fixture_store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(directory=tmp_path / "config")


def test_defaults(store: SettingsStore) -> None:
    assert store.path.name == "settings.ini"
    assert store.load_verification_settings() == VerificationSettings(
        grace_delay=1.0,
        query_timeout=10.0,
        poll_interval=0.5,
    )
    assert store.load_scan_roots() == []
    assert store.load_debug_log_level() is False


def test_verification_timing_round_trip(store: SettingsStore, tmp_path: Path) -> None:
    store.save_grace_delay(0.25)
    store.save_query_timeout(4.0)
    store.save_poll_interval(0.1)

    reloaded = SettingsStore(directory=tmp_path / "config")

    assert reloaded.load_verification_settings() == VerificationSettings(
        grace_delay=0.25,
        query_timeout=4.0,
        poll_interval=0.1,
    )


def test_invalid_timing_values_fall_back(store: SettingsStore) -> None:
    store.save_grace_delay(-1.0)
    store.save_query_timeout(0.0)

    assert store.load_grace_delay() == 0.0
    assert store.load_query_timeout() == 10.0


def test_scan_roots_round_trip(store: SettingsStore, tmp_path: Path) -> None:
    roots = [tmp_path / "Desktop", tmp_path / "Downloads"]

    store.save_scan_roots(roots)

    assert store.load_scan_roots() == roots


def test_debug_log_level_round_trip(store: SettingsStore, tmp_path: Path) -> None:
    store.save_debug_log_level(True)

    assert SettingsStore(directory=tmp_path / "config").load_debug_log_level() is True


def test_single_scan_root_round_trip(store: SettingsStore, tmp_path: Path) -> None:
    store.save_scan_roots([tmp_path / "Desktop"])

    assert SettingsStore(directory=tmp_path / "config").load_scan_roots() == [tmp_path / "Desktop"]
