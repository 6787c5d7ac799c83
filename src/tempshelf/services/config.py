# Filename: config.py
# Author: Rich Lewis @RichLewis007
# Description: Configuration helpers for persistent application settings. Wraps Qt QSettings
#              for storing verification timing, scan folders, and the debug logging switch.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from platformdirs import PlatformDirs
from PySide6.QtCore import QSettings

APP_NAME = "TempShelf"
ORG_NAME = "Rich Lewis"

_KEY_GRACE_DELAY = "verification/grace_delay"
_KEY_QUERY_TIMEOUT = "verification/query_timeout"
_KEY_POLL_INTERVAL = "verification/poll_interval"
_KEY_SCAN_ROOTS = "verification/scan_roots"
_KEY_DEBUG_LOG_LEVEL = "logging/debug_level"

_TRUE_STRINGS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def ensure_app_dirs() -> Path:
    # Ensure the configuration directories exist and return the config path.
    dirs = PlatformDirs(appname=APP_NAME, appauthor=ORG_NAME)
    config_path = Path(dirs.user_config_dir)
    log_path = Path(dirs.user_log_dir)
    data_path = Path(dirs.user_data_dir)

    for path in (config_path, log_path, data_path):
        path.mkdir(parents=True, exist_ok=True)

    return config_path


@dataclass(slots=True, frozen=True)
class VerificationSettings:
    # Timing values used by drag-out verification.

    grace_delay: float = 1.0
    query_timeout: float = 10.0
    poll_interval: float = 0.5


@dataclass(slots=True)
class SettingsStore:
    # Wrapper around Qt settings for app state persistence.

    filename: str = "settings.ini"
    directory: Path | None = None
    _path: Path = field(init=False)
    _settings: QSettings = field(init=False)

    def __post_init__(self) -> None:
        # Initialise the underlying Qt settings store.
        if self.directory is None:
            config_dir = ensure_app_dirs()
        else:
            config_dir = self.directory
            config_dir.mkdir(parents=True, exist_ok=True)
        object.__setattr__(self, "_path", config_dir / self.filename)
        object.__setattr__(
            self,
            "_settings",
            QSettings(str(self._path), QSettings.Format.IniFormat),
        )

    @property
    def path(self) -> Path:
        # Return the filesystem path backing the settings file.
        return self._path

    # ------------------------------------------------------------------
    # Verification timing

    def load_grace_delay(self, default: float = 1.0) -> float:
        # Seconds to wait after a drag before looking for the copy.
        return max(self._read_float(_KEY_GRACE_DELAY, default), 0.0)

    def save_grace_delay(self, seconds: float) -> None:
        self._write(_KEY_GRACE_DELAY, max(float(seconds), 0.0))

    def load_query_timeout(self, default: float = 10.0) -> float:
        # Seconds to wait for a copy to show up before keeping the source.
        value = self._read_float(_KEY_QUERY_TIMEOUT, default)
        return value if value > 0 else default

    def save_query_timeout(self, seconds: float) -> None:
        self._write(_KEY_QUERY_TIMEOUT, float(seconds))

    def load_poll_interval(self, default: float = 0.5) -> float:
        value = self._read_float(_KEY_POLL_INTERVAL, default)
        return value if value > 0 else default

    def save_poll_interval(self, seconds: float) -> None:
        self._write(_KEY_POLL_INTERVAL, float(seconds))

    def load_verification_settings(self) -> VerificationSettings:
        return VerificationSettings(
            grace_delay=self.load_grace_delay(),
            query_timeout=self.load_query_timeout(),
            poll_interval=self.load_poll_interval(),
        )

    def load_scan_roots(self) -> list[Path]:
        # Folders walked when no content index is available.
        value = self._settings.value(_KEY_SCAN_ROOTS)
        if isinstance(value, list):
            return [Path(item) for item in value if isinstance(item, str) and item]
        if isinstance(value, str) and value:
            return [Path(value)]
        return []

    def save_scan_roots(self, roots: list[Path]) -> None:
        self._write(_KEY_SCAN_ROOTS, [str(root) for root in roots])

    # ------------------------------------------------------------------
    # Logging preferences

    def load_debug_log_level(self, default: bool = False) -> bool:
        # Return whether debug log level is enabled, defaulting to default.
        return self._read_bool(_KEY_DEBUG_LOG_LEVEL, default)

    def save_debug_log_level(self, enabled: bool) -> None:
        # Persist the user's debug log level preference.
        self._write(_KEY_DEBUG_LOG_LEVEL, enabled)

    # ------------------------------------------------------------------
    # Helpers

    def _read_bool(self, key: str, default: bool) -> bool:
        value = self._settings.value(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in _TRUE_STRINGS
        return default

    def _read_float(self, key: str, default: float) -> float:
        value = self._settings.value(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _write(self, key: str, value: object) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
