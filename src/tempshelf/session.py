# Filename: session.py
# Author: Rich Lewis @RichLewis007
# Description: Application context for the shelf. Owns the shelf collection, the verified
#              deletion engine, and the drag-end handler, and routes UI events to them.

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from PySide6.QtCore import QObject, QPointF

from .models.shelf_collection import ShelfCollection
from .models.shelf_entry import ShelfEntry
from .services.config import SettingsStore, VerificationSettings
from .services.copy_locator import CopyLocator, ScanCopyLocator, default_copy_locator
from .services.drag_policy import (
    DragDecision,
    DragEndHandler,
    DragOutcome,
    Scheduler,
    SurfacePredicate,
    outcome_from_drop,
    qt_scheduler,
)
from .services.verification import VerifiedDeletionEngine

logger = logging.getLogger(__name__)


class ShelfSession(QObject):
    """Top-level owner of shelf state for one running application.

    UI collaborators hand in dropped paths and finished drags; they read the
    collection (a Qt list model) and never touch the engine directly.
    """

    def __init__(
        self,
        *,
        locator: CopyLocator | None = None,
        settings: VerificationSettings | None = None,
        scheduler: Scheduler = qt_scheduler,
        is_inside_own_surface: SurfacePredicate | None = None,
        scan_roots: list[Path] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.settings = settings or VerificationSettings()
        self.collection = ShelfCollection(self)
        if locator is None:
            locator = default_copy_locator(
                poll_interval=self.settings.poll_interval,
                scan_roots=scan_roots,
                parent=self,
            )
        self.locator = locator
        self.engine = VerifiedDeletionEngine(
            locator,
            timeout=self.settings.query_timeout,
            parent=self,
        )
        self.drag_handler = DragEndHandler(
            self.collection,
            self.engine,
            grace_delay=self.settings.grace_delay,
            scheduler=scheduler,
        )
        self._is_inside_own_surface = is_inside_own_surface

    @classmethod
    def from_settings(
        cls,
        store: SettingsStore,
        *,
        locator: CopyLocator | None = None,
        scheduler: Scheduler = qt_scheduler,
        is_inside_own_surface: SurfacePredicate | None = None,
        parent: QObject | None = None,
    ) -> ShelfSession:
        # Build a session using the persisted verification preferences.
        return cls(
            locator=locator,
            settings=store.load_verification_settings(),
            scheduler=scheduler,
            is_inside_own_surface=is_inside_own_surface,
            scan_roots=store.load_scan_roots() or None,
            parent=parent,
        )

    # ------------------------------------------------------------------
    # Drops onto the shelf

    def handle_drop(self, paths: Iterable[Path]) -> list[ShelfEntry]:
        added = self.collection.add(paths)
        logger.info("Accepted %d dropped files", len(added))
        return added

    # ------------------------------------------------------------------
    # Drags off the shelf

    def drag_paths(self) -> list[Path]:
        return self.collection.drag_paths

    def handle_drag_end(self, outcome: DragOutcome) -> DragDecision:
        return self.drag_handler.handle(outcome)

    def handle_drag_session_end(
        self,
        source_paths: Iterable[Path],
        *,
        operation_effective: bool,
        modifier_held: bool,
        drop_point: QPointF | None = None,
    ) -> DragDecision:
        # Convenience for drag sources that report a screen point instead of a flag.
        outcome = outcome_from_drop(
            source_paths,
            operation_effective=operation_effective,
            modifier_held=modifier_held,
            drop_point=drop_point,
            is_inside_own_surface=self._is_inside_own_surface,
        )
        return self.handle_drag_end(outcome)

    # ------------------------------------------------------------------
    # Explicit removal

    def remove_entries(self, entries: Iterable[ShelfEntry]) -> None:
        self.collection.remove_many(entries)

    def trash_selected(self) -> list[Path]:
        # Remove selected entries and trash their files without verification.
        entries = self.collection.selected_entries
        self.collection.remove_many(entries)
        return self.engine.delete_unconditionally(entry.path for entry in entries)

    # ------------------------------------------------------------------
    # Teardown

    def close(self) -> None:
        # Stop pending verifications and scan threads before the app exits.
        logger.debug("Closing shelf session (%d verifications pending)", self.engine.pending)
        self.engine.shutdown(wait=True)
        if isinstance(self.locator, ScanCopyLocator):
            self.locator.shutdown(wait=True)
