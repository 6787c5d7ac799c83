# Filename: drag_policy.py
# Author: Rich Lewis @RichLewis007
# Description: Drag-end policy for items dragged off the shelf. Maps a finished drag to shelf
#              removals and, when the modifier key was held, a delayed verified deletion.

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from PySide6.QtCore import QPointF, QTimer

from tempshelf.models.shelf_collection import ShelfCollection
from tempshelf.services.formatting import format_count, format_duration
from tempshelf.services.verification import VerifiedDeletionEngine

logger = logging.getLogger(__name__)

DEFAULT_GRACE_DELAY: Final[float] = 1.0

Scheduler = Callable[[float, Callable[[], None]], None]
SurfacePredicate = Callable[[QPointF], bool]


@dataclass(slots=True, frozen=True)
class DragOutcome:
    # What the drag session reported once the drop finished.

    source_paths: tuple[Path, ...]
    operation_effective: bool
    modifier_held: bool = False
    dropped_inside_own_surface: bool = False


@dataclass(slots=True, frozen=True)
class DragDecision:
    # Actions to take for one drag outcome.

    remove_paths: tuple[Path, ...] = ()
    schedule_verification: bool = False

    @property
    def is_noop(self) -> bool:
        return not self.remove_paths and not self.schedule_verification


NO_OP: Final[DragDecision] = DragDecision()


def decide(outcome: DragOutcome) -> DragDecision:
    """Return the shelf and deletion actions for ``outcome``.

    Drops back onto our own surface and cancelled drags change nothing. Any other
    completed drag removes the dragged entries from the shelf, and a held
    modifier additionally asks for verified deletion of the same paths.
    """
    if outcome.dropped_inside_own_surface:
        return NO_OP
    if not outcome.operation_effective:
        return NO_OP
    return DragDecision(
        remove_paths=tuple(outcome.source_paths),
        schedule_verification=outcome.modifier_held,
    )


def outcome_from_drop(
    source_paths: Iterable[Path],
    *,
    operation_effective: bool,
    modifier_held: bool,
    drop_point: QPointF | None = None,
    is_inside_own_surface: SurfacePredicate | None = None,
) -> DragOutcome:
    # Build an outcome, asking the UI whether ``drop_point`` lies on one of our windows.
    inside = False
    if drop_point is not None and is_inside_own_surface is not None:
        inside = bool(is_inside_own_surface(drop_point))
    return DragOutcome(
        source_paths=tuple(source_paths),
        operation_effective=operation_effective,
        modifier_held=modifier_held,
        dropped_inside_own_surface=inside,
    )


def qt_scheduler(delay: float, callback: Callable[[], None]) -> None:
    # Run ``callback`` on the owning event loop after ``delay`` seconds.
    QTimer.singleShot(max(int(delay * 1000), 0), callback)


class DragEndHandler:
    # Applies drag-end decisions to the shelf and the deletion engine.

    def __init__(
        self,
        collection: ShelfCollection,
        engine: VerifiedDeletionEngine,
        *,
        grace_delay: float = DEFAULT_GRACE_DELAY,
        scheduler: Scheduler = qt_scheduler,
    ) -> None:
        self._collection = collection
        self._engine = engine
        self._grace_delay = max(grace_delay, 0.0)
        self._scheduler = scheduler

    @property
    def grace_delay(self) -> float:
        return self._grace_delay

    def handle(self, outcome: DragOutcome) -> DragDecision:
        decision = decide(outcome)
        if decision.is_noop:
            logger.debug(
                "Drag ended without changes (inside=%s, effective=%s)",
                outcome.dropped_inside_own_surface,
                outcome.operation_effective,
            )
            return decision

        removed = self._collection.remove_paths(decision.remove_paths)
        logger.info("Drag out removed %d entries from shelf", len(removed))

        if decision.schedule_verification:
            paths = list(decision.remove_paths)
            logger.info(
                "Scheduling verified deletion of %s in %s",
                format_count(len(paths), "file"),
                format_duration(self._grace_delay),
            )
            self._scheduler(self._grace_delay, lambda: self._engine.verify_and_delete(paths))
        return decision
