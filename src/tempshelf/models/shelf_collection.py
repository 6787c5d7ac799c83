# Filename: shelf_collection.py
# Author: Rich Lewis @RichLewis007
# Description: Shelf collection data structure and Qt list model. Holds the ordered entries
#              parked on the shelf and the set of selected entry identifiers.

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any, ClassVar

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    QObject,
    Qt,
    Signal,
)

from .shelf_entry import ShelfEntry

logger = logging.getLogger(__name__)


class ShelfCollection(QAbstractListModel):
    """Ordered set of parked files plus the current selection.

    Two invariants hold after every public call: no two entries share a path,
    and every selected identifier belongs to an entry still in the collection.
    All mutation is expected on the thread that owns this object.
    """

    PathRole: ClassVar[int] = Qt.ItemDataRole.UserRole + 1
    EntryRole: ClassVar[int] = Qt.ItemDataRole.UserRole + 2
    SizeRole: ClassVar[int] = Qt.ItemDataRole.UserRole + 3

    selection_changed = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._entries: list[ShelfEntry] = []
        self._selected_ids: set[uuid.UUID] = set()

    # ------------------------------------------------------------------
    # Qt model interface

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: B008, N802
        if parent.isValid():
            return 0
        return len(self._entries)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._entries):
            return None
        entry = self._entries[index.row()]
        if role == Qt.ItemDataRole.DisplayRole:
            return entry.name
        if role == Qt.ItemDataRole.ToolTipRole:
            return f"{entry.path}\n{entry.size_formatted}"
        if role == Qt.ItemDataRole.DecorationRole:
            return entry.thumbnail if entry.thumbnail is not None else entry.icon
        if role == self.PathRole:
            return str(entry.path)
        if role == self.EntryRole:
            return entry
        if role == self.SizeRole:
            return entry.size
        return None

    # ------------------------------------------------------------------
    # Read access

    @property
    def entries(self) -> list[ShelfEntry]:
        return list(self._entries)

    @property
    def selected_ids(self) -> frozenset[uuid.UUID]:
        return frozenset(self._selected_ids)

    @property
    def selected_entries(self) -> list[ShelfEntry]:
        # Selected entries in shelf order.
        return [entry for entry in self._entries if entry.id in self._selected_ids]

    @property
    def drag_paths(self) -> list[Path]:
        # Paths carried by a drag-out: the selection, or everything when nothing is selected.
        selected = self.selected_entries
        source = selected if selected else self._entries
        return [entry.path for entry in source]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ShelfEntry]:
        return iter(list(self._entries))

    def contains_path(self, path: Path) -> bool:
        return any(entry.path == path for entry in self._entries)

    def entry_for_id(self, entry_id: uuid.UUID) -> ShelfEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    # ------------------------------------------------------------------
    # Insertion

    def add(self, paths: Iterable[Path]) -> list[ShelfEntry]:
        # Append entries for paths not already on the shelf, keeping input order.
        known = {entry.path for entry in self._entries}
        new_entries: list[ShelfEntry] = []
        for path in paths:
            if path in known:
                continue
            known.add(path)
            new_entries.append(ShelfEntry.from_path(path))

        if not new_entries:
            return []

        first = len(self._entries)
        self.beginInsertRows(QModelIndex(), first, first + len(new_entries) - 1)
        self._entries.extend(new_entries)
        self.endInsertRows()
        logger.debug("Added %d entries to shelf (%d total)", len(new_entries), len(self._entries))
        return new_entries

    # ------------------------------------------------------------------
    # Removal

    def remove(self, entry: ShelfEntry) -> None:
        self.remove_many([entry])

    def remove_many(self, entries: Iterable[ShelfEntry]) -> None:
        self._remove_ids({entry.id for entry in entries})

    def remove_selected(self) -> None:
        self._remove_ids(set(self._selected_ids))

    def remove_paths(self, paths: Iterable[Path]) -> list[ShelfEntry]:
        # Remove every entry whose path is in ``paths`` and return the removed entries.
        wanted = set(paths)
        doomed = [entry for entry in self._entries if entry.path in wanted]
        self._remove_ids({entry.id for entry in doomed})
        return doomed

    def remove_all(self) -> None:
        had_selection = bool(self._selected_ids)
        self.beginResetModel()
        self._entries.clear()
        self._selected_ids.clear()
        self.endResetModel()
        if had_selection:
            self.selection_changed.emit()

    def _remove_ids(self, ids: set[uuid.UUID]) -> None:
        if not ids:
            return
        rows = [row for row, entry in enumerate(self._entries) if entry.id in ids]
        # Remove from the bottom so earlier row numbers stay valid.
        for row in reversed(rows):
            self.beginRemoveRows(QModelIndex(), row, row)
            del self._entries[row]
            self.endRemoveRows()

        deselected = self._selected_ids & ids
        self._selected_ids -= ids
        if rows:
            logger.debug("Removed %d entries from shelf", len(rows))
        if deselected:
            self.selection_changed.emit()

    # ------------------------------------------------------------------
    # Selection

    def select_all(self) -> None:
        self._set_selection({entry.id for entry in self._entries})

    def clear_selection(self) -> None:
        self._set_selection(set())

    def toggle_selection(self, entry: ShelfEntry) -> None:
        if entry.id in self._selected_ids:
            self._set_selection(self._selected_ids - {entry.id})
        elif self.entry_for_id(entry.id) is not None:
            self._set_selection(self._selected_ids | {entry.id})

    def select_only(self, entry: ShelfEntry) -> None:
        if self.entry_for_id(entry.id) is None:
            return
        self._set_selection({entry.id})

    def _set_selection(self, ids: set[uuid.UUID]) -> None:
        if ids == self._selected_ids:
            return
        self._selected_ids = ids
        self.selection_changed.emit()

    # ------------------------------------------------------------------
    # Reordering and in-place updates

    def move(self, offsets: Sequence[int] | Iterable[int], to_index: int) -> None:
        """Move the entries at ``offsets`` so they land before ``to_index``.

        ``to_index`` refers to positions before the move; the moved entries keep
        their relative order and are inserted after removing them from the list.
        """
        count = len(self._entries)
        rows = sorted({offset for offset in offsets if 0 <= offset < count})
        if not rows:
            return
        to_index = max(0, min(to_index, count))

        row_set = set(rows)
        moving = [self._entries[row] for row in rows]
        remaining = [entry for row, entry in enumerate(self._entries) if row not in row_set]
        insert_at = to_index - sum(1 for row in rows if row < to_index)
        reordered = remaining[:insert_at] + moving + remaining[insert_at:]
        if reordered == self._entries:
            return

        self.beginResetModel()
        self._entries = reordered
        self.endResetModel()

    def set_thumbnail(self, entry_id: uuid.UUID, thumbnail: Any) -> bool:
        # Attach a generated preview to an entry still on the shelf.
        for row, entry in enumerate(self._entries):
            if entry.id == entry_id:
                entry.thumbnail = thumbnail
                index = self.index(row, 0)
                self.dataChanged.emit(index, index, [Qt.ItemDataRole.DecorationRole])
                return True
        return False
