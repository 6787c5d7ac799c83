# Filename: shelf_entry.py
# Author: Rich Lewis @RichLewis007
# Description: Shelf entry data structure. Describes one file parked on the shelf together
#              with the metadata captured when it was added.

from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Final

from tempshelf.services.formatting import format_bytes

logger = logging.getLogger(__name__)

DIRECTORY_TYPE: Final[str] = "inode/directory"


@dataclass(slots=True, eq=False)
class ShelfEntry:
    # One file reference parked on the shelf. Identity is the ``id`` alone.

    path: Path
    name: str
    type_tag: str | None
    size: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    date_added: datetime = field(default_factory=datetime.now)
    icon: Any = None
    thumbnail: Any = None

    @classmethod
    def from_path(cls, path: Path) -> ShelfEntry:
        # Capture metadata for ``path``. Unreadable paths still produce an entry.
        try:
            is_dir = path.is_dir()
            size = 0 if is_dir else path.stat().st_size
        except OSError as exc:
            logger.debug("Unable to read metadata for %s: %s", path, exc)
            is_dir = False
            size = 0

        if is_dir:
            type_tag: str | None = DIRECTORY_TYPE
        else:
            type_tag, _encoding = mimetypes.guess_type(path.name)

        return cls(path=path, name=path.name or str(path), type_tag=type_tag, size=size)

    @property
    def size_formatted(self) -> str:
        return format_bytes(self.size)

    @property
    def is_directory(self) -> bool:
        return self.type_tag == DIRECTORY_TYPE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShelfEntry):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
