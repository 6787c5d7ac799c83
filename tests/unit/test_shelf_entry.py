from collections.abc import Callable
from pathlib import Path

from tempshelf.models.shelf_entry import DIRECTORY_TYPE, ShelfEntry


def test_from_path_captures_metadata(make_file: Callable[..., Path]) -> None:
    path = make_file("notes.txt", "hello")

    entry = ShelfEntry.from_path(path)

    assert entry.path == path
    assert entry.name == "notes.txt"
    assert entry.size == 5
    assert entry.type_tag == "text/plain"
    assert entry.is_directory is False
    assert entry.thumbnail is None
    assert entry.size_formatted == "5 B"


def test_from_path_directory(tmp_path: Path) -> None:
    folder = tmp_path / "photos"
    folder.mkdir()

    entry = ShelfEntry.from_path(folder)

    assert entry.type_tag == DIRECTORY_TYPE
    assert entry.is_directory is True
    assert entry.size == 0


def test_from_path_missing_file_still_builds_entry(tmp_path: Path) -> None:
    entry = ShelfEntry.from_path(tmp_path / "gone.bin")

    assert entry.size == 0
    assert entry.name == "gone.bin"


def test_identity_is_by_id_only(make_file: Callable[..., Path]) -> None:
    path = make_file("a.txt")

    first = ShelfEntry.from_path(path)
    second = ShelfEntry.from_path(path)

    assert first != second
    assert first.id != second.id
    assert len({first, second}) == 2
    assert first == first


def test_thumbnail_update_keeps_identity(make_file: Callable[..., Path]) -> None:
    entry = ShelfEntry.from_path(make_file("a.png"))
    original_id = entry.id

    entry.thumbnail = object()

    assert entry.id == original_id
    assert entry.type_tag == "image/png"
