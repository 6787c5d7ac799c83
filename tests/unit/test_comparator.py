from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tempshelf.services import comparator
from tempshelf.services.comparator import file_size, is_same_file, same_content


def test_equal_bytes_match(make_file: Callable[..., Path]) -> None:
    source = make_file("a/file.txt", "hello")
    copy = make_file("b/file.txt", "hello")

    assert same_content(source, copy) is True


def test_same_size_different_bytes_do_not_match(make_file: Callable[..., Path]) -> None:
    source = make_file("a/file.txt", "hello")
    copy = make_file("b/file.txt", "HELLO")

    assert same_content(source, copy) is False


def test_size_mismatch_rejects_without_reading(
    make_file: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source = make_file("a/file.txt", "short")
    copy = make_file("b/file.txt", "much longer content")

    def _no_reads(*_args: Any, **_kwargs: Any) -> None:
        raise AssertionError("content should not be read")

    monkeypatch.setattr(Path, "open", _no_reads)

    assert same_content(source, copy) is False


def test_missing_file_never_matches(make_file: Callable[..., Path], tmp_path: Path) -> None:
    source = make_file("file.txt", "hello")

    assert same_content(source, tmp_path / "missing.txt") is False
    assert same_content(tmp_path / "missing.txt", source) is False


def test_unreadable_destination_falls_back_to_size(
    make_file: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source = make_file("a/file.txt", "same size content!")
    copy = make_file("b/file.txt", "SAME SIZE CONTENT!")
    real_open = Path.open

    def _guarded_open(self: Path, *args: Any, **kwargs: Any) -> Any:
        if self == copy:
            raise PermissionError(f"Operation not permitted: {self}")
        return real_open(self, *args, **kwargs)

    monkeypatch.setattr(Path, "open", _guarded_open)

    assert same_content(source, copy) is True


def test_large_files_compare_across_chunks(
    make_file: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(comparator, "_CHUNK_SIZE", 4)
    source = make_file("a/blob.bin", b"0123456789abcdef")
    same = make_file("b/blob.bin", b"0123456789abcdef")
    late_diff = make_file("c/blob.bin", b"0123456789abcdeX")

    assert same_content(source, same) is True
    assert same_content(source, late_diff) is False


def test_empty_files_match(make_file: Callable[..., Path]) -> None:
    assert same_content(make_file("a/empty", b""), make_file("b/empty", b"")) is True


def test_file_size(make_file: Callable[..., Path], tmp_path: Path) -> None:
    assert file_size(make_file("x.bin", b"12345")) == 5
    assert file_size(tmp_path / "nope") is None


def test_is_same_file_detects_aliases(make_file: Callable[..., Path], tmp_path: Path) -> None:
    source = make_file("dir/file.txt", "hello")
    link = tmp_path / "link.txt"
    link.symlink_to(source)
    other = make_file("other/file.txt", "hello")

    assert is_same_file(source, source) is True
    assert is_same_file(source, tmp_path / "dir" / ".." / "dir" / "file.txt") is True
    assert is_same_file(link, source) is True
    assert is_same_file(other, source) is False
