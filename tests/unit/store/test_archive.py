"""Unit tests for the archive backend."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import LazyDBIOError
from store.archive import compress_file, decompress_file, pack_directory, unpack_archive


def _tree_bytes(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_pack_and_unpack_roundtrip(tmp_path) -> None:
    """Unpacking a packed tree should reproduce every file."""
    source = tmp_path / "source"
    (source / "people" / "Dave").mkdir(parents=True)
    (source / ".meta").write_bytes(b"\x0e\x01\x02\x01")
    (source / "people" / "Dave" / "age").write_bytes(b"\x07\x15")
    (source / "empty").mkdir()
    tar_path = tmp_path / "pack.tar"

    pack_directory(source, tar_path)
    unpack_archive(tar_path, tmp_path / "restored")

    assert _tree_bytes(tmp_path / "restored") == _tree_bytes(source)
    assert (tmp_path / "restored" / "empty").is_dir()


def test_compress_and_decompress_roundtrip(tmp_path) -> None:
    """Decompressing should return the original bytes."""
    original = tmp_path / "plain.bin"
    original.write_bytes(bytes(range(256)) * 64)

    compress_file(original, tmp_path / "packed.zst", level=19)
    decompress_file(tmp_path / "packed.zst", tmp_path / "restored.bin")

    assert (tmp_path / "restored.bin").read_bytes() == original.read_bytes()


def test_decompress_rejects_garbage(tmp_path) -> None:
    """Non-zstd input should surface as an IO error."""
    garbage = tmp_path / "garbage.ldb"
    garbage.write_bytes(b"not a zstd frame")

    with pytest.raises(LazyDBIOError):
        decompress_file(garbage, tmp_path / "out.tar")


def test_unpack_missing_tar_fails(tmp_path) -> None:
    """A missing pack should surface as an IO error."""
    with pytest.raises(LazyDBIOError):
        unpack_archive(tmp_path / "missing.tar", tmp_path / "out")
