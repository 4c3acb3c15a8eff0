"""Archive backend for compiled databases.

This module packs a working directory into a tar file, unpacks it again,
and compresses or decompresses single files with zstd. Each pair is the
exact inverse of the other; callers see only ``LazyDBIOError`` on failure.
"""

from __future__ import annotations

import tarfile
from pathlib import Path

import zstandard

from core.constants import DEFAULT_COMPRESSION_LEVEL
from core.errors import LazyDBIOError


def pack_directory(source_dir: Path, tar_path: Path) -> None:
    """Pack a directory tree into an uncompressed tar file.

    Members are stored relative to ``source_dir`` in sorted order.

    Args:
        source_dir: Directory to pack.
        tar_path: Destination tar file, created or truncated.

    Raises:
        LazyDBIOError: If reading the tree or writing the tar fails.
    """
    try:
        with tarfile.open(tar_path, mode="w", format=tarfile.PAX_FORMAT) as tar:
            for entry in sorted(source_dir.rglob("*")):
                tar.add(entry, arcname=entry.relative_to(source_dir).as_posix(), recursive=False)
    except (OSError, tarfile.TarError) as error:
        raise LazyDBIOError(
            f"Failed to pack directory {source_dir} into {tar_path}: {error}."
        ) from error


def unpack_archive(tar_path: Path, out_dir: Path) -> None:
    """Unpack a tar file into ``out_dir``, creating it if needed.

    Raises:
        LazyDBIOError: If the tar is unreadable or a member is unsafe.
    """
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        with tarfile.open(tar_path, mode="r") as tar:
            tar.extractall(out_dir, filter="data")
    except (OSError, tarfile.TarError) as error:
        raise LazyDBIOError(f"Failed to unpack {tar_path} into {out_dir}: {error}.") from error


def compress_file(source_path: Path, out_path: Path, level: int = DEFAULT_COMPRESSION_LEVEL) -> None:
    """Compress a single file with zstd.

    Raises:
        LazyDBIOError: If reading, compressing or writing fails.
    """
    compressor = zstandard.ZstdCompressor(level=level)
    try:
        with source_path.open("rb") as source, out_path.open("wb") as sink:
            compressor.copy_stream(source, sink)
    except (OSError, zstandard.ZstdError) as error:
        raise LazyDBIOError(f"Failed to compress {source_path} into {out_path}: {error}.") from error


def decompress_file(source_path: Path, out_path: Path) -> None:
    """Decompress a zstd file produced by ``compress_file``.

    Raises:
        LazyDBIOError: If the input is not valid zstd or IO fails.
    """
    decompressor = zstandard.ZstdDecompressor()
    try:
        with source_path.open("rb") as source, out_path.open("wb") as sink:
            decompressor.copy_stream(source, sink)
    except (OSError, zstandard.ZstdError) as error:
        raise LazyDBIOError(
            f"Failed to decompress {source_path} into {out_path}: {error}."
        ) from error
