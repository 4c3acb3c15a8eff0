"""Directory-backed container tree.

This module maps container names onto nested filesystem directories.
Every lookup is a fresh filesystem call; nothing is cached between calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Iterable

from core.constants import CONTAINER_SEPARATOR, META_FILE_NAME
from core.errors import LazyDBIOError, LazyDBNotFoundError, LazyDBValueError
from core.types import LazyType
from store.lazy_data import LazyData
from store.value_codec import encode_array, encode_value


class LazyContainer:
    """A directory holding leaf values and child containers."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @classmethod
    def load(cls, path: str | Path) -> "LazyContainer":
        """Open an existing container directory.

        Raises:
            LazyDBNotFoundError: If ``path`` is not a directory.
        """
        container_path = Path(path)
        if not container_path.is_dir():
            raise LazyDBNotFoundError(f"Container directory '{container_path}' not found.")
        return cls(container_path.resolve())

    @property
    def path(self) -> Path:
        return self._path

    def child_container(self, name: str) -> "LazyContainer":
        """Resolve an existing child container.

        Raises:
            LazyDBNotFoundError: If ``name`` is not a subdirectory.
        """
        child_path = self._path / _checked_name(name)
        if not child_path.is_dir():
            raise LazyDBNotFoundError(
                f"Container '{name}' not found in '{self._path}'."
            )
        return LazyContainer(child_path)

    def new_container(self, name: str) -> "LazyContainer":
        """Return the child container ``name``, creating it if absent.

        Raises:
            LazyDBIOError: If the directory cannot be created, e.g. because a
                leaf value already uses the name.
        """
        child_path = self._path / _checked_name(name)
        try:
            child_path.mkdir(exist_ok=True)
        except OSError as error:
            raise LazyDBIOError(
                f"Failed to create container '{name}' in '{self._path}': {error}."
            ) from error
        return LazyContainer(child_path)

    def data_writer(self, name: str) -> BinaryIO:
        """Create or truncate the leaf file ``name`` for binary writing.

        The caller owns the returned file and must close it.

        Raises:
            LazyDBValueError: If ``name`` is the reserved metadata name.
            LazyDBIOError: If the file cannot be opened.
        """
        if name == META_FILE_NAME:
            raise LazyDBValueError(
                f"Leaf name '{META_FILE_NAME}' is reserved for the database version stamp."
            )
        leaf_path = self._path / _checked_name(name)
        try:
            return leaf_path.open("wb")
        except OSError as error:
            raise LazyDBIOError(f"Failed to open leaf '{leaf_path}' for writing: {error}.") from error

    def read_data(self, name: str) -> LazyData:
        """Open the leaf ``name`` lazily.

        Raises:
            LazyDBNotFoundError: If ``name`` is not a file.
        """
        leaf_path = self._path / _checked_name(name)
        if not leaf_path.is_file():
            raise LazyDBNotFoundError(f"Leaf value '{name}' not found in '{self._path}'.")
        return LazyData.load(leaf_path)

    def write_value(self, name: str, lazy_type: LazyType, value: Any = None) -> None:
        """Encode ``value`` as ``lazy_type`` into the leaf ``name``.

        The value is encoded before the leaf is truncated, so an invalid
        value leaves any previous content in place.
        """
        self._write_encoded(name, encode_value(lazy_type, value))

    def write_array(self, name: str, element_type: LazyType, values: Iterable[Any]) -> None:
        """Encode a fixed-width array into the leaf ``name``."""
        self._write_encoded(name, encode_array(element_type, values))

    def child_names(self) -> list[str]:
        """Return sorted names of child containers."""
        return sorted(entry.name for entry in self._iter_entries() if entry.is_dir())

    def data_names(self) -> list[str]:
        """Return sorted names of leaf values, excluding reserved metadata."""
        return sorted(
            entry.name
            for entry in self._iter_entries()
            if entry.is_file() and entry.name != META_FILE_NAME
        )

    def _write_encoded(self, name: str, encoded: bytes) -> None:
        with self.data_writer(name) as sink:
            try:
                sink.write(encoded)
            except OSError as error:
                raise LazyDBIOError(
                    f"Failed to write leaf '{name}' in '{self._path}': {error}."
                ) from error

    def _iter_entries(self) -> list[Path]:
        try:
            return list(self._path.iterdir())
        except FileNotFoundError as error:
            raise LazyDBNotFoundError(f"Container directory '{self._path}' not found.") from error
        except OSError as error:
            raise LazyDBIOError(f"Failed to list container '{self._path}': {error}.") from error

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LazyContainer):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"LazyContainer(path={str(self._path)!r})"


def _checked_name(name: str) -> str:
    """Validate a single container or leaf name segment."""
    if not name or name in (".", "..") or CONTAINER_SEPARATOR in name or "\\" in name:
        raise LazyDBValueError(
            f"Invalid name '{name}': expected a single non-empty path segment."
        )
    return name
