"""Path addressing helpers.

A data path such as ``people/Dave::age`` names the containers ``people``
and ``Dave`` followed by the leaf ``age``. A path without ``::`` names a
leaf in the root container. These helpers only resolve segments and then
read or write the leaf; there is no query language.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from core.constants import CONTAINER_SEPARATOR, LEAF_SEPARATOR
from core.errors import LazyDBValueError
from core.types import LazyType
from store.container import LazyContainer
from store.database import LazyDB
from store.lazy_data import LazyData


@dataclass(frozen=True)
class DataPath:
    """Parsed data path.

    Attributes:
        containers: Container names from the root, outermost first.
        leaf: Leaf value name.
    """

    containers: tuple[str, ...]
    leaf: str

    def __str__(self) -> str:
        if not self.containers:
            return self.leaf
        return CONTAINER_SEPARATOR.join(self.containers) + LEAF_SEPARATOR + self.leaf


def parse_data_path(text: str) -> DataPath:
    """Parse ``a/b::leaf`` (or ``leaf``) into container segments and a leaf.

    Raises:
        LazyDBValueError: If a segment or the leaf name is empty.
    """
    container_part, _, leaf = text.strip().rpartition(LEAF_SEPARATOR)
    if not leaf:
        raise LazyDBValueError(f"Data path '{text}' has no leaf name.")
    return DataPath(containers=parse_container_path(container_part), leaf=leaf)


def parse_container_path(text: str) -> tuple[str, ...]:
    """Split ``/a/b`` into ``("a", "b")``; the empty path is the root.

    Raises:
        LazyDBValueError: If a segment is empty or contains ``::``.
    """
    stripped = text.strip().strip(CONTAINER_SEPARATOR)
    if not stripped:
        return ()
    segments = tuple(stripped.split(CONTAINER_SEPARATOR))
    if any(not segment for segment in segments):
        raise LazyDBValueError(f"Container path '{text}' contains an empty segment.")
    if any(LEAF_SEPARATOR in segment for segment in segments):
        raise LazyDBValueError(
            f"Container path '{text}' contains '{LEAF_SEPARATOR}'; "
            "a data path names exactly one leaf."
        )
    return segments


def search_container(database: LazyDB, segments: Sequence[str]) -> LazyContainer:
    """Resolve existing containers from the root.

    Raises:
        LazyDBNotFoundError: If any segment is not an existing container.
    """
    container = database.as_container()
    for name in segments:
        container = container.child_container(name)
    return container


def ensure_container(database: LazyDB, segments: Sequence[str]) -> LazyContainer:
    """Resolve containers from the root, creating missing ones."""
    container = database.as_container()
    for name in segments:
        container = container.new_container(name)
    return container


def search_data(database: LazyDB, path: str | DataPath) -> LazyData:
    """Open the leaf named by ``path`` lazily.

    Raises:
        LazyDBNotFoundError: If a container or the leaf does not exist.
    """
    data_path = _as_data_path(path)
    return search_container(database, data_path.containers).read_data(data_path.leaf)


def write_data(database: LazyDB, path: str | DataPath, lazy_type: LazyType, value: Any = None) -> None:
    """Write a scalar value at ``path``, creating missing containers."""
    data_path = _as_data_path(path)
    ensure_container(database, data_path.containers).write_value(data_path.leaf, lazy_type, value)


def write_data_array(
    database: LazyDB,
    path: str | DataPath,
    element_type: LazyType,
    values: Iterable[Any],
) -> None:
    """Write a fixed-width array at ``path``, creating missing containers."""
    data_path = _as_data_path(path)
    container = ensure_container(database, data_path.containers)
    container.write_array(data_path.leaf, element_type, values)


def _as_data_path(path: str | DataPath) -> DataPath:
    if isinstance(path, DataPath):
        return path
    return parse_data_path(path)
