"""Container-backed user objects.

``LazyObject`` is a base for user types whose fields live as leaf values
in one container. Fields are cached on the instance and written back by
``store_lazy``; instances store themselves when used as context managers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import TypeVar

from store.container import LazyContainer

_ObjectT = TypeVar("_ObjectT", bound="LazyObject")


class LazyObject(ABC):
    """Abstract object persisted as leaf values of a container."""

    def __init__(self, container: LazyContainer) -> None:
        self._container = container

    @property
    def container(self) -> LazyContainer:
        return self._container

    @classmethod
    def load_lazy(cls: type[_ObjectT], container: LazyContainer) -> _ObjectT:
        """Build an instance over ``container`` with an empty cache."""
        return cls(container)

    @abstractmethod
    def store_lazy(self) -> None:
        """Write cached fields into the container."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Drop cached fields so the next access reads the container again."""

    def __enter__(self: _ObjectT) -> _ObjectT:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.store_lazy()
