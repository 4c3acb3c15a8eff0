"""Unit tests for container-backed lazy objects."""

from __future__ import annotations

import pytest

from core.types import LazyType
from store.container import LazyContainer
from store.database import LazyDB
from store.lazy_object import LazyObject


class Person(LazyObject):
    """Example lazy object with two cached fields."""

    def __init__(self, container: LazyContainer) -> None:
        super().__init__(container)
        self.name: str | None = None
        self.age: int | None = None

    def load_name(self) -> str:
        if self.name is None:
            self.name = self.container.read_data("name").collect_string()
        return self.name

    def store_lazy(self) -> None:
        if self.name is not None:
            self.container.write_value("name", LazyType.STRING, self.name)
        if self.age is not None:
            self.container.write_value("age", LazyType.U8, self.age)

    def clear_cache(self) -> None:
        self.name = None
        self.age = None


def test_context_exit_stores_fields(tmp_path) -> None:
    """Leaving the context should write cached fields."""
    root = LazyDB.init(tmp_path / "db").as_container()
    with Person.load_lazy(root.new_container("Dave")) as person:
        person.name = "Dave"
        person.age = 21

    assert root.child_container("Dave").read_data("age").collect_u8() == 21


def test_load_lazy_starts_with_empty_cache(tmp_path) -> None:
    """Loaded objects should read fields on demand."""
    root = LazyDB.init(tmp_path / "db").as_container()
    dave = root.new_container("Dave")
    dave.write_value("name", LazyType.STRING, "Dave")

    person = Person.load_lazy(dave)

    assert person.name is None and person.load_name() == "Dave"


def test_clear_cache_forces_reload(tmp_path) -> None:
    """Clearing the cache should pick up external changes."""
    dave = LazyDB.init(tmp_path / "db").as_container().new_container("Dave")
    dave.write_value("name", LazyType.STRING, "Dave")
    person = Person.load_lazy(dave)
    person.load_name()
    dave.write_value("name", LazyType.STRING, "David")

    person.clear_cache()

    assert person.load_name() == "David"


def test_exit_with_error_skips_store(tmp_path) -> None:
    """An exception inside the context should not persist partial fields."""
    dave = LazyDB.init(tmp_path / "db").as_container().new_container("Dave")

    with pytest.raises(RuntimeError):
        with Person.load_lazy(dave) as person:
            person.age = 30
            raise RuntimeError("abort")

    assert dave.data_names() == []
