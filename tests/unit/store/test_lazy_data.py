"""Unit tests for lazy value handles."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import (
    LazyDBError,
    LazyDBMalformedPayloadError,
    LazyDBNotFoundError,
    LazyDBTypeMismatchError,
)
from core.types import LazyTag, LazyType
from store.lazy_data import LazyData
from store.value_codec import encode_value, write_array, write_value


def _write_leaf(path: Path, lazy_type: LazyType, value: object = None) -> Path:
    with path.open("wb") as sink:
        write_value(sink, lazy_type, value)
    return path


def test_load_decodes_tag_only(tmp_path) -> None:
    """Loading should expose the tag before any payload is collected."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.VOID)

    with LazyData.load(leaf) as data:
        assert data.lazy_type is LazyType.VOID


def test_collect_string(tmp_path) -> None:
    """String leaves should collect as the original text."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.STRING, "Hello world!")

    assert LazyData.load(leaf).collect_string() == "Hello world!"


def test_collect_signed_and_unsigned(tmp_path) -> None:
    """Integer accessors should return the stored values."""
    signed_leaf = _write_leaf(tmp_path / "signed.ld", LazyType.I32, -1234)
    unsigned_leaf = _write_leaf(tmp_path / "unsigned.ld", LazyType.U32, 3908)

    values = (LazyData.load(signed_leaf).collect_i32(), LazyData.load(unsigned_leaf).collect_u32())

    assert values == (-1234, 3908)


def test_collect_f64(tmp_path) -> None:
    """Float accessors should return the stored value."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.F64, 123141234.1234)

    assert LazyData.load(leaf).collect_f64() == 123141234.1234


def test_collect_binary(tmp_path) -> None:
    """Binary leaves should collect the exact bytes."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.BINARY, bytes([12, 234, 48, 128]))

    assert LazyData.load(leaf).collect_binary() == bytes([12, 234, 48, 128])


def test_collect_bool(tmp_path) -> None:
    """Bool accessor should read both boolean tags."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.TRUE, True)

    assert LazyData.load(leaf).collect_bool() is True


def test_collect_array(tmp_path) -> None:
    """Array accessors should return element lists."""
    leaf = tmp_path / "data.ld"
    with leaf.open("wb") as sink:
        write_array(sink, LazyType.I8, [-128, 0, 127])

    assert LazyData.load(leaf).collect_i8_array() == [-128, 0, 127]


def test_collect_with_wrong_type_fails(tmp_path) -> None:
    """Collecting through another accessor should raise a type mismatch."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.U8, 21)

    with pytest.raises(LazyDBTypeMismatchError):
        LazyData.load(leaf).collect_string()


def test_handle_is_single_use(tmp_path) -> None:
    """A second collect should fail instead of returning a cached value."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.U8, 21)
    data = LazyData.load(leaf)
    data.collect_u8()

    with pytest.raises(LazyDBError):
        data.collect_u8()


def test_handle_is_consumed_after_failed_collect(tmp_path) -> None:
    """A failed collect should still release the file."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.U8, 21)
    data = LazyData.load(leaf)
    with pytest.raises(LazyDBTypeMismatchError):
        data.collect_as(LazyTag(LazyType.I8))

    assert data.consumed


def test_load_missing_file_fails_eagerly(tmp_path) -> None:
    """Missing leaves should fail at load, not at collect."""
    with pytest.raises(LazyDBNotFoundError):
        LazyData.load(tmp_path / "missing.ld")


def test_load_empty_file_is_malformed(tmp_path) -> None:
    """A leaf with no tag byte cannot be opened."""
    leaf = tmp_path / "empty.ld"
    leaf.write_bytes(b"")

    with pytest.raises(LazyDBMalformedPayloadError):
        LazyData.load(leaf)


def test_collect_reads_current_file_contents(tmp_path) -> None:
    """Handles should not cache: a new load sees a rewritten leaf."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.U8, 1)
    LazyData.load(leaf).collect_u8()
    leaf.write_bytes(encode_value(LazyType.U8, 2))

    assert LazyData.load(leaf).collect_u8() == 2


def test_collect_link_keeps_stored_text(tmp_path) -> None:
    """Links should collect as the exact stored path text."""
    leaf = _write_leaf(tmp_path / "data.ld", LazyType.LINK, "./people//Dave/")

    assert LazyData.load(leaf).collect_link() == "./people//Dave/"
