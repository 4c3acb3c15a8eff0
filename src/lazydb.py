"""Public SDK surface for LazyDB.

This module provides a stable import path for library users.
It re-exports the database handle, containers, lazy values and errors.
"""

from __future__ import annotations

from core.config import LazyDBConfig
from core.errors import (
    LazyDBConfigError,
    LazyDBCorruptMetadataError,
    LazyDBError,
    LazyDBIncompatibleVersionError,
    LazyDBIOError,
    LazyDBMalformedPayloadError,
    LazyDBMissingMetadataError,
    LazyDBNotFoundError,
    LazyDBTypeMismatchError,
    LazyDBValueError,
)
from core.logging_config import configure_logging
from core.types import LazyTag, LazyType, array_tag
from core.version import FORMAT_VERSION, Version
from store.container import LazyContainer
from store.data_path import (
    DataPath,
    parse_data_path,
    search_container,
    search_data,
    write_data,
    write_data_array,
)
from store.database import LazyDB
from store.lazy_data import LazyData
from store.lazy_object import LazyObject
from store.value_codec import decode_value, encode_array, encode_value

__all__ = [
    "DataPath",
    "FORMAT_VERSION",
    "LazyContainer",
    "LazyData",
    "LazyDB",
    "LazyDBConfig",
    "LazyDBConfigError",
    "LazyDBCorruptMetadataError",
    "LazyDBError",
    "LazyDBIOError",
    "LazyDBIncompatibleVersionError",
    "LazyDBMalformedPayloadError",
    "LazyDBMissingMetadataError",
    "LazyDBNotFoundError",
    "LazyDBTypeMismatchError",
    "LazyDBValueError",
    "LazyObject",
    "LazyTag",
    "LazyType",
    "Version",
    "array_tag",
    "configure_logging",
    "decode_value",
    "encode_array",
    "encode_value",
    "parse_data_path",
    "search_container",
    "search_data",
    "write_data",
    "write_data_array",
]
