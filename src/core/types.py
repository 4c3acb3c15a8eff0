"""Shared typed models.

This module defines the closed set of value type tags used by the codec,
lazy handles and containers to keep the on-disk contract explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class LazyType(IntEnum):
    """Discriminant byte stored at the front of every leaf value."""

    VOID = 0
    STRING = 1
    I8 = 2
    I16 = 3
    I32 = 4
    I64 = 5
    I128 = 6
    U8 = 7
    U16 = 8
    U32 = 9
    U64 = 10
    U128 = 11
    F32 = 12
    F64 = 13
    BINARY = 14
    TRUE = 15
    FALSE = 16
    LINK = 17
    ARRAY = 18

    @property
    def width(self) -> int | None:
        """Payload width in bytes for fixed-width numbers, else ``None``."""
        return _NUMBER_WIDTHS.get(self)

    @property
    def is_int(self) -> bool:
        return self in _SIGNED_TYPES or self in _UNSIGNED_TYPES

    @property
    def is_signed(self) -> bool:
        return self in _SIGNED_TYPES

    @property
    def is_float(self) -> bool:
        return self in (LazyType.F32, LazyType.F64)

    @property
    def is_bool(self) -> bool:
        return self in (LazyType.TRUE, LazyType.FALSE)

    @property
    def is_array_element(self) -> bool:
        """Whether arrays may hold this type (fixed-width numbers only)."""
        return self.width is not None


_SIGNED_TYPES = frozenset(
    (LazyType.I8, LazyType.I16, LazyType.I32, LazyType.I64, LazyType.I128)
)
_UNSIGNED_TYPES = frozenset(
    (LazyType.U8, LazyType.U16, LazyType.U32, LazyType.U64, LazyType.U128)
)
_NUMBER_WIDTHS = {
    LazyType.I8: 1,
    LazyType.I16: 2,
    LazyType.I32: 4,
    LazyType.I64: 8,
    LazyType.I128: 16,
    LazyType.U8: 1,
    LazyType.U16: 2,
    LazyType.U32: 4,
    LazyType.U64: 8,
    LazyType.U128: 16,
    LazyType.F32: 4,
    LazyType.F64: 8,
}


@dataclass(frozen=True)
class LazyTag:
    """Decoded type tag of a stored value.

    Attributes:
        lazy_type: Leading tag byte.
        element_type: Element tag for arrays, ``None`` otherwise.
    """

    lazy_type: LazyType
    element_type: LazyType | None = None

    @property
    def is_array(self) -> bool:
        return self.lazy_type is LazyType.ARRAY

    @property
    def header(self) -> bytes:
        """Encoded tag bytes as written before the payload."""
        if self.element_type is None:
            return bytes((self.lazy_type,))
        return bytes((self.lazy_type, self.element_type))

    def __str__(self) -> str:
        if self.element_type is None:
            return self.lazy_type.name.lower()
        return f"{self.element_type.name.lower()}_array"


def array_tag(element_type: LazyType) -> LazyTag:
    """Return the tag of an array holding ``element_type`` elements."""
    return LazyTag(LazyType.ARRAY, element_type)
