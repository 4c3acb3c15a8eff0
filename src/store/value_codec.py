"""Typed value codec.

This module maps a single typed value onto ``[tag byte(s)][payload]``.
Payloads carry no length prefix: numbers are fixed-width, text and bytes
run to end of stream, and arrays repeat a fixed-width element to the end.
"""

from __future__ import annotations

import os
import struct
from typing import Any, BinaryIO, Callable, Iterable

from core.errors import (
    LazyDBMalformedPayloadError,
    LazyDBTypeMismatchError,
    LazyDBValueError,
)
from core.types import LazyTag, LazyType

_FLOAT_FORMATS = {LazyType.F32: ">f", LazyType.F64: ">d"}


def encode_value(lazy_type: LazyType, value: Any = None) -> bytes:
    """Encode a scalar value with its tag.

    Either boolean tag selects the boolean encoding; the stored tag is
    ``TRUE`` or ``FALSE`` according to ``value``.

    Args:
        lazy_type: Declared type of the value.
        value: Python value to encode; ``None`` for void.

    Returns:
        Tag bytes followed by the payload.

    Raises:
        LazyDBValueError: If the value does not fit the declared type.
    """
    if lazy_type is LazyType.ARRAY:
        raise LazyDBValueError("Array values must be encoded with encode_array.")
    if lazy_type.is_bool:
        if not isinstance(value, bool):
            raise LazyDBValueError(f"Expected bool value, got {type(value).__name__}.")
        return bytes((LazyType.TRUE if value else LazyType.FALSE,))
    payload = _ENCODERS[lazy_type](lazy_type, value)
    return bytes((lazy_type,)) + payload


def encode_array(element_type: LazyType, values: Iterable[Any]) -> bytes:
    """Encode a homogeneous fixed-width array with its two-byte tag.

    Raises:
        LazyDBValueError: If the element type is not fixed-width or an
            element does not fit it.
    """
    if not element_type.is_array_element:
        raise LazyDBValueError(
            f"Arrays of {element_type.name} are not supported; "
            "only fixed-width integer and float elements can be stored."
        )
    encoder = _ENCODERS[element_type]
    parts = [LazyTag(LazyType.ARRAY, element_type).header]
    parts.extend(encoder(element_type, value) for value in values)
    return b"".join(parts)


def write_value(sink: BinaryIO, lazy_type: LazyType, value: Any = None) -> None:
    """Write an encoded scalar value to a binary sink."""
    sink.write(encode_value(lazy_type, value))


def write_array(sink: BinaryIO, element_type: LazyType, values: Iterable[Any]) -> None:
    """Write an encoded array value to a binary sink."""
    sink.write(encode_array(element_type, values))


def decode_tag(data: bytes) -> tuple[LazyTag, int]:
    """Decode only the leading tag bytes.

    Args:
        data: Encoded value, or at least its first two bytes.

    Returns:
        Pair of decoded tag and the number of header bytes it occupies.

    Raises:
        LazyDBMalformedPayloadError: If the tag is missing or unknown.
    """
    if not data:
        raise LazyDBMalformedPayloadError("Value is empty: missing type tag.")
    lazy_type = _lazy_type_from_byte(data[0])
    if lazy_type is not LazyType.ARRAY:
        return LazyTag(lazy_type), 1
    if len(data) < 2:
        raise LazyDBMalformedPayloadError("Array value is missing its element type tag.")
    element_type = _lazy_type_from_byte(data[1])
    if not element_type.is_array_element:
        raise LazyDBMalformedPayloadError(
            f"Array element type {element_type.name} is not a fixed-width type."
        )
    return LazyTag(lazy_type, element_type), 2


def read_tag(source: BinaryIO) -> LazyTag:
    """Read the tag bytes from a stream, leaving it positioned at the payload."""
    head = source.read(1)
    if head and head[0] == LazyType.ARRAY:
        head += source.read(1)
    tag, _ = decode_tag(head)
    return tag


def decode_payload(stored: LazyTag, payload: bytes, expected: LazyTag) -> Any:
    """Decode a payload after checking its stored tag.

    Args:
        stored: Tag read from the value header.
        payload: Bytes following the header.
        expected: Tag the caller asks for. Either boolean tag accepts
            both stored boolean tags.

    Returns:
        Decoded Python value.

    Raises:
        LazyDBTypeMismatchError: If ``stored`` disagrees with ``expected``.
        LazyDBMalformedPayloadError: If the payload does not fit the type.
    """
    _check_tag(stored, expected)
    if stored.element_type is not None:
        return _decode_array(stored.element_type, payload)
    return _DECODERS[stored.lazy_type](stored.lazy_type, payload)


def decode_value(data: bytes, expected: LazyTag) -> Any:
    """Decode a complete encoded value as ``expected``."""
    stored, header_length = decode_tag(data)
    return decode_payload(stored, data[header_length:], expected)


def _check_tag(stored: LazyTag, expected: LazyTag) -> None:
    if expected.lazy_type.is_bool and stored.lazy_type.is_bool:
        return
    if stored != expected:
        raise LazyDBTypeMismatchError(
            f"Stored value has type '{stored}', but '{expected}' was requested."
        )


def _lazy_type_from_byte(tag_byte: int) -> LazyType:
    try:
        return LazyType(tag_byte)
    except ValueError as error:
        raise LazyDBMalformedPayloadError(f"Unknown type tag byte {tag_byte}.") from error


def _encode_void(lazy_type: LazyType, value: Any) -> bytes:
    if value is not None:
        raise LazyDBValueError("Void values carry no payload; pass None.")
    return b""


def _encode_string(lazy_type: LazyType, value: Any) -> bytes:
    if not isinstance(value, str):
        raise LazyDBValueError(f"Expected str value, got {type(value).__name__}.")
    return _encode_text(lazy_type, value)


def _encode_binary(lazy_type: LazyType, value: Any) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise LazyDBValueError(f"Expected bytes-like value, got {type(value).__name__}.")
    return bytes(value)


def _encode_link(lazy_type: LazyType, value: Any) -> bytes:
    try:
        path = os.fspath(value)
    except TypeError as error:
        raise LazyDBValueError(f"Expected path-like value, got {type(value).__name__}.") from error
    if isinstance(path, bytes):
        try:
            path.decode("utf-8")
        except UnicodeDecodeError as error:
            raise LazyDBValueError(
                f"LINK path bytes are not valid UTF-8: {error.reason}."
            ) from error
        return path
    return _encode_text(lazy_type, path)


def _encode_text(lazy_type: LazyType, text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as error:
        raise LazyDBValueError(
            f"{lazy_type.name} value cannot be encoded as UTF-8: {error.reason}."
        ) from error


def _encode_integer(lazy_type: LazyType, value: Any) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise LazyDBValueError(
            f"Expected int value for {lazy_type.name}, got {type(value).__name__}."
        )
    try:
        return value.to_bytes(_width(lazy_type), "big", signed=lazy_type.is_signed)
    except OverflowError as error:
        raise LazyDBValueError(f"Value {value} does not fit in {lazy_type.name}.") from error


def _encode_float(lazy_type: LazyType, value: Any) -> bytes:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LazyDBValueError(
            f"Expected float value for {lazy_type.name}, got {type(value).__name__}."
        )
    try:
        return struct.pack(_FLOAT_FORMATS[lazy_type], value)
    except (OverflowError, struct.error) as error:
        raise LazyDBValueError(f"Value {value} does not fit in {lazy_type.name}.") from error


def _decode_void(lazy_type: LazyType, payload: bytes) -> None:
    _require_length(lazy_type, payload, 0)
    return None


def _decode_bool(lazy_type: LazyType, payload: bytes) -> bool:
    _require_length(lazy_type, payload, 0)
    return lazy_type is LazyType.TRUE


def _decode_text(lazy_type: LazyType, payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as error:
        raise LazyDBMalformedPayloadError(
            f"{lazy_type.name} payload is not valid UTF-8: {error.reason}."
        ) from error


def _decode_link(lazy_type: LazyType, payload: bytes) -> str:
    return _decode_text(lazy_type, payload)


def _decode_binary(lazy_type: LazyType, payload: bytes) -> bytes:
    return bytes(payload)


def _decode_integer(lazy_type: LazyType, payload: bytes) -> int:
    _require_length(lazy_type, payload, _width(lazy_type))
    return int.from_bytes(payload, "big", signed=lazy_type.is_signed)


def _decode_float(lazy_type: LazyType, payload: bytes) -> float:
    _require_length(lazy_type, payload, _width(lazy_type))
    (value,) = struct.unpack(_FLOAT_FORMATS[lazy_type], payload)
    return value


def _decode_array(element_type: LazyType, payload: bytes) -> list[Any]:
    width = _width(element_type)
    if len(payload) % width:
        raise LazyDBMalformedPayloadError(
            f"{element_type.name} array payload of {len(payload)} bytes "
            f"is not a multiple of the {width}-byte element width."
        )
    decoder = _DECODERS[element_type]
    return [
        decoder(element_type, payload[start : start + width])
        for start in range(0, len(payload), width)
    ]


def _width(lazy_type: LazyType) -> int:
    width = lazy_type.width
    if width is None:
        raise LazyDBValueError(f"{lazy_type.name} is not a fixed-width type.")
    return width


def _require_length(lazy_type: LazyType, payload: bytes, expected: int) -> None:
    if len(payload) != expected:
        raise LazyDBMalformedPayloadError(
            f"{lazy_type.name} payload must be {expected} bytes, got {len(payload)}."
        )


_Encoder = Callable[[LazyType, Any], bytes]
_Decoder = Callable[[LazyType, bytes], Any]

_ENCODERS: dict[LazyType, _Encoder] = {
    LazyType.VOID: _encode_void,
    LazyType.STRING: _encode_string,
    LazyType.BINARY: _encode_binary,
    LazyType.LINK: _encode_link,
    LazyType.F32: _encode_float,
    LazyType.F64: _encode_float,
}
_DECODERS: dict[LazyType, _Decoder] = {
    LazyType.VOID: _decode_void,
    LazyType.STRING: _decode_text,
    LazyType.BINARY: _decode_binary,
    LazyType.LINK: _decode_link,
    LazyType.TRUE: _decode_bool,
    LazyType.FALSE: _decode_bool,
    LazyType.F32: _decode_float,
    LazyType.F64: _decode_float,
}
for _integer_type in LazyType:
    if _integer_type.is_int:
        _ENCODERS[_integer_type] = _encode_integer
        _DECODERS[_integer_type] = _decode_integer
del _integer_type
