"""Lazy value handles.

A ``LazyData`` opens a leaf file and decodes only its type tag. The
payload is read and decoded once, when the caller asks for a concrete
type. Nothing is memoized; callers that want caching build it outside.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO

from core.errors import LazyDBError, LazyDBIOError, LazyDBNotFoundError
from core.types import LazyTag, LazyType, array_tag
from store.value_codec import decode_payload, read_tag


class LazyData:
    """Single-use view over an open leaf file and its decoded tag."""

    def __init__(self, path: Path, source: BinaryIO, tag: LazyTag) -> None:
        self._path = path
        self._source: BinaryIO | None = source
        self.tag = tag

    @classmethod
    def load(cls, path: str | Path) -> "LazyData":
        """Open a leaf file and eagerly decode its tag.

        Args:
            path: Leaf file path.

        Returns:
            Handle positioned at the start of the payload.

        Raises:
            LazyDBNotFoundError: If the file does not exist.
            LazyDBIOError: If the file cannot be opened or read.
            LazyDBMalformedPayloadError: If the tag is missing or unknown.
        """
        leaf_path = Path(path)
        try:
            source = leaf_path.open("rb")
        except FileNotFoundError as error:
            raise LazyDBNotFoundError(f"Leaf value '{leaf_path}' not found.") from error
        except OSError as error:
            raise LazyDBIOError(f"Failed to open leaf value '{leaf_path}': {error}.") from error
        try:
            tag = read_tag(source)
        except OSError as error:
            source.close()
            raise LazyDBIOError(f"Failed to read leaf value '{leaf_path}': {error}.") from error
        except LazyDBError:
            source.close()
            raise
        return cls(leaf_path, source, tag)

    @property
    def lazy_type(self) -> LazyType:
        """Leading type tag of the stored value."""
        return self.tag.lazy_type

    @property
    def path(self) -> Path:
        return self._path

    @property
    def consumed(self) -> bool:
        """Whether the handle was collected or closed."""
        return self._source is None

    def collect_as(self, expected: LazyTag) -> Any:
        """Read the remaining payload and decode it as ``expected``.

        The handle is consumed even when decoding fails.

        Raises:
            LazyDBError: If the handle was already consumed.
            LazyDBIOError: If reading the payload fails.
            LazyDBTypeMismatchError: If the stored tag differs from ``expected``.
            LazyDBMalformedPayloadError: If the payload does not fit the type.
        """
        source = self._take_source()
        try:
            payload = source.read()
        except OSError as error:
            raise LazyDBIOError(f"Failed to read leaf value '{self._path}': {error}.") from error
        finally:
            source.close()
        return decode_payload(self.tag, payload, expected)

    def close(self) -> None:
        """Release the file without collecting."""
        if self._source is not None:
            self._source.close()
            self._source = None

    def __enter__(self) -> "LazyData":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LazyData(path={str(self._path)!r}, tag={self.tag})"

    def _take_source(self) -> BinaryIO:
        if self._source is None:
            raise LazyDBError(
                f"Leaf value '{self._path}' was already collected; load it again to re-read."
            )
        source, self._source = self._source, None
        return source

    def collect_void(self) -> None:
        return self.collect_as(LazyTag(LazyType.VOID))

    def collect_string(self) -> str:
        return self.collect_as(LazyTag(LazyType.STRING))

    def collect_binary(self) -> bytes:
        return self.collect_as(LazyTag(LazyType.BINARY))

    def collect_bool(self) -> bool:
        """Collect a boolean stored under either boolean tag."""
        return self.collect_as(LazyTag(LazyType.TRUE))

    def collect_link(self) -> str:
        """Collect the stored link path text; the link is not followed."""
        return self.collect_as(LazyTag(LazyType.LINK))

    # Signed integers
    def collect_i8(self) -> int:
        return self.collect_as(LazyTag(LazyType.I8))

    def collect_i16(self) -> int:
        return self.collect_as(LazyTag(LazyType.I16))

    def collect_i32(self) -> int:
        return self.collect_as(LazyTag(LazyType.I32))

    def collect_i64(self) -> int:
        return self.collect_as(LazyTag(LazyType.I64))

    def collect_i128(self) -> int:
        return self.collect_as(LazyTag(LazyType.I128))

    # Unsigned integers
    def collect_u8(self) -> int:
        return self.collect_as(LazyTag(LazyType.U8))

    def collect_u16(self) -> int:
        return self.collect_as(LazyTag(LazyType.U16))

    def collect_u32(self) -> int:
        return self.collect_as(LazyTag(LazyType.U32))

    def collect_u64(self) -> int:
        return self.collect_as(LazyTag(LazyType.U64))

    def collect_u128(self) -> int:
        return self.collect_as(LazyTag(LazyType.U128))

    # Floats
    def collect_f32(self) -> float:
        return self.collect_as(LazyTag(LazyType.F32))

    def collect_f64(self) -> float:
        return self.collect_as(LazyTag(LazyType.F64))

    # Arrays
    def collect_i8_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.I8))

    def collect_i16_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.I16))

    def collect_i32_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.I32))

    def collect_i64_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.I64))

    def collect_i128_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.I128))

    def collect_u8_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.U8))

    def collect_u16_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.U16))

    def collect_u32_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.U32))

    def collect_u64_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.U64))

    def collect_u128_array(self) -> list[int]:
        return self.collect_as(array_tag(LazyType.U128))

    def collect_f32_array(self) -> list[float]:
        return self.collect_as(array_tag(LazyType.F32))

    def collect_f64_array(self) -> list[float]:
        return self.collect_as(array_tag(LazyType.F64))
