"""Database format version and compatibility gate."""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import META_VERSION_LENGTH
from core.errors import LazyDBCorruptMetadataError, LazyDBValueError


@dataclass(frozen=True, order=True)
class Version:
    """Three-component format version stamp.

    Attributes:
        major: Bumped on any breaking on-disk format change.
        minor: Additive, backward-readable changes.
        build: Fixes with no format impact.
    """

    major: int
    minor: int
    build: int

    def __post_init__(self) -> None:
        for component in (self.major, self.minor, self.build):
            if not 0 <= component <= 0xFF:
                raise LazyDBValueError(
                    f"Version component {component} does not fit in one byte."
                )

    def is_compatible(self, other: "Version") -> bool:
        """Return whether two versions share the same major component."""
        return self.major == other.major

    def to_bytes(self) -> bytes:
        """Return the 3-byte ``[major, minor, build]`` stamp."""
        return bytes((self.major, self.minor, self.build))

    @classmethod
    def from_bytes(cls, stamp: bytes) -> "Version":
        """Parse a 3-byte version stamp.

        Raises:
            LazyDBCorruptMetadataError: If the stamp is not exactly 3 bytes.
        """
        if len(stamp) != META_VERSION_LENGTH:
            raise LazyDBCorruptMetadataError(
                f"Version stamp must be {META_VERSION_LENGTH} bytes, got {len(stamp)}."
            )
        return cls(stamp[0], stamp[1], stamp[2])

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}"


FORMAT_VERSION = Version(1, 2, 1)
