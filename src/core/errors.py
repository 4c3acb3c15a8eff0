"""LazyDB exception hierarchy.

This module defines traceable storage errors with clear boundaries.
Each failure mode raises a specific error type so callers can decide
whether to retry with the original request parameters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.version import Version


class LazyDBError(Exception):
    """Base exception for all LazyDB failures."""


class LazyDBConfigError(LazyDBError):
    """Raised for invalid runtime configuration."""


class LazyDBIOError(LazyDBError):
    """Raised when a filesystem or archive backend operation fails."""


class LazyDBNotFoundError(LazyDBError):
    """Raised when a database path, container, or leaf value is absent."""


class LazyDBValueError(LazyDBError):
    """Raised when a value or name cannot be encoded as requested."""


class LazyDBTypeMismatchError(LazyDBError):
    """Raised when a stored type tag disagrees with the requested type."""


class LazyDBMalformedPayloadError(LazyDBError):
    """Raised when stored bytes cannot be decoded as their declared type."""


class LazyDBMissingMetadataError(LazyDBError):
    """Raised when a database directory has no metadata leaf."""


class LazyDBCorruptMetadataError(LazyDBError):
    """Raised when the metadata leaf is not a 3-byte version stamp."""


class LazyDBIncompatibleVersionError(LazyDBError):
    """Raised when a stored format version has a different major version."""

    def __init__(self, stored: Version, running: Version) -> None:
        super().__init__(
            f"Database format version {stored} is incompatible with running version {running}. "
            "Open it with a LazyDB release that shares the same major version."
        )
        self.stored = stored
        self.running = running
