"""Runtime configuration model for LazyDB.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_LOG_LEVEL,
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import LazyDBConfigError


@dataclass(frozen=True)
class LazyDBConfig:
    """Validated runtime configuration.

    Attributes:
        compression_level: zstd level used when compiling archives.
        log_level: Minimum level emitted by structured logging.
    """

    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "LazyDBConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            LazyDBConfigError: If environment values are invalid.
        """
        level_value = os.getenv("LAZYDB_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
        log_level_value = os.getenv("LAZYDB_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        return cls(
            compression_level=_parse_compression_level(level_value),
            log_level=_parse_log_level(log_level_value),
        )


def _parse_compression_level(raw_value: str) -> int:
    """Parse the compression level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed zstd compression level.

    Raises:
        LazyDBConfigError: If value is not an integer in the zstd range.
    """
    try:
        level = int(raw_value)
    except ValueError as error:
        raise LazyDBConfigError(
            "Invalid LAZYDB_COMPRESSION_LEVEL value: "
            f"expected integer, got '{raw_value}'. "
            "Set LAZYDB_COMPRESSION_LEVEL to a numeric value."
        ) from error
    return validate_compression_level(level)


def validate_compression_level(level: int) -> int:
    """Check that a zstd compression level is in the supported range.

    Raises:
        LazyDBConfigError: If the level is out of range.
    """
    if not MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
        raise LazyDBConfigError(
            f"Invalid compression level {level}: expected a value in "
            f"[{MIN_COMPRESSION_LEVEL}, {MAX_COMPRESSION_LEVEL}]."
        )
    return level


def _parse_log_level(raw_value: str) -> str:
    """Normalize and validate the log level environment value."""
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise LazyDBConfigError(
            f"Invalid LAZYDB_LOG_LEVEL value: '{raw_value}'. "
            f"Use one of {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level
