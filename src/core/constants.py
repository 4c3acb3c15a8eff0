"""Core constants used across LazyDB modules.

This module centralizes reserved names, file suffixes and defaults.
Keeping values here avoids magic literals in storage logic.
"""

from __future__ import annotations

META_FILE_NAME = ".meta"
META_VERSION_LENGTH = 3
WORKING_DIR_SUFFIX = ".modb"
ARCHIVE_SUFFIX = ".ldb"
TEMP_PACK_SUFFIX = ".tmp.tar"
CONTAINER_SEPARATOR = "/"
LEAF_SEPARATOR = "::"
DEFAULT_COMPRESSION_LEVEL = 3
MIN_COMPRESSION_LEVEL = 1
MAX_COMPRESSION_LEVEL = 22
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
