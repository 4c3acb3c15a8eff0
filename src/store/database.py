"""Database lifecycle.

This module owns a database root directory and its version stamp. A
database is either a plain directory, or a working directory decompiled
from a ``.ldb`` archive that is recompiled and removed on ``close``.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from types import TracebackType

from core.config import LazyDBConfig
from core.constants import ARCHIVE_SUFFIX, META_FILE_NAME, TEMP_PACK_SUFFIX, WORKING_DIR_SUFFIX
from core.errors import (
    LazyDBCorruptMetadataError,
    LazyDBError,
    LazyDBIncompatibleVersionError,
    LazyDBIOError,
    LazyDBMalformedPayloadError,
    LazyDBMissingMetadataError,
    LazyDBNotFoundError,
    LazyDBTypeMismatchError,
)
from core.logging_config import get_logger
from core.types import LazyType
from core.version import FORMAT_VERSION, Version
from store.archive import compress_file, decompress_file, pack_directory, unpack_archive
from store.container import LazyContainer
from store.lazy_data import LazyData
from store.value_codec import write_value

_LOGGER = get_logger(__name__)


class LazyDB:
    """Root handle of a lazy database.

    A compiled handle exclusively owns its working directory: ``close``
    repacks it into the archive and deletes it. Two live compiled handles
    over the same archive are not supported.
    """

    def __init__(self, path: Path, compiled: bool, config: LazyDBConfig | None = None) -> None:
        self._path = path
        self._compiled = compiled
        self._closed = False
        self._config = config or LazyDBConfig.from_env()

    @classmethod
    def init(cls, path: str | Path, config: LazyDBConfig | None = None) -> "LazyDB":
        """Initialize a database directory at ``path``.

        Creates the directory (with parents) if missing and writes the
        running format version to ``.meta`` if no stamp exists yet. A
        database initialized this way is never compiled on close; use
        ``init_db`` for the archive form.

        Args:
            path: Database directory.
            config: Optional runtime config; read from env when omitted.

        Returns:
            Directory-form database handle.

        Raises:
            LazyDBIOError: If the directory or stamp cannot be written.
        """
        db_path = Path(path)
        try:
            db_path.mkdir(parents=True, exist_ok=True)
            meta_path = db_path / META_FILE_NAME
            if not meta_path.is_file():
                with meta_path.open("wb") as sink:
                    write_value(sink, LazyType.BINARY, FORMAT_VERSION.to_bytes())
        except OSError as error:
            raise LazyDBIOError(f"Failed to initialize database at {db_path}: {error}.") from error
        _LOGGER.info("database_initialized", path=str(db_path), version=str(FORMAT_VERSION))
        return cls(db_path.resolve(), compiled=False, config=config)

    @classmethod
    def init_db(cls, path: str | Path, config: LazyDBConfig | None = None) -> "LazyDB":
        """Initialize a database that compiles to ``path`` (``.ldb``) on close.

        The working directory is ``path`` with the ``.modb`` suffix.
        """
        database = cls.init(working_dir_for(Path(path)), config=config)
        database._compiled = True
        return database

    @classmethod
    def load_dir(cls, path: str | Path, config: LazyDBConfig | None = None) -> "LazyDB":
        """Load an existing database directory after checking its version.

        Raises:
            LazyDBNotFoundError: If ``path`` is not a directory.
            LazyDBMissingMetadataError: If ``.meta`` is missing.
            LazyDBCorruptMetadataError: If ``.meta`` is not a 3-byte stamp.
            LazyDBIncompatibleVersionError: If the stored major differs.
        """
        db_path = Path(path)
        if not db_path.is_dir():
            raise LazyDBNotFoundError(f"Database directory '{db_path}' not found.")
        stored = read_version_stamp(db_path)
        if not FORMAT_VERSION.is_compatible(stored):
            raise LazyDBIncompatibleVersionError(stored, FORMAT_VERSION)
        _LOGGER.info("database_loaded", path=str(db_path), version=str(stored))
        return cls(db_path.resolve(), compiled=False, config=config)

    @classmethod
    def load_db(cls, path: str | Path, config: LazyDBConfig | None = None) -> "LazyDB":
        """Load a compiled database archive for editing.

        When a working directory from an earlier session still exists
        beside the archive it is reused as is, without decompiling and
        without checking that it matches the archive.

        Raises:
            LazyDBNotFoundError: If neither the archive nor a working
                directory exists.
            LazyDBIOError: If decompiling fails.
        """
        archive_path = Path(path)
        working_dir = working_dir_for(archive_path)
        if working_dir.is_dir():
            _LOGGER.info("working_dir_reused", path=str(working_dir))
        else:
            cls.decompile(archive_path, working_dir)
        database = cls.load_dir(working_dir, config=config)
        database._compiled = True
        return database

    @property
    def path(self) -> Path:
        return self._path

    @property
    def compiled(self) -> bool:
        """Whether ``close`` recompiles the archive and removes ``path``."""
        return self._compiled

    @property
    def archive_path(self) -> Path:
        return archive_path_for(self._path)

    def as_container(self) -> LazyContainer:
        """Return the root container."""
        return LazyContainer.load(self._path)

    def version(self) -> Version:
        """Read the version stamp stored in ``.meta``."""
        return read_version_stamp(self._path)

    def compile(self, out_path: str | Path) -> None:
        """Pack and compress the database directory into ``out_path``.

        The directory itself is left in place.

        Raises:
            LazyDBIOError: If packing, compressing or cleanup fails.
        """
        target = Path(out_path)
        tar_path = self._path.with_suffix(TEMP_PACK_SUFFIX)
        pack_directory(self._path, tar_path)
        compress_file(tar_path, target, level=self._config.compression_level)
        _remove_file(tar_path)
        _LOGGER.info("database_compiled", path=str(self._path), archive=str(target))

    @staticmethod
    def decompile(path: str | Path, out_path: str | Path) -> None:
        """Decompress and unpack an archive into ``out_path``.

        The archive itself is left in place.

        Raises:
            LazyDBNotFoundError: If the archive does not exist.
            LazyDBIOError: If decompressing, unpacking or cleanup fails.
        """
        archive_path = Path(path)
        if not archive_path.is_file():
            raise LazyDBNotFoundError(f"Database archive '{archive_path}' not found.")
        tar_path = archive_path.with_suffix(TEMP_PACK_SUFFIX)
        decompress_file(archive_path, tar_path)
        unpack_archive(tar_path, Path(out_path))
        _remove_file(tar_path)
        _LOGGER.info("database_decompiled", archive=str(archive_path), path=str(out_path))

    def close(self) -> None:
        """Dispose of the handle.

        A compiled database is recompiled into its archive and its working
        directory removed. If compiling fails the error is logged and
        swallowed, and the working directory is kept so no data is lost;
        the archive is then stale. Closing twice is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        if not self._compiled:
            return
        try:
            self.compile(self.archive_path)
        except LazyDBError as error:
            _LOGGER.warning(
                "database_dispose_failed",
                path=str(self._path),
                archive=str(self.archive_path),
                error=str(error),
            )
            return
        try:
            shutil.rmtree(self._path)
        except OSError as error:
            _LOGGER.warning("working_dir_remove_failed", path=str(self._path), error=str(error))
            return
        _LOGGER.info("working_dir_removed", path=str(self._path))

    def __enter__(self) -> "LazyDB":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LazyDB(path={str(self._path)!r}, compiled={self._compiled})"


def working_dir_for(path: Path) -> Path:
    """Return the working directory derived from an archive path."""
    return path.with_suffix(WORKING_DIR_SUFFIX)


def archive_path_for(path: Path) -> Path:
    """Return the archive path derived from a working directory."""
    return path.with_suffix(ARCHIVE_SUFFIX)


def read_version_stamp(db_path: Path) -> Version:
    """Read and validate the ``.meta`` version stamp of a database directory.

    Raises:
        LazyDBMissingMetadataError: If ``.meta`` is missing.
        LazyDBCorruptMetadataError: If ``.meta`` is not a 3-byte binary value.
    """
    meta_path = db_path / META_FILE_NAME
    if not meta_path.is_file():
        raise LazyDBMissingMetadataError(
            f"Metadata file '{meta_path}' not found; '{db_path}' is not a LazyDB database."
        )
    try:
        stamp = LazyData.load(meta_path).collect_binary()
    except (LazyDBTypeMismatchError, LazyDBMalformedPayloadError) as error:
        raise LazyDBCorruptMetadataError(
            f"Metadata file '{meta_path}' does not hold a binary version stamp: {error}"
        ) from error
    try:
        return Version.from_bytes(stamp)
    except LazyDBCorruptMetadataError as error:
        raise LazyDBCorruptMetadataError(f"Metadata file '{meta_path}' is corrupt: {error}") from error


def _remove_file(path: Path) -> None:
    try:
        path.unlink()
    except OSError as error:
        raise LazyDBIOError(f"Failed to remove temporary pack {path}: {error}.") from error
