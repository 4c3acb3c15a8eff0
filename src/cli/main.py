"""LazyDB CLI entry points.
This module exposes commands to create, inspect, read and write databases.
It maps argparse commands onto library calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import LazyDBConfig, validate_compression_level
from core.errors import LazyDBError, LazyDBValueError
from core.logging_config import configure_logging
from core.types import LazyTag, LazyType, array_tag
from store.data_path import parse_data_path, search_data, write_data, write_data_array
from store.database import LazyDB

_TYPE_NAMES = {
    "void": LazyType.VOID,
    "string": LazyType.STRING,
    "binary": LazyType.BINARY,
    "bool": LazyType.TRUE,
    "link": LazyType.LINK,
    **{lazy_type.name.lower(): lazy_type for lazy_type in LazyType if lazy_type.is_array_element},
}
_TRUE_WORDS = ("true", "1", "yes")
_FALSE_WORDS = ("false", "0", "no")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="lazydb", description="LazyDB storage CLI")
    parser.add_argument(
        "--compression-level",
        type=int,
        help="Override LAZYDB_COMPRESSION_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_init_command(subparsers)
    _add_info_command(subparsers)
    _add_get_command(subparsers)
    _add_set_command(subparsers)
    _add_compile_command(subparsers)
    _add_decompile_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the LazyDB CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.compression_level)
        configure_logging(config.log_level)
        if args.command == "init":
            return _run_init_command(config, args)
        if args.command == "info":
            return _run_info_command(config, args)
        if args.command == "get":
            return _run_get_command(config, args)
        if args.command == "set":
            return _run_set_command(config, args)
        if args.command == "compile":
            return _run_compile_command(config, args)
        if args.command == "decompile":
            return _run_decompile_command(config, args)
    except LazyDBError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(compression_level: int | None) -> LazyDBConfig:
    """Build config with optional compression-level override."""
    config = LazyDBConfig.from_env()
    if compression_level is not None:
        config = replace(
            config, compression_level=validate_compression_level(compression_level)
        )
    return config


def _open_database(path: str, config: LazyDBConfig) -> LazyDB:
    """Open an archive with ``load_db`` or a directory with ``load_dir``."""
    if Path(path).is_file():
        return LazyDB.load_db(path, config=config)
    return LazyDB.load_dir(path, config=config)


def _run_init_command(config: LazyDBConfig, args: argparse.Namespace) -> int:
    """Handle init command."""
    if args.compiled:
        with LazyDB.init_db(args.path, config=config) as database:
            archive_path = database.archive_path
        print(archive_path)
        return 0
    database = LazyDB.init(args.path, config=config)
    print(database.path)
    return 0


def _run_info_command(config: LazyDBConfig, args: argparse.Namespace) -> int:
    """Handle info command."""
    with _open_database(args.path, config) as database:
        root = database.as_container()
        print(f"version={database.version()}")
        print(f"form={'compiled' if database.compiled else 'directory'}")
        print(f"containers={','.join(root.child_names()) or '-'}")
        print(f"values={','.join(root.data_names()) or '-'}")
    return 0


def _run_get_command(config: LazyDBConfig, args: argparse.Namespace) -> int:
    """Handle get command."""
    lazy_type = _TYPE_NAMES[args.type]
    expected = array_tag(lazy_type) if args.array else LazyTag(lazy_type)
    with _open_database(args.database, config) as database:
        value = search_data(database, args.data_path).collect_as(expected)
    print(_render_value(lazy_type, value, args.array))
    return 0


def _run_set_command(config: LazyDBConfig, args: argparse.Namespace) -> int:
    """Handle set command."""
    lazy_type = _TYPE_NAMES[args.type]
    data_path = parse_data_path(args.data_path)
    with _open_database(args.database, config) as database:
        if args.array:
            values = [_parse_scalar(lazy_type, raw) for raw in args.values]
            write_data_array(database, data_path, lazy_type, values)
        else:
            write_data(database, data_path, lazy_type, _parse_single(lazy_type, args.values))
    print(data_path)
    return 0


def _run_compile_command(config: LazyDBConfig, args: argparse.Namespace) -> int:
    """Handle compile command."""
    database = LazyDB.load_dir(args.path, config=config)
    database.compile(args.out)
    print(args.out)
    return 0


def _run_decompile_command(config: LazyDBConfig, args: argparse.Namespace) -> int:
    """Handle decompile command."""
    LazyDB.decompile(args.archive, args.out)
    database = LazyDB.load_dir(args.out, config=config)
    print(database.path)
    return 0


def _parse_single(lazy_type: LazyType, raw_values: list[str]) -> Any:
    """Parse the single value of a scalar ``set``; void takes none."""
    if lazy_type is LazyType.VOID:
        if raw_values:
            raise LazyDBValueError("Void values take no VALUE argument.")
        return None
    if len(raw_values) != 1:
        raise LazyDBValueError(
            f"Expected exactly one value for {lazy_type.name}, got {len(raw_values)}. "
            "Pass --array to write several values."
        )
    return _parse_scalar(lazy_type, raw_values[0])


def _parse_scalar(lazy_type: LazyType, raw_value: str) -> Any:
    """Parse a command-line string into a value of ``lazy_type``."""
    try:
        if lazy_type.is_int:
            return int(raw_value, 0)
        if lazy_type.is_float:
            return float(raw_value)
        if lazy_type is LazyType.BINARY:
            return bytes.fromhex(raw_value)
    except ValueError as error:
        raise LazyDBValueError(
            f"Cannot parse '{raw_value}' as {lazy_type.name}: {error}."
        ) from error
    if lazy_type.is_bool:
        return _parse_bool(raw_value)
    return raw_value


def _parse_bool(raw_value: str) -> bool:
    """Parse a boolean word."""
    word = raw_value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise LazyDBValueError(f"Cannot parse '{raw_value}' as bool; use true or false.")


def _render_value(lazy_type: LazyType, value: Any, is_array: bool) -> str:
    """Render a collected value for stdout."""
    if is_array:
        return " ".join(str(item) for item in value)
    if lazy_type is LazyType.VOID:
        return "void"
    if lazy_type.is_bool:
        return "true" if value else "false"
    if lazy_type is LazyType.BINARY:
        return value.hex()
    return str(value)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Database directory or .ldb archive")


def _add_type_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--type", required=True, choices=sorted(_TYPE_NAMES), help="Value type")
    parser.add_argument(
        "--array",
        action="store_true",
        help="Treat the value as an array of --type elements",
    )


def _add_init_command(subparsers: Any) -> None:
    """Register init subcommand."""
    parser = subparsers.add_parser("init", help="Initialize a database")
    parser.add_argument("path", help="Database directory, or archive path with --compiled")
    parser.add_argument(
        "--compiled",
        action="store_true",
        help="Create a compiled .ldb archive instead of a plain directory",
    )


def _add_info_command(subparsers: Any) -> None:
    """Register info subcommand."""
    parser = subparsers.add_parser("info", help="Show version and root listing")
    _add_path_argument(parser)


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Read a value, e.g. people/Dave::age")
    parser.add_argument("database", help="Database directory or .ldb archive")
    parser.add_argument("data_path", help="Container path and leaf, e.g. people/Dave::age")
    _add_type_arguments(parser)


def _add_set_command(subparsers: Any) -> None:
    """Register set subcommand."""
    parser = subparsers.add_parser("set", help="Write a value, creating missing containers")
    parser.add_argument("database", help="Database directory or .ldb archive")
    parser.add_argument("data_path", help="Container path and leaf, e.g. people/Dave::age")
    _add_type_arguments(parser)
    parser.add_argument("values", nargs="*", help="Value(s); binary values are hex")


def _add_compile_command(subparsers: Any) -> None:
    """Register compile subcommand."""
    parser = subparsers.add_parser("compile", help="Compile a directory into an archive")
    _add_path_argument(parser)
    parser.add_argument("out", help="Output archive path")


def _add_decompile_command(subparsers: Any) -> None:
    """Register decompile subcommand."""
    parser = subparsers.add_parser("decompile", help="Decompile an archive into a directory")
    parser.add_argument("archive", help="Input .ldb archive")
    parser.add_argument("out", help="Output directory")
