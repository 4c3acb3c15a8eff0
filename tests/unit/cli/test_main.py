"""Unit tests for CLI command handling."""

from __future__ import annotations

from cli.main import main


def test_cli_init_creates_directory(tmp_path, capsys) -> None:
    """CLI init should print the created database path."""
    exit_code = main(["init", str(tmp_path / "db")])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and output == str((tmp_path / "db").resolve())


def test_cli_set_then_get(tmp_path, capsys) -> None:
    """CLI set should write a value that get prints back."""
    db_path = str(tmp_path / "db")
    main(["init", db_path])
    main(["set", db_path, "people/Dave::age", "--type", "u8", "21"])
    capsys.readouterr()

    exit_code = main(["get", db_path, "people/Dave::age", "--type", "u8"])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and output == "21"


def test_cli_get_with_wrong_type_reports_error(tmp_path, capsys) -> None:
    """A type mismatch should print an error and exit with 1."""
    db_path = str(tmp_path / "db")
    main(["init", db_path])
    main(["set", db_path, "people/Dave::age", "--type", "u8", "21"])
    capsys.readouterr()

    exit_code = main(["get", db_path, "people/Dave::age", "--type", "string"])
    output = capsys.readouterr().out.strip()

    assert exit_code == 1 and output.startswith("error=")


def test_cli_array_and_binary_values(tmp_path, capsys) -> None:
    """Arrays take several values and binary values are hex."""
    db_path = str(tmp_path / "db")
    main(["init", db_path])
    main(["set", db_path, "scores", "--type", "i16", "--array", "-1", "2", "3"])
    main(["set", db_path, "blob", "--type", "binary", "0cea30"])
    capsys.readouterr()

    main(["get", db_path, "scores", "--type", "i16", "--array"])
    main(["get", db_path, "blob", "--type", "binary"])
    output = capsys.readouterr().out.split("\n")

    assert output[:2] == ["-1 2 3", "0cea30"]


def test_cli_compiled_roundtrip(tmp_path, capsys) -> None:
    """Compiled databases should be writable and readable through the archive."""
    main(["init", "--compiled", str(tmp_path / "db")])
    archive = str(tmp_path / "db.ldb")
    main(["set", archive, "flag", "--type", "bool", "true"])
    capsys.readouterr()

    exit_code = main(["get", archive, "flag", "--type", "bool"])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and output == "true" and not (tmp_path / "db.modb").exists()


def test_cli_info_lists_root(tmp_path, capsys) -> None:
    """CLI info should print the version and root listing."""
    db_path = str(tmp_path / "db")
    main(["init", db_path])
    main(["set", db_path, "people/Dave::age", "--type", "u8", "21"])
    main(["set", db_path, "count", "--type", "u32", "1"])
    capsys.readouterr()

    main(["info", db_path])
    lines = capsys.readouterr().out.strip().splitlines()

    assert lines == ["version=1.2.1", "form=directory", "containers=people", "values=count"]


def test_cli_compile_and_decompile(tmp_path, capsys) -> None:
    """compile then decompile should restore a loadable directory."""
    db_path = str(tmp_path / "db")
    main(["init", db_path])
    main(["set", db_path, "name", "--type", "string", "Dave"])
    main(["compile", db_path, str(tmp_path / "snapshot.ldb")])
    main(["decompile", str(tmp_path / "snapshot.ldb"), str(tmp_path / "restored")])
    capsys.readouterr()

    main(["get", str(tmp_path / "restored"), "name", "--type", "string"])
    output = capsys.readouterr().out.strip()

    assert output == "Dave"


def test_cli_missing_database_reports_error(tmp_path, capsys) -> None:
    """Opening a missing database should fail with exit code 1."""
    exit_code = main(["info", str(tmp_path / "missing")])
    output = capsys.readouterr().out.strip()

    assert exit_code == 1 and "not found" in output
