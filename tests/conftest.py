"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_CONFIG_ENV_VARS = ("LAZYDB_COMPRESSION_LEVEL", "LAZYDB_LOG_LEVEL")


def pytest_sessionstart() -> None:
    """Put the src layout on sys.path so tests import packages directly."""
    src_path = Path(__file__).resolve().parent.parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear LazyDB environment overrides so every test starts from defaults."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _isolated_logging_config():
    """Reset structlog after each test so no logger keeps a closed captured stream."""
    yield
    import structlog

    import core.logging_config

    structlog.reset_defaults()
    core.logging_config._configured = False
