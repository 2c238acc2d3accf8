"""Pytest configuration ensuring the project root is importable.

Every test runs with its own data directory and a clean config cache so
settings and sqlite files never leak between tests.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import services.config as config  # noqa: E402
import services.logger as log  # noqa: E402
from drivers.manager import DriverManager  # noqa: E402
from drivers.registry import MemoryDriverRegistry  # noqa: E402
from services.db import SqliteDriverRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("DRIVERS_DATA_PATH", str(tmp_path / "data"))
    config.clear_cache()
    log.clear_sensitive()
    try:
        yield
    finally:
        config.clear_cache()
        log.clear_sensitive()
        log.set_level("INFO")


@pytest.fixture
def memory_registry():
    return MemoryDriverRegistry()


@pytest.fixture
def sqlite_registry(tmp_path):
    registry = SqliteDriverRegistry(tmp_path / "registry" / "drivers.db")
    yield registry
    registry.close()


@pytest.fixture(params=["memory", "sqlite"])
def registry(request):
    """Each test using this fixture runs once per registry store."""
    return request.getfixturevalue(f"{request.param}_registry")


@pytest.fixture
def manager(registry):
    return DriverManager(registry)
