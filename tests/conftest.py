"""Pytest configuration and fixtures for pipestore tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from pipestore.application import Database
from pipestore.infrastructure.config import Config, StorageConfig
from pipestore.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration without fsync."""
    return Config(
        storage=StorageConfig(
            sync_mode="none",  # Faster for tests
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Path of a database file that does not exist yet."""
    return temp_dir / "test.pdb"


@pytest.fixture
def open_db(
    db_path: Path, test_config: Config, metrics_registry: MetricsRegistry
) -> Callable[..., Database]:
    """Factory opening a Database on ``db_path`` with test config and metrics."""

    def _open(**kwargs) -> Database:
        kwargs.setdefault("config", test_config)
        kwargs.setdefault("metrics", metrics_registry)
        return Database(db_path, **kwargs)

    return _open


@pytest.fixture
def db(open_db: Callable[..., Database]) -> Database:
    """An unauthenticated database on a fresh file."""
    return open_db()


@pytest.fixture
def users_db(db: Database) -> Database:
    """A database with a users(id:int, name:string, isAdmin:boolean) table."""
    db.create_table("users", [("id", "int"), ("name", "string"), ("isAdmin", "boolean")])
    return db


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
