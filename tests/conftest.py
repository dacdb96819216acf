"""Pytest configuration and fixtures for tablestore tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from tablestore.adapters.outbound import FileSnapshotStore
from tablestore.application import StateManager
from tablestore.domain.entities import Column
from tablestore.infrastructure.config import Config, StorageConfig
from tablestore.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with a temporary data directory."""
    return Config(
        storage=StorageConfig(
            data_dir=temp_dir / "data",
            snapshot_file="tables.json",
        ),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def snapshot_store(test_config: Config) -> FileSnapshotStore:
    """Provide a snapshot store inside the temporary data directory."""
    return FileSnapshotStore(test_config.snapshot_path)


@pytest.fixture
def state(snapshot_store: FileSnapshotStore, metrics_registry: MetricsRegistry) -> StateManager:
    """Provide an empty state manager backed by a temporary snapshot file."""
    return StateManager(snapshot_store, metrics=metrics_registry)


@pytest.fixture
def id_column() -> Column:
    """Primary key column used by most table fixtures."""
    return Column("id", primary_key=True, non_null=True, unique=True)


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "concurrency: Tests exercising concurrent access")
