"""Integration tests for restart and recovery."""

from __future__ import annotations

import logging
from typing import Generator

import pytest

from tablestore.adapters.outbound import FileSnapshotStore
from tablestore.application import StateManager
from tablestore.domain.entities import Column, Row, Table
from tablestore.domain.services import ColumnUpdate, Condition
from tablestore.infrastructure.config import Config
from tablestore.infrastructure.container import Container


@pytest.fixture
def container(test_config: Config) -> Generator[Container, None, None]:
    """Provide a fresh container wired to the test configuration."""
    Container.reset()
    yield Container.create(test_config)
    Container.reset()


@pytest.mark.integration
class TestRestart:
    """State survives a restart through the snapshot file."""

    def test_reload_after_restart(self, snapshot_store: FileSnapshotStore) -> None:
        first = StateManager.open(snapshot_store)
        first.create_table(
            "users",
            [Column("id", primary_key=True, non_null=True, unique=True), Column("name")],
        )
        first.insert_row("users", Row.of(1, "alice"))
        first.insert_row("users", Row.of(2))
        first.insert_column("users", Column("email"))
        first.update("users", Condition("id", "2"), [ColumnUpdate("email", "b@x")])
        first.create(Table("audit"))
        first.rename("audit", "log")

        second = StateManager.open(snapshot_store)

        assert second.get_all() == first.get_all()
        assert second.names() == ["users", "log"]
        rows = second.select("users", columns=["email", "name"])
        assert [r.as_strings() for r in rows] == [[None, "alice"], ["b@x", None]]

    def test_direct_writes_reload(self, temp_dir) -> None:
        store = FileSnapshotStore(temp_dir / "tables.json", atomic_writes=False)
        StateManager(store).create_table("t", [Column("a")])

        assert StateManager.load(store).names() == ["t"]

    def test_corrupt_snapshot_starts_empty(self, snapshot_store: FileSnapshotStore) -> None:
        """A corrupt snapshot is replaced on the next mutation."""
        snapshot_store.path.parent.mkdir(parents=True, exist_ok=True)
        snapshot_store.path.write_text("[{")

        state = StateManager.open(snapshot_store)
        assert state.get_all() == []

        state.create(Table("fresh"))
        assert StateManager.load(snapshot_store).names() == ["fresh"]


@pytest.mark.integration
class TestContainer:
    """Tests for dependency wiring."""

    def test_container_wires_state(self, container: Container, test_config: Config) -> None:
        assert container.config is test_config
        assert container.store.path == test_config.snapshot_path
        assert container.store.atomic_writes is True
        assert test_config.storage.data_dir.exists()
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert container.state.get_all() == []

    def test_container_is_singleton(self, container: Container) -> None:
        assert Container.get() is container

    def test_container_loads_existing_snapshot(self, test_config: Config) -> None:
        FileSnapshotStore(test_config.snapshot_path).save([Table("kept")])
        Container.reset()
        try:
            container = Container.create(test_config)
            assert container.state.names() == ["kept"]
        finally:
            Container.reset()
