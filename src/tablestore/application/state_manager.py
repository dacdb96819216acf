"""State Manager - single owner of the table collection.

The state manager holds every table in memory, serializes access with a
reader/writer lock and mirrors the whole collection to a snapshot store
after each mutation.

Locking:
    - Reads (get, get_all, select, stats) hold the lock in shared mode.
    - Every mutation holds it in exclusive mode for the whole logical
      operation: look up the table, apply the change to a copy, substitute
      the copy, write the snapshot, release. A renamed table is never
      observable under zero or two names.

Persistence:
    A failed snapshot write raises PersistenceError *after* the in-memory
    change has been applied; the caller sees a failed mutation while the
    in-memory state already reflects it. The next successful save brings
    the snapshot back in line.

Usage:
    from tablestore.adapters.outbound import FileSnapshotStore
    from tablestore.application import StateManager

    state = StateManager.open(FileSnapshotStore("data/tables.json"))
    state.create_table("users", [Column("id", True, True, True)])
    state.insert_row("users", Row.of(1))
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator, Sequence

from tablestore.domain.entities import Column, Row, Table
from tablestore.domain.errors import (
    PersistenceError,
    TableAlreadyExists,
    TableNotFound,
    TableStoreError,
)
from tablestore.domain.services import (
    ColumnUpdate,
    Condition,
    ReadWriteLock,
    select as select_rows,
    update as update_rows,
)
from tablestore.infrastructure.logging import get_logger
from tablestore.infrastructure.metrics import MetricsRegistry
from tablestore.infrastructure.tracing import trace_span
from tablestore.ports.outbound import SnapshotStore

logger = get_logger(__name__)


class StateManager:
    """Owner of all tables, synchronized with a snapshot store.

    Tables handed out by this class are copies; changing them has no
    effect on the stored state.

    Thread Safety:
        All public methods are thread-safe. The lock is not reentrant, so
        methods never call each other while holding it.
    """

    def __init__(
        self,
        store: SnapshotStore,
        tables: Sequence[Table] | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the state manager.

        Args:
            store: Snapshot store used by save().
            tables: Initial tables (e.g. from a loaded snapshot).
            metrics: Optional metrics registry.

        Raises:
            TableAlreadyExists: If ``tables`` contains a duplicate name.
        """
        self._store = store
        self._metrics = metrics
        self._lock = ReadWriteLock()
        self._tables: dict[str, Table] = {}

        for table in tables or ():
            if table.name in self._tables:
                raise TableAlreadyExists(table.name)
            self._tables[table.name] = table.copy()

        self._update_gauges()

    # ------------------------------------------------------------------
    # Construction from a snapshot
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls, store: SnapshotStore, metrics: MetricsRegistry | None = None
    ) -> StateManager:
        """Build a state manager from the store's snapshot.

        Raises:
            PersistenceError: If the snapshot is absent or malformed.
        """
        with trace_span("state_manager.load", snapshot=store.location):
            tables = store.load()
            try:
                manager = cls(store, tables, metrics)
            except TableAlreadyExists as e:
                raise PersistenceError(
                    f"Malformed snapshot {store.location}: duplicate table '{e.name}'"
                ) from e

        logger.info("snapshot_loaded", snapshot=store.location, tables=len(tables))
        return manager

    @classmethod
    def open(
        cls, store: SnapshotStore, metrics: MetricsRegistry | None = None
    ) -> StateManager:
        """Load the snapshot, starting empty if it cannot be read."""
        try:
            return cls.load(store, metrics)
        except PersistenceError as e:
            logger.warning(
                "snapshot_load_failed",
                snapshot=store.location,
                error=str(e),
                recovery="empty_state",
            )
            return cls(store, metrics=metrics)

    @property
    def store(self) -> SnapshotStore:
        return self._store

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def create(self, table: Table) -> Table:
        """Insert a new table and persist.

        Raises:
            TableAlreadyExists: If the name is taken.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("create", table=table.name):
            with self._lock.write_locked():
                if table.name in self._tables:
                    raise TableAlreadyExists(table.name)
                self._tables[table.name] = table.copy()
                self._persist()
            logger.info("table_created", table=table.name, columns=len(table.columns))
            return table.copy()

    def get(self, name: str) -> Table | None:
        """Return a copy of the named table, or None if absent."""
        with self._lock.read_locked():
            table = self._tables.get(name)
            return table.copy() if table is not None else None

    def get_all(self) -> list[Table]:
        """Return copies of all tables in collection order."""
        with self._lock.read_locked():
            return [table.copy() for table in self._tables.values()]

    def names(self) -> list[str]:
        with self._lock.read_locked():
            return list(self._tables)

    def drop(self, name: str) -> bool:
        """Remove a table by name.

        Returns:
            True if a table was removed, False if none existed. Nothing is
            persisted when no table was removed.

        Raises:
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("drop", table=name):
            with self._lock.write_locked():
                if self._tables.pop(name, None) is None:
                    return False
                self._persist()
            logger.info("table_dropped", table=name)
            return True

    def rename(self, old: str, new: str) -> Table:
        """Rename a table in one critical section.

        Renaming a table to its current name succeeds without changes.

        Returns:
            The renamed table.

        Raises:
            TableNotFound: If ``old`` does not exist.
            TableAlreadyExists: If ``new`` is already taken.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("rename", table=old, new_name=new):
            with self._lock.write_locked():
                table = self._require(old)
                if old == new:
                    return table.copy()
                if new in self._tables:
                    raise TableAlreadyExists(new)

                renamed = table.renamed(new)
                del self._tables[old]
                self._tables[new] = renamed
                self._persist()
            logger.info("table_renamed", table=old, new_name=new)
            return renamed.copy()

    def save(self) -> None:
        """Write the full collection to the snapshot store.

        Raises:
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("save"):
            with self._lock.write_locked():
                self._persist()

    # ------------------------------------------------------------------
    # Logical operations
    # ------------------------------------------------------------------

    def create_table(self, name: str, columns: Sequence[Column] = ()) -> Table:
        """Create a table with an initial schema.

        The table is fully built before it is inserted, so nothing is
        created when a column is rejected.

        Raises:
            DuplicateColumn: If two columns share a key.
            TableAlreadyExists: If the name is taken.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("create_table", table=name):
            table = Table(name)
            for column in columns:
                table.add_column(column)

            with self._lock.write_locked():
                if name in self._tables:
                    raise TableAlreadyExists(name)
                self._tables[name] = table
                self._persist()
            logger.info("table_created", table=name, columns=len(table.columns))
            return table.copy()

    def drop_table(self, name: str) -> None:
        """Drop a table, treating absence as an error.

        Raises:
            TableNotFound: If the table does not exist.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("drop_table", table=name):
            with self._lock.write_locked():
                if self._tables.pop(name, None) is None:
                    raise TableNotFound(name)
                self._persist()
            logger.info("table_dropped", table=name)

    def insert_column(self, table_name: str, column: Column) -> Column:
        """Append a column to a table's schema.

        Raises:
            TableNotFound: If the table does not exist.
            DuplicateColumn: If the key is already used in the table.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("insert_column", table=table_name, column=column.key):
            with self._lock.write_locked():
                table = self._require(table_name).copy()
                table.add_column(column)
                self._tables[table_name] = table
                self._persist()
            logger.info("column_inserted", table=table_name, column=column.key)
            return column

    def insert_row(self, table_name: str, row: Row) -> Row:
        """Append a row, padding missing trailing values with Null.

        Returns:
            The stored row.

        Raises:
            TableNotFound: If the table does not exist.
            RowArityExceeded: If the row is longer than the schema.
            NonNullViolation: If a non-null column would receive Null.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("insert_row", table=table_name):
            with self._lock.write_locked():
                table = self._require(table_name).copy()
                stored = table.add_row(row)
                self._tables[table_name] = table
                self._persist()
            logger.debug("row_inserted", table=table_name, values=len(stored))
            return stored.copy()

    def update(
        self,
        table_name: str,
        condition: Condition | None,
        updates: Sequence[ColumnUpdate],
    ) -> int:
        """Overwrite columns in the rows matching ``condition``.

        Returns:
            Number of rows updated.

        Raises:
            TableNotFound: If the table does not exist.
            ColumnNotFound: If an update or condition column is unknown.
            PersistenceError: If the snapshot write fails.
        """
        with self._operation("update", table=table_name):
            with self._lock.write_locked():
                table, count = update_rows(self._require(table_name), condition, updates)
                self._tables[table_name] = table
                self._persist()
            logger.info("rows_updated", table=table_name, rows=count)
            return count

    def select(
        self,
        table_name: str,
        columns: Sequence[str] | None = None,
        condition: Condition | None = None,
    ) -> list[Row]:
        """Project the rows matching ``condition``.

        Raises:
            TableNotFound: If the table does not exist.
            ColumnNotFound: If a projected or condition column is unknown.
        """
        with self._operation("select", table=table_name):
            with self._lock.read_locked():
                return select_rows(self._require(table_name), columns, condition)

    def stats(self) -> dict:
        """Collection statistics."""
        with self._lock.read_locked():
            return {
                "tables": len(self._tables),
                "rows": sum(len(t.rows) for t in self._tables.values()),
                "snapshot": self._store.location,
            }

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------

    def _require(self, name: str) -> Table:
        table = self._tables.get(name)
        if table is None:
            raise TableNotFound(name)
        return table

    def _persist(self) -> None:
        tables = list(self._tables.values())
        start = time.perf_counter()
        with trace_span("snapshot.save", snapshot=self._store.location):
            try:
                self._store.save(tables)
            except PersistenceError as e:
                if self._metrics:
                    self._metrics.snapshot_writes_total.labels(status="error").inc()
                logger.error("snapshot_save_failed", snapshot=self._store.location, error=str(e))
                raise
            finally:
                self._update_gauges()

        if self._metrics:
            self._metrics.snapshot_writes_total.labels(status="success").inc()
            self._metrics.snapshot_write_latency_seconds.observe(time.perf_counter() - start)
        logger.debug("snapshot_saved", snapshot=self._store.location, tables=len(tables))

    def _update_gauges(self) -> None:
        if self._metrics is None:
            return
        self._metrics.tables.set(len(self._tables))
        self._metrics.rows.set(sum(len(t.rows) for t in self._tables.values()))

    @contextmanager
    def _operation(self, name: str, **attributes: str) -> Iterator[None]:
        start = time.perf_counter()
        status = "success"
        with trace_span(f"state_manager.{name}", **attributes):
            try:
                yield
            except TableStoreError as e:
                status = "error"
                logger.info(
                    "operation_rejected", operation=name, code=e.code, error=str(e), **attributes
                )
                raise
            except Exception:
                status = "error"
                logger.exception("operation_failed", operation=name, **attributes)
                raise
            finally:
                if self._metrics:
                    self._metrics.operations_total.labels(operation=name, status=status).inc()
                    self._metrics.operation_latency_seconds.labels(operation=name).observe(
                        time.perf_counter() - start
                    )
