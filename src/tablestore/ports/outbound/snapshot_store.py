"""Snapshot Store port for durable table storage.

This outbound port defines the contract for persisting the complete table
collection. The store always deals in full snapshots: every save replaces
the previous snapshot entirely, and every load returns the whole
collection.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from tablestore.domain.entities import Table


class SnapshotStore(Protocol):
    """Protocol for full-snapshot persistence of the table collection.

    Thread Safety:
        Implementations need not be thread-safe; the state manager calls
        them while holding its exclusive lock.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the snapshot (e.g. a file path)."""
        ...

    @abstractmethod
    def load(self) -> list[Table]:
        """Read the full table collection.

        Returns:
            Tables in their persisted order.

        Raises:
            PersistenceError: If the snapshot is absent or malformed.
        """
        ...

    @abstractmethod
    def save(self, tables: list[Table]) -> None:
        """Replace the snapshot with ``tables``.

        Raises:
            PersistenceError: If the snapshot cannot be written.
        """
        ...
