"""Outbound ports (driven side) of the table store."""

from tablestore.ports.outbound.snapshot_store import SnapshotStore

__all__ = ["SnapshotStore"]
