"""Ports layer - interfaces between the application and its adapters.

Exports:
    Outbound Ports (driven by the application):
        - SnapshotStore: Full-snapshot persistence of the table collection
"""

from tablestore.ports.outbound import SnapshotStore

__all__ = ["SnapshotStore"]
