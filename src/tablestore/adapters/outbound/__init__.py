"""Outbound adapters - implementations of outbound ports.

These adapters implement external dependencies: the JSON snapshot file and
the HTTP client used to talk to a running table store server.
"""

from tablestore.adapters.outbound.file_snapshot_store import FileSnapshotStore
from tablestore.adapters.outbound.http_client import ClientError, TableStoreClient

__all__ = [
    "ClientError",
    "FileSnapshotStore",
    "TableStoreClient",
]
