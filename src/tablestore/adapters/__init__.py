"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (REST, text commands)
- Outbound adapters: Implement external dependencies (snapshot file, HTTP client)
"""

from tablestore.adapters.outbound import (
    ClientError,
    FileSnapshotStore,
    TableStoreClient,
)

__all__ = [
    # Outbound adapters
    "ClientError",
    "FileSnapshotStore",
    "TableStoreClient",
]
