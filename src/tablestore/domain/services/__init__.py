"""Domain services for the table store.

Services implement logic that spans entities: filtered projection and
conditional update over a table, and the reader/writer lock that serializes
access to the table collection.
"""

from tablestore.domain.services.query_engine import (
    ColumnUpdate,
    Condition,
    select,
    update,
)
from tablestore.domain.services.rw_lock import ReadWriteLock

__all__ = [
    "ColumnUpdate",
    "Condition",
    "ReadWriteLock",
    "select",
    "update",
]
