"""Application layer for the table store.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    - StateManager: Owner of the table collection, lock and snapshot
"""

from tablestore.application.state_manager import StateManager

__all__ = [
    "StateManager",
]
