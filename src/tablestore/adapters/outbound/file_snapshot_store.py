"""File-based Snapshot Store implementation.

This adapter implements the SnapshotStore protocol with a single JSON file
holding the array of all tables:

    [
      {"name": "users",
       "columns": [{"key": "id", "primary_key": true, "non_null": true,
                    "unique": true, "foreign_key": null}],
       "rows": [{"values": [{"Int": 1}]}]}
    ]

Write Modes:
    - atomic (default): write a temporary sibling file, fsync it, then
      os.replace() it over the snapshot. A crash mid-write leaves the old
      snapshot intact.
    - direct: truncate the snapshot and write in place. A crash mid-write
      can leave a corrupt snapshot.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from tablestore.domain.entities import Table
from tablestore.domain.errors import PersistenceError, TableStoreError


class FileSnapshotStore:
    """JSON file implementation of the SnapshotStore protocol.

    Attributes:
        path: Path of the snapshot file.
        atomic_writes: Whether saves go through a temporary file and rename.
    """

    def __init__(self, path: str | Path, atomic_writes: bool = True) -> None:
        self._path = Path(path)
        self._atomic_writes = atomic_writes

    @property
    def path(self) -> Path:
        return self._path

    @property
    def atomic_writes(self) -> bool:
        return self._atomic_writes

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Table]:
        """Read and decode the snapshot file.

        Raises:
            PersistenceError: If the file is missing, unreadable, not valid
                JSON, or does not describe a list of tables.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise PersistenceError(f"Snapshot file not found: {self._path}") from e
        except OSError as e:
            raise PersistenceError(f"Failed to read snapshot {self._path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Malformed snapshot {self._path}: {e}") from e

        if not isinstance(data, list):
            raise PersistenceError(
                f"Malformed snapshot {self._path}: expected a list of tables"
            )

        try:
            return [Table.from_dict(item) for item in data]
        except (
            KeyError,
            TypeError,
            ValueError,
            OverflowError,
            AttributeError,
            TableStoreError,
        ) as e:
            raise PersistenceError(f"Malformed snapshot {self._path}: {e}") from e

    def save(self, tables: list[Table]) -> None:
        """Encode ``tables`` and replace the snapshot file.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        payload = json.dumps([table.to_dict() for table in tables], indent=2)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._atomic_writes:
                self._write_atomic(payload)
            else:
                self._write_direct(payload)
        except OSError as e:
            raise PersistenceError(f"Failed to write snapshot {self._path}: {e}") from e

    def _write_direct(self, payload: str) -> None:
        with open(self._path, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())

    def _write_atomic(self, payload: str) -> None:
        tmp_path = self._path.with_name(f".{self._path.name}.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
