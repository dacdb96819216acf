"""Domain errors for the table store.

Every failure that can be triggered by a request is a subclass of
TableStoreError. Each error carries a stable ``code`` for clients and the
HTTP status the REST adapter answers with, so that validation problems are
always reported to the caller instead of aborting the process.
"""

from __future__ import annotations

from typing import ClassVar


class TableStoreError(Exception):
    """Base class for all table store errors."""

    code: ClassVar[str] = "table_store_error"
    http_status: ClassVar[int] = 400


class TableAlreadyExists(TableStoreError):
    """A table with the requested name is already present."""

    code = "table_already_exists"
    http_status = 409

    def __init__(self, name: str) -> None:
        super().__init__(f"Table '{name}' already exists")
        self.name = name


class TableNotFound(TableStoreError):
    """No table with the requested name exists."""

    code = "table_not_found"
    http_status = 404

    def __init__(self, name: str) -> None:
        super().__init__(f"Table '{name}' does not exist")
        self.name = name


class ColumnNotFound(TableStoreError):
    """A referenced column is not part of the table schema."""

    code = "column_not_found"
    http_status = 404

    def __init__(self, name: str) -> None:
        super().__init__(f"Column '{name}' not found")
        self.name = name


class DuplicateColumn(TableStoreError):
    """A column with the same key is already part of the table schema."""

    code = "duplicate_column"
    http_status = 409

    def __init__(self, name: str) -> None:
        super().__init__(f"Column '{name}' already exists")
        self.name = name


class ConstraintViolation(TableStoreError):
    """Column constraint flags are inconsistent (e.g. nullable primary key)."""

    code = "constraint_violation"
    http_status = 422


class RowArityExceeded(TableStoreError):
    """A row carries more values than the table has columns."""

    code = "row_arity_exceeded"
    http_status = 422

    def __init__(self, got: int, expected: int) -> None:
        super().__init__(
            f"Row has {got} values but the table only has {expected} columns"
        )
        self.got = got
        self.expected = expected


class NonNullViolation(TableStoreError):
    """A non-null column would receive a Null value."""

    code = "non_null_violation"
    http_status = 422

    def __init__(self, column: str) -> None:
        super().__init__(f"Column '{column}' cannot be null")
        self.column = column


class PersistenceError(TableStoreError):
    """Reading or writing the snapshot file failed."""

    code = "persistence_error"
    http_status = 500
