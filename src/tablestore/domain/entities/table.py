"""Table entity: a named schema plus its rows.

The ordered column list is the index space for every row: ``row.values[i]``
belongs to ``columns[i]``. Rows shorter than the schema are right-padded with
Null at insertion, on the assumption that the missing values are always the
trailing columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tablestore.domain.entities.column import Column
from tablestore.domain.entities.row import Row
from tablestore.domain.errors import (
    ColumnNotFound,
    DuplicateColumn,
    NonNullViolation,
    RowArityExceeded,
)
from tablestore.domain.value_objects import Value


@dataclass
class Table:
    """A named table.

    Attributes:
        name: Table name, unique across the state manager.
        columns: Ordered schema.
        rows: Stored rows in insertion order.
    """

    name: str
    columns: list[Column] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    def has_column(self, key: str) -> bool:
        return any(column.key == key for column in self.columns)

    def column_index(self, key: str) -> int:
        """Positional index of a column.

        Raises:
            ColumnNotFound: If no column has this key.
        """
        for index, column in enumerate(self.columns):
            if column.key == key:
                return index
        raise ColumnNotFound(key)

    def add_column(self, column: Column) -> None:
        """Append a column to the schema.

        Existing rows are not touched; they simply become shorter than the
        schema and read as missing values for the new column.

        Raises:
            DuplicateColumn: If a column with the same key already exists.
        """
        if self.has_column(column.key):
            raise DuplicateColumn(column.key)
        self.columns.append(column)

    def add_row(self, row: Row) -> Row:
        """Validate, pad and append a row.

        Args:
            row: The row to insert. It is not modified.

        Returns:
            The stored row (padded to the full column count).

        Raises:
            RowArityExceeded: If the row has more values than columns.
            NonNullViolation: If a non-null column would receive Null,
                either supplied explicitly or through padding.
        """
        supplied = len(row.values)
        expected = len(self.columns)

        if supplied > expected:
            raise RowArityExceeded(supplied, expected)

        for column, value in zip(self.columns, row.values):
            if value.is_null and column.non_null:
                raise NonNullViolation(column.key)

        # missing values always belong to the trailing columns
        missing = self.columns[supplied:]
        for column in missing:
            if column.non_null:
                raise NonNullViolation(column.key)

        stored = Row(list(row.values) + [Value.null()] * len(missing))
        self.rows.append(stored)
        return stored

    def copy(self) -> Table:
        """Copy whose column and row lists can be changed independently."""
        return Table(
            name=self.name,
            columns=list(self.columns),
            rows=[row.copy() for row in self.rows],
        )

    def renamed(self, name: str) -> Table:
        table = self.copy()
        table.name = name
        return table

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [column.to_dict() for column in self.columns],
            "rows": [row.to_dict() for row in self.rows],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Table:
        return cls(
            name=data["name"],
            columns=[Column.from_dict(item) for item in data.get("columns", [])],
            rows=[Row.from_dict(item) for item in data.get("rows", [])],
        )
