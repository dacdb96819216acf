"""Select and update over a single table.

Both operations resolve column names to positional indexes in the table's
column list and scan rows linearly. Matching is string-normalized equality:
a row matches ``Condition(column, value)`` when the string projection of its
value in ``column`` equals ``value`` exactly. Null projects to None and so
never matches.

Rows that predate a later ``add_column`` are shorter than the schema; the
missing trailing positions read as Null.

Neither function mutates its input. ``update`` returns a rebuilt table that
the caller substitutes as a unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tablestore.domain.entities import Row, Table
from tablestore.domain.value_objects import Value


@dataclass(frozen=True)
class Condition:
    """Equality filter on one column, compared as text."""

    column: str
    value: str


@dataclass(frozen=True)
class ColumnUpdate:
    """Assignment of a textual value to one column."""

    column: str
    value: str


def _value_at(row: Row, index: int) -> Value:
    if index < len(row.values):
        return row.values[index]
    return Value.null()


def _matches(row: Row, index: int | None, condition: Condition | None) -> bool:
    if condition is None or index is None:
        return True
    return _value_at(row, index).as_string() == condition.value


def select(
    table: Table,
    columns: Sequence[str] | None = None,
    condition: Condition | None = None,
) -> list[Row]:
    """Return projected rows matching ``condition`` in storage order.

    Args:
        table: Table to read.
        columns: Column names to project, in the order they should appear
            in the result. None selects every column in table order.
        condition: Optional equality filter.

    Returns:
        New Row objects; the table's rows are not shared.

    Raises:
        ColumnNotFound: If the condition column or a projected column is
            not part of the schema.
    """
    condition_index = (
        table.column_index(condition.column) if condition is not None else None
    )
    if columns is None:
        indexes = list(range(len(table.columns)))
    else:
        indexes = [table.column_index(name) for name in columns]

    result = []
    for row in table.rows:
        if not _matches(row, condition_index, condition):
            continue
        result.append(Row([_value_at(row, index) for index in indexes]))
    return result


def update(
    table: Table,
    condition: Condition | None,
    updates: Sequence[ColumnUpdate],
) -> tuple[Table, int]:
    """Overwrite columns in every row matching ``condition``.

    Replacement values are always stored as String values; the update
    payload is untyped text and no coercion to the column's previous kind is
    attempted.

    Args:
        table: Table to update. It is left unchanged.
        condition: Optional equality filter; None matches every row.
        updates: Column assignments applied to each matching row.

    Returns:
        Tuple of (rebuilt table, number of rows updated).

    Raises:
        ColumnNotFound: If an update column or the condition column is not
            part of the schema. Update columns are resolved first, failing
            on the first unknown name.
    """
    resolved = [
        (table.column_index(item.column), Value.from_str(item.value))
        for item in updates
    ]
    condition_index = (
        table.column_index(condition.column) if condition is not None else None
    )

    rows = []
    count = 0
    for row in table.rows:
        if not _matches(row, condition_index, condition):
            rows.append(row.copy())
            continue

        values = list(row.values)
        for index, value in resolved:
            if index >= len(values):
                values.extend([Value.null()] * (index + 1 - len(values)))
            values[index] = value
        rows.append(Row(values))
        count += 1

    return Table(name=table.name, columns=list(table.columns), rows=rows), count
