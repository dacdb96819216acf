"""Unit tests for the Row and Table entities."""

from __future__ import annotations

import pytest

from tablestore.domain.entities import Column, Row, Table
from tablestore.domain.errors import (
    ColumnNotFound,
    DuplicateColumn,
    NonNullViolation,
    RowArityExceeded,
)
from tablestore.domain.value_objects import Value


@pytest.fixture
def table(id_column: Column) -> Table:
    """Table with a primary key and a nullable column."""
    return Table("t", columns=[id_column, Column("b")])


@pytest.mark.unit
class TestRow:
    """Tests for Row."""

    def test_of_coerces_values(self) -> None:
        row = Row.of(1, "a", None, True, 2.5)

        assert row.values == [
            Value.from_int(1),
            Value.from_str("a"),
            Value.null(),
            Value.from_bool(True),
            Value.from_float(2.5),
        ]

    def test_add_value(self) -> None:
        """Values are appended in order."""
        row = Row()
        row.add_value(1)
        row.add_value(Value.from_str("x"))

        assert row.as_strings() == ["1", "x"]
        assert len(row) == 2

    def test_copy_is_independent(self) -> None:
        row = Row.of(1)
        clone = row.copy()
        clone.add_value(2)

        assert len(row) == 1

    def test_dict_roundtrip(self) -> None:
        row = Row.of(1, None)
        assert row.to_dict() == {"values": [{"Int": 1}, "Null"]}
        assert Row.from_dict(row.to_dict()) == row


@pytest.mark.unit
class TestTableSchema:
    """Tests for column management."""

    def test_column_index(self, table: Table) -> None:
        assert table.column_index("id") == 0
        assert table.column_index("b") == 1

    def test_unknown_column(self, table: Table) -> None:
        with pytest.raises(ColumnNotFound, match="'nope'"):
            table.column_index("nope")

    def test_add_column_appends(self, table: Table) -> None:
        table.add_column(Column("c"))

        assert [c.key for c in table.columns] == ["id", "b", "c"]
        assert table.has_column("c")

    def test_duplicate_column_rejected(self, table: Table) -> None:
        """Adding an existing key fails and leaves the schema unchanged."""
        with pytest.raises(DuplicateColumn):
            table.add_column(Column("b", non_null=True))

        assert len(table.columns) == 2

    def test_add_column_does_not_touch_rows(self, table: Table) -> None:
        table.add_row(Row.of(1, 2))
        table.add_column(Column("c"))

        assert len(table.rows[0]) == 2


@pytest.mark.unit
class TestTableRows:
    """Tests for row insertion rules."""

    def test_full_row(self, table: Table) -> None:
        stored = table.add_row(Row.of(1, "x"))

        assert stored.as_strings() == ["1", "x"]
        assert table.rows == [stored]

    def test_short_row_is_padded_with_null(self, table: Table) -> None:
        """Missing trailing values become Null."""
        stored = table.add_row(Row.of(1))

        assert stored.values == [Value.from_int(1), Value.null()]
        assert table.rows[0].values == [Value.from_int(1), Value.null()]

    def test_input_row_is_not_modified(self, table: Table) -> None:
        row = Row.of(1)
        table.add_row(row)
        assert len(row) == 1

    def test_too_many_values(self, table: Table) -> None:
        """Rows longer than the schema are rejected."""
        with pytest.raises(RowArityExceeded) as exc_info:
            table.add_row(Row.of(1, 2, 3))

        assert exc_info.value.got == 3
        assert exc_info.value.expected == 2
        assert table.rows == []

    def test_padding_into_non_null_column(self) -> None:
        """A non-null trailing column cannot be padded."""
        table = Table("t", columns=[Column("a"), Column("b", non_null=True)])

        with pytest.raises(NonNullViolation, match="'b'"):
            table.add_row(Row.of(1))

        assert table.rows == []

    def test_explicit_null_in_non_null_column(self, table: Table) -> None:
        with pytest.raises(NonNullViolation, match="'id'"):
            table.add_row(Row.of(None, "x"))

    def test_empty_row_in_nullable_table(self) -> None:
        table = Table("t", columns=[Column("a"), Column("b")])
        stored = table.add_row(Row())
        assert stored.as_strings() == [None, None]

    def test_row_in_table_without_columns(self) -> None:
        table = Table("empty")
        table.add_row(Row())

        with pytest.raises(RowArityExceeded):
            table.add_row(Row.of(1))


@pytest.mark.unit
class TestTableCopy:
    """Tests for copy, rename and dict conversion."""

    def test_copy_is_independent(self, table: Table) -> None:
        table.add_row(Row.of(1))
        clone = table.copy()
        clone.add_column(Column("c"))
        clone.rows[0].add_value(3)
        clone.add_row(Row.of(2))

        assert len(table.columns) == 2
        assert len(table.rows) == 1
        assert len(table.rows[0]) == 2

    def test_renamed(self, table: Table) -> None:
        renamed = table.renamed("u")

        assert renamed.name == "u"
        assert table.name == "t"
        assert renamed.columns == table.columns

    def test_dict_roundtrip(self, table: Table) -> None:
        """Names, column order, flags and row values survive."""
        table.add_row(Row.of(1, "x"))
        table.add_row(Row.of(2))

        restored = Table.from_dict(table.to_dict())

        assert restored == table
