"""Unit tests for the text command parser."""

from __future__ import annotations

import pytest

from tablestore.adapters.inbound import (
    CommandParser,
    CreateRequest,
    CreateTableRequest,
    DropTableRequest,
    InsertRowRequest,
    ParseError,
    RenameTableRequest,
    SelectRequest,
    UpdateRequest,
)
from tablestore.domain.value_objects import Value


@pytest.fixture
def parser() -> CommandParser:
    """Create a parser for testing."""
    return CommandParser()


@pytest.mark.unit
class TestParseCreate:
    """Tests for CREATE TABLE parsing."""

    def test_create_with_columns(self, parser: CommandParser) -> None:
        """Column constraints map to flags; PRIMARY KEY implies NN and UQ."""
        request = parser.parse(
            "CREATE TABLE users (id INT PRIMARY KEY, name TEXT NOT NULL, score FLOAT UNIQUE, note TEXT)"
        )

        assert isinstance(request, CreateTableRequest)
        assert request.name == "users"
        cols = {c.key: c for c in request.insert_column_requests}
        assert list(cols) == ["id", "name", "score", "note"]
        assert (cols["id"].primary_key, cols["id"].non_null, cols["id"].unique) == (True, True, True)
        assert (cols["name"].non_null, cols["name"].unique) == (True, False)
        assert (cols["score"].non_null, cols["score"].unique) == (False, True)
        assert not any([cols["note"].primary_key, cols["note"].non_null, cols["note"].unique])

    def test_create_without_columns(self, parser: CommandParser) -> None:
        request = parser.parse("CREATE TABLE empty")
        assert request == CreateRequest(name="empty")

    def test_create_columns_are_valid(self, parser: CommandParser) -> None:
        """Parsed column definitions always build valid domain columns."""
        request = parser.parse("CREATE TABLE t (id INT PRIMARY KEY)")
        assert isinstance(request, CreateTableRequest)
        assert request.insert_column_requests[0].to_column().primary_key


@pytest.mark.unit
class TestParseInsert:
    """Tests for INSERT parsing."""

    def test_typed_literals(self, parser: CommandParser) -> None:
        request = parser.parse("INSERT INTO t (a, b, c, d, e) VALUES (1, 'x', 2.5, TRUE, NULL)")

        assert isinstance(request, InsertRowRequest)
        assert request.table_name == "t"
        assert request.row.values == [
            Value.from_int(1),
            Value.from_str("x"),
            Value.from_float(2.5),
            Value.from_bool(True),
            Value.null(),
        ]

    def test_negative_number(self, parser: CommandParser) -> None:
        request = parser.parse("INSERT INTO t VALUES (-7, -1.5)")
        assert isinstance(request, InsertRowRequest)
        assert request.row.values == [Value.from_int(-7), Value.from_float(-1.5)]

    def test_without_column_list(self, parser: CommandParser) -> None:
        request = parser.parse("INSERT INTO t VALUES ('only')")
        assert isinstance(request, InsertRowRequest)
        assert request.row.values == [Value.from_str("only")]

    def test_double_quoted_strings(self, parser: CommandParser) -> None:
        """Double-quoted words in VALUES are text, like single-quoted ones."""
        request = parser.parse(
            'INSERT INTO users (id, name, email) VALUES (1, "Alice", \'alice@example.com\')'
        )

        assert isinstance(request, InsertRowRequest)
        assert request.row.values == [
            Value.from_int(1),
            Value.from_str("Alice"),
            Value.from_str("alice@example.com"),
        ]

    def test_column_count_mismatch(self, parser: CommandParser) -> None:
        """The column list must match the number of values."""
        with pytest.raises(ParseError, match="2 columns but 1 values"):
            parser.parse("INSERT INTO t (a, b) VALUES (1)")

    def test_multiple_rows_rejected(self, parser: CommandParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("INSERT INTO t VALUES (1), (2)")

    def test_integer_out_of_range(self, parser: CommandParser) -> None:
        with pytest.raises(ParseError, match="64-bit"):
            parser.parse("INSERT INTO t VALUES (9223372036854775808)")


@pytest.mark.unit
class TestParseSelect:
    """Tests for SELECT parsing."""

    def test_select_star(self, parser: CommandParser) -> None:
        request = parser.parse("SELECT * FROM users")
        assert request == SelectRequest(table_name="users", columns=None, condition=None)

    def test_select_columns_with_condition(self, parser: CommandParser) -> None:
        request = parser.parse("SELECT name, id FROM users WHERE id = 1")

        assert isinstance(request, SelectRequest)
        assert request.columns == ["name", "id"]
        assert request.condition is not None
        assert (request.condition.column, request.condition.value) == ("id", "1")

    def test_condition_literals_use_string_form(self, parser: CommandParser) -> None:
        """Condition values are compared as text, e.g. booleans as 'true'."""
        request = parser.parse("SELECT * FROM t WHERE active = TRUE")
        assert isinstance(request, SelectRequest)
        assert request.condition.value == "true"  # type: ignore[union-attr]

        request = parser.parse("SELECT * FROM t WHERE name = 'bob'")
        assert request.condition.value == "bob"  # type: ignore[union-attr]

    def test_condition_with_double_quoted_value(self, parser: CommandParser) -> None:
        request = parser.parse('SELECT id FROM users WHERE email = "alice@example.com"')

        assert isinstance(request, SelectRequest)
        assert request.condition is not None
        assert (request.condition.column, request.condition.value) == (
            "email",
            "alice@example.com",
        )

    def test_condition_value_may_come_first(self, parser: CommandParser) -> None:
        request = parser.parse('SELECT * FROM users WHERE "bob" = name')

        assert isinstance(request, SelectRequest)
        assert request.condition is not None
        assert (request.condition.column, request.condition.value) == ("name", "bob")

    def test_only_equality_is_supported(self, parser: CommandParser) -> None:
        with pytest.raises(ParseError, match="single equality"):
            parser.parse("SELECT * FROM t WHERE a > 1")
        with pytest.raises(ParseError, match="single equality"):
            parser.parse("SELECT * FROM t WHERE a = 1 AND b = 2")

    def test_null_comparison_rejected(self, parser: CommandParser) -> None:
        with pytest.raises(ParseError):
            parser.parse("SELECT * FROM t WHERE a = NULL")


@pytest.mark.unit
class TestParseOtherStatements:
    """Tests for UPDATE, RENAME and DROP parsing."""

    def test_update(self, parser: CommandParser) -> None:
        """Assignments are sent as text."""
        request = parser.parse("UPDATE t SET b = 9, c = 'x' WHERE a = 1")

        assert isinstance(request, UpdateRequest)
        assert request.table_name == "t"
        assert [(u.column, u.value) for u in request.updates] == [("b", "9"), ("c", "x")]
        assert request.condition is not None
        assert (request.condition.column, request.condition.value) == ("a", "1")

    def test_update_with_double_quoted_value(self, parser: CommandParser) -> None:
        request = parser.parse('UPDATE t SET name = "Bob" WHERE id = 2')
        assert isinstance(request, UpdateRequest)
        assert [(u.column, u.value) for u in request.updates] == [("name", "Bob")]

    def test_update_without_condition(self, parser: CommandParser) -> None:
        request = parser.parse("UPDATE t SET b = 'y'")
        assert isinstance(request, UpdateRequest)
        assert request.condition is None

    @pytest.mark.parametrize(
        "text",
        [
            "RENAME TABLE old TO new",
            "rename table old to new;",
            "ALTER TABLE old RENAME TO new",
        ],
    )
    def test_rename(self, parser: CommandParser, text: str) -> None:
        assert parser.parse(text) == RenameTableRequest(current_name="old", new_name="new")

    def test_drop(self, parser: CommandParser) -> None:
        assert parser.parse("DROP TABLE t") == DropTableRequest(name="t")

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "DELETE FROM t WHERE a = 1",
            "SELECT * FROM t; SELECT * FROM u",
        ],
    )
    def test_unsupported(self, parser: CommandParser, text: str) -> None:
        with pytest.raises(ParseError):
            parser.parse(text)
