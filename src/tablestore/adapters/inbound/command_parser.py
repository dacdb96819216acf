"""Text command parser using sqlglot.

Converts SQL-like commands typed into the interactive shell into the
request models of the HTTP API.

Supported statements:
    - CREATE TABLE t (a INT PRIMARY KEY, b TEXT NOT NULL, c FLOAT UNIQUE)
    - CREATE TABLE t
    - INSERT INTO t [(a, b)] VALUES (1, 'x')
    - SELECT * | a, b FROM t [WHERE col = value]
    - UPDATE t SET a = 1, b = 'x' [WHERE col = value]
    - RENAME TABLE a TO b / ALTER TABLE a RENAME TO b
    - DROP TABLE t

Column types in CREATE TABLE are accepted but not enforced. WHERE clauses
support a single equality between a column and a literal, compared against
the string form of the stored value.

String literals may use single or double quotes. A double-quoted word in
a value position (VALUES, SET right-hand side, WHERE operand) is read as
text rather than as a quoted identifier.
"""

from __future__ import annotations

import re

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from tablestore.adapters.inbound.schemas import (
    ColumnPayload,
    ConditionModel,
    CreateRequest,
    CreateTableRequest,
    DropTableRequest,
    InsertRowRequest,
    RenameTableRequest,
    Request,
    RowPayload,
    SelectRequest,
    UpdateColumnRequest,
    UpdateRequest,
)
from tablestore.domain.value_objects import INT64_MAX, INT64_MIN, Value

_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"

# sqlglot has no portable representation of these two forms
_RENAME_PATTERNS = (
    re.compile(rf"^\s*RENAME\s+TABLE\s+({_IDENTIFIER})\s+TO\s+({_IDENTIFIER})\s*;?\s*$", re.I),
    re.compile(
        rf"^\s*ALTER\s+TABLE\s+({_IDENTIFIER})\s+RENAME\s+TO\s+({_IDENTIFIER})\s*;?\s*$", re.I
    ),
)

SYNTAX_HINT = """Supported commands:
  CREATE TABLE t (a INT PRIMARY KEY, b TEXT NOT NULL, c FLOAT UNIQUE)
  INSERT INTO t (a, b) VALUES (1, 'x')
  SELECT * FROM t WHERE a = 1
  UPDATE t SET b = 'y' WHERE a = 1
  RENAME TABLE t TO u
  DROP TABLE t"""


def _is_quoted_text(expr: exp.Expression) -> bool:
    """Whether ``expr`` is a double-quoted word, read as text in value positions."""
    return (
        isinstance(expr, exp.Column)
        and not expr.table
        and isinstance(expr.this, exp.Identifier)
        and expr.this.quoted
    )


class ParseError(Exception):
    """Raised when a command cannot be parsed or is not supported."""

    pass


class CommandParser:
    """Parser from command text to API request models.

    Example:
        >>> parser = CommandParser()
        >>> parser.parse("SELECT * FROM users WHERE id = 1")
        SelectRequest(table_name='users', columns=None, condition=ConditionModel(column='id', value='1'))
    """

    def __init__(self, dialect: str = "sqlite") -> None:
        """Initialize the parser.

        Args:
            dialect: SQL dialect to use for parsing (default: sqlite).
        """
        self._dialect = dialect

    def parse(self, text: str) -> Request:
        """Parse one command.

        Raises:
            ParseError: If the command is invalid or unsupported.
        """
        if not text or not text.strip():
            raise ParseError("Empty command")

        for pattern in _RENAME_PATTERNS:
            match = pattern.match(text)
            if match:
                return RenameTableRequest(current_name=match.group(1), new_name=match.group(2))

        try:
            statements = sqlglot.parse(text, dialect=self._dialect)
        except SqlglotError as e:
            raise ParseError(f"Failed to parse command: {e}") from e

        statements = [s for s in statements if s is not None]
        if not statements:
            raise ParseError("Empty command")
        if len(statements) > 1:
            raise ParseError("Multiple statements not supported")

        return self._convert_statement(statements[0])

    def _convert_statement(self, stmt: exp.Expression) -> Request:
        if isinstance(stmt, exp.Select):
            return self._convert_select(stmt)
        elif isinstance(stmt, exp.Insert):
            return self._convert_insert(stmt)
        elif isinstance(stmt, exp.Update):
            return self._convert_update(stmt)
        elif isinstance(stmt, exp.Create):
            return self._convert_create(stmt)
        elif isinstance(stmt, exp.Drop):
            return self._convert_drop(stmt)
        else:
            raise ParseError(f"Unsupported statement type: {type(stmt).__name__}")

    def _convert_create(self, stmt: exp.Create) -> CreateRequest | CreateTableRequest:
        if str(stmt.args.get("kind", "")).upper() != "TABLE":
            raise ParseError("Only CREATE TABLE is supported")

        table = stmt.find(exp.Table)
        if table is None:
            raise ParseError("CREATE TABLE requires table name")

        schema = stmt.find(exp.Schema)
        if schema is None or not schema.expressions:
            return CreateRequest(name=table.name)

        # table-level PRIMARY KEY (a, b)
        key_columns: set[str] = set()
        for item in schema.expressions:
            if isinstance(item, exp.PrimaryKey):
                for part in item.expressions:
                    ident = part if part.name else part.find(exp.Identifier)
                    if ident is not None:
                        key_columns.add(ident.name)

        columns = []
        for col_def in schema.expressions:
            if isinstance(col_def, exp.PrimaryKey):
                continue
            if not isinstance(col_def, exp.ColumnDef):
                raise ParseError(f"Unsupported table element: {col_def.sql()}")

            primary_key = col_def.name in key_columns
            non_null = False
            unique = False
            for constraint in col_def.constraints:
                kind = constraint.kind
                if isinstance(kind, exp.PrimaryKeyColumnConstraint):
                    primary_key = True
                elif isinstance(kind, exp.NotNullColumnConstraint):
                    non_null = not kind.args.get("allow_null")
                elif isinstance(kind, exp.UniqueColumnConstraint):
                    unique = True

            if primary_key:
                non_null = unique = True
            columns.append(
                ColumnPayload(
                    key=col_def.name,
                    primary_key=primary_key,
                    non_null=non_null,
                    unique=unique,
                )
            )

        return CreateTableRequest(name=table.name, insert_column_requests=columns)

    def _convert_insert(self, stmt: exp.Insert) -> InsertRowRequest:
        table = stmt.find(exp.Table)
        if table is None:
            raise ParseError("INSERT requires table name")

        columns = []
        col_list = stmt.find(exp.Schema)
        if col_list:
            columns = [col.name for col in col_list.expressions]

        values = stmt.find(exp.Values)
        if values is None or not values.expressions:
            raise ParseError("INSERT requires a VALUES list")
        if len(values.expressions) > 1:
            raise ParseError("Only one row per INSERT is supported")

        row = [self._convert_literal(val) for val in values.expressions[0].expressions]
        if columns and len(columns) != len(row):
            raise ParseError(
                f"INSERT lists {len(columns)} columns but {len(row)} values"
            )

        return InsertRowRequest(table_name=table.name, row=RowPayload(values=row))

    def _convert_select(self, stmt: exp.Select) -> SelectRequest:
        if stmt.args.get("joins"):
            raise ParseError("JOIN is not supported")

        table = stmt.find(exp.Table)
        if table is None:
            raise ParseError("SELECT requires a FROM clause")

        columns: list[str] | None = []
        for item in stmt.expressions:
            if isinstance(item, exp.Star):
                columns = None
                break
            if not isinstance(item, exp.Column):
                raise ParseError(f"Unsupported select item: {item.sql()}")
            columns.append(item.name)

        if columns is not None and len(stmt.expressions) == 0:
            raise ParseError("SELECT requires a column list")

        return SelectRequest(
            table_name=table.name,
            columns=columns,
            condition=self._convert_where(stmt),
        )

    def _convert_update(self, stmt: exp.Update) -> UpdateRequest:
        table = stmt.find(exp.Table)
        if table is None:
            raise ParseError("UPDATE requires table name")

        updates = []
        for eq in stmt.expressions:
            if not isinstance(eq, exp.EQ) or not isinstance(eq.left, exp.Column):
                raise ParseError(f"Unsupported assignment: {eq.sql()}")
            updates.append(
                UpdateColumnRequest(column=eq.left.name, value=self._literal_text(eq.right))
            )

        if not updates:
            raise ParseError("UPDATE requires at least one assignment")

        return UpdateRequest(
            table_name=table.name,
            condition=self._convert_where(stmt),
            updates=updates,
        )

    def _convert_drop(self, stmt: exp.Drop) -> DropTableRequest:
        if str(stmt.args.get("kind", "")).upper() != "TABLE":
            raise ParseError("Only DROP TABLE is supported")

        table = stmt.find(exp.Table)
        if table is None:
            raise ParseError("DROP TABLE requires table name")

        return DropTableRequest(name=table.name)

    def _convert_where(self, stmt: exp.Expression) -> ConditionModel | None:
        where = stmt.find(exp.Where)
        if where is None:
            return None

        predicate = where.this
        if not isinstance(predicate, exp.EQ):
            raise ParseError("WHERE supports a single equality only")

        column, literal = predicate.left, predicate.right
        if isinstance(literal, exp.Column) and (
            not isinstance(column, exp.Column)
            or (_is_quoted_text(column) and not _is_quoted_text(literal))
        ):
            column, literal = literal, column
        if not isinstance(column, exp.Column):
            raise ParseError("WHERE must compare a column with a value")

        return ConditionModel(column=column.name, value=self._literal_text(literal))

    def _literal_text(self, expr: exp.Expression) -> str:
        """String form of a literal, as used for matching and updates."""
        text = self._convert_literal(expr).as_string()
        if text is None:
            raise ParseError("NULL is not allowed here")
        return text

    def _convert_literal(self, expr: exp.Expression) -> Value:
        if isinstance(expr, exp.Null):
            return Value.null()
        elif isinstance(expr, exp.Boolean):
            return Value.from_bool(expr.this)
        elif isinstance(expr, exp.Neg) and isinstance(expr.this, exp.Literal):
            if not expr.this.is_number:
                raise ParseError(f"Unsupported value: {expr.sql()}")
            return self._convert_number("-" + expr.this.this)
        elif isinstance(expr, exp.Literal):
            if expr.is_string:
                return Value.from_str(expr.this)
            return self._convert_number(expr.this)
        elif _is_quoted_text(expr):
            return Value.from_str(expr.name)
        else:
            raise ParseError(f"Unsupported value: {expr.sql()}")

    def _convert_number(self, text: str) -> Value:
        try:
            number = int(text)
        except ValueError:
            return Value.from_float(float(text))

        if not INT64_MIN <= number <= INT64_MAX:
            raise ParseError(f"Integer out of 64-bit range: {text}")
        return Value.from_int(number)
