"""Request and response models for the table store HTTP API.

These pydantic models are shared by the REST adapter, the HTTP client and
the text-command parser, so the three always agree on the wire format.

Values travel in the externally tagged form::

    {"Str": "abc"}  {"Bool": true}  {"Int": 42}  {"Float": 1.5}  "Null"
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, Field, PlainSerializer, PlainValidator, WithJsonSchema

from tablestore.domain.entities import Column, Row, Table
from tablestore.domain.services import ColumnUpdate, Condition
from tablestore.domain.value_objects import Value

TaggedValue = Annotated[
    Value,
    PlainValidator(Value.from_json),
    PlainSerializer(lambda value: value.to_json(), return_type=Any),
    WithJsonSchema(
        {
            "oneOf": [
                {"type": "object", "properties": {"Str": {"type": "string"}}, "required": ["Str"]},
                {"type": "object", "properties": {"Bool": {"type": "boolean"}}, "required": ["Bool"]},
                {"type": "object", "properties": {"Int": {"type": "integer"}}, "required": ["Int"]},
                {"type": "object", "properties": {"Float": {"type": "number"}}, "required": ["Float"]},
                {"const": "Null"},
            ]
        }
    ),
]


# =============================================================================
# Shared payloads
# =============================================================================


class RowPayload(BaseModel):
    """A row of tagged values."""

    values: list[TaggedValue] = Field(default_factory=list, description="Row values")

    @classmethod
    def from_row(cls, row: Row) -> RowPayload:
        return cls(values=list(row.values))

    def to_row(self) -> Row:
        return Row(list(self.values))


class ColumnPayload(BaseModel):
    """Column definition, also used for nested foreign key columns."""

    key: str = Field(..., min_length=1, description="Column name")
    primary_key: bool = Field(False, description="Part of the primary key")
    non_null: bool = Field(False, description="Reject Null values")
    unique: bool = Field(False, description="Values are declared unique")
    foreign_key: list[ColumnPayload] | None = Field(None, description="Referenced key columns")

    @classmethod
    def from_column(cls, column: Column) -> ColumnPayload:
        return cls(
            key=column.key,
            primary_key=column.primary_key,
            non_null=column.non_null,
            unique=column.unique,
            foreign_key=(
                None
                if column.foreign_key is None
                else [cls.from_column(c) for c in column.foreign_key]
            ),
        )

    def to_column(self) -> Column:
        """Build the domain column.

        Raises:
            ConstraintViolation: If the flags are inconsistent.
        """
        return Column(
            key=self.key,
            primary_key=self.primary_key,
            non_null=self.non_null,
            unique=self.unique,
            foreign_key=(
                None
                if self.foreign_key is None
                else [c.to_column() for c in self.foreign_key]
            ),
        )


class TablePayload(BaseModel):
    """Full table: schema and rows."""

    name: str = Field(..., description="Table name")
    columns: list[ColumnPayload] = Field(default_factory=list, description="Ordered schema")
    rows: list[RowPayload] = Field(default_factory=list, description="Rows in insertion order")

    @classmethod
    def from_table(cls, table: Table) -> TablePayload:
        return cls(
            name=table.name,
            columns=[ColumnPayload.from_column(c) for c in table.columns],
            rows=[RowPayload.from_row(r) for r in table.rows],
        )

    def to_table(self) -> Table:
        return Table(
            name=self.name,
            columns=[c.to_column() for c in self.columns],
            rows=[r.to_row() for r in self.rows],
        )


class ConditionModel(BaseModel):
    """Equality filter compared against the string form of a value."""

    column: str = Field(..., description="Column to compare")
    value: str = Field(..., description="Expected string value")

    def to_condition(self) -> Condition:
        return Condition(column=self.column, value=self.value)


class UpdateColumnRequest(BaseModel):
    """One column assignment in an update."""

    column: str = Field(..., description="Column to overwrite")
    value: str = Field(..., description="New value, stored as a string")

    def to_update(self) -> ColumnUpdate:
        return ColumnUpdate(column=self.column, value=self.value)


# =============================================================================
# Requests
# =============================================================================


class CreateRequest(BaseModel):
    """Create an empty table."""

    endpoint: ClassVar[str] = "/create"

    name: str = Field(..., min_length=1, description="Table name")


class CreateTableRequest(BaseModel):
    """Create a table together with its columns."""

    endpoint: ClassVar[str] = "/create_table"

    name: str = Field(..., min_length=1, description="Table name")
    insert_column_requests: list[ColumnPayload] = Field(
        default_factory=list, description="Columns in schema order"
    )


class DropTableRequest(BaseModel):
    """Drop a table."""

    endpoint: ClassVar[str] = "/drop_table"

    name: str = Field(..., description="Table name")


class RenameTableRequest(BaseModel):
    """Rename a table."""

    endpoint: ClassVar[str] = "/rename_table"

    current_name: str = Field(..., description="Existing table name")
    new_name: str = Field(..., min_length=1, description="New table name")


class InsertColumnRequest(BaseModel):
    """Append a column to an existing table."""

    endpoint: ClassVar[str] = "/insert_column"

    table_name: str = Field(..., description="Target table")
    key: str = Field(..., min_length=1, description="Column name")
    primary_key: bool = Field(False, description="Part of the primary key")
    non_null: bool = Field(False, description="Reject Null values")
    unique: bool = Field(False, description="Values are declared unique")
    foreign_key: list[ColumnPayload] | None = Field(None, description="Referenced key columns")

    def to_column(self) -> Column:
        return ColumnPayload(
            key=self.key,
            primary_key=self.primary_key,
            non_null=self.non_null,
            unique=self.unique,
            foreign_key=self.foreign_key,
        ).to_column()


class InsertRowRequest(BaseModel):
    """Append a row to a table."""

    endpoint: ClassVar[str] = "/insert_row"

    table_name: str = Field(..., description="Target table")
    row: RowPayload = Field(..., description="Row values in column order")


class SelectRequest(BaseModel):
    """Filtered projection over one table."""

    endpoint: ClassVar[str] = "/select"

    table_name: str = Field(..., description="Table to read")
    columns: list[str] | None = Field(None, description="Columns to project; all when omitted")
    condition: ConditionModel | None = Field(None, description="Optional equality filter")


class UpdateRequest(BaseModel):
    """Conditional overwrite of columns."""

    endpoint: ClassVar[str] = "/update_table"

    table_name: str = Field(..., description="Table to update")
    condition: ConditionModel | None = Field(None, description="Optional equality filter")
    updates: list[UpdateColumnRequest] = Field(..., description="Column assignments")


Request = (
    CreateRequest
    | CreateTableRequest
    | DropTableRequest
    | RenameTableRequest
    | InsertColumnRequest
    | InsertRowRequest
    | SelectRequest
    | UpdateRequest
)


# =============================================================================
# Responses
# =============================================================================


class MessageResponse(BaseModel):
    """Confirmation message."""

    message: str = Field(..., description="Human-readable confirmation")


class InsertRowResponse(BaseModel):
    """String projection of the stored row."""

    values: list[str | None] = Field(..., description="Stored values; null for Null")


class SelectResponse(BaseModel):
    """Projected rows."""

    rows: list[RowPayload] = Field(default_factory=list, description="Matching rows")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


class StatsResponse(BaseModel):
    """Response model for table store statistics."""

    tables: int = Field(..., description="Number of tables")
    rows: int = Field(..., description="Total rows across all tables")
    snapshot: str = Field(..., description="Snapshot location")


class ErrorResponse(BaseModel):
    """Error body returned for domain errors."""

    detail: str = Field(..., description="Error message")
    code: str = Field(..., description="Stable error code")
