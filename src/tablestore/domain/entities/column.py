"""Column schema descriptor.

A column is identified by its ``key`` within the owning table and carries
three constraint flags. A primary key column must also be non-null and
unique; violating this raises ConstraintViolation at construction time, so
an invalid Column never exists.

Foreign keys are modelled as an owned list of sub-columns describing the
referenced (possibly composite) key. The list is a plain tree with no back
references.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tablestore.domain.errors import ConstraintViolation


@dataclass(frozen=True)
class Column:
    """A table column definition.

    Attributes:
        key: Column name, unique within its table.
        primary_key: Whether this column is (part of) the primary key.
        non_null: Whether Null values are rejected.
        unique: Whether values are declared unique.
        foreign_key: Optional referenced key columns.

    Raises:
        ConstraintViolation: If ``primary_key`` is set without both
            ``non_null`` and ``unique``.
    """

    key: str
    primary_key: bool = False
    non_null: bool = False
    unique: bool = False
    foreign_key: list[Column] | None = None

    def __post_init__(self) -> None:
        if self.primary_key and not (self.non_null and self.unique):
            raise ConstraintViolation(
                f"Primary key column '{self.key}' must be non-null and unique"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "primary_key": self.primary_key,
            "non_null": self.non_null,
            "unique": self.unique,
            "foreign_key": (
                None
                if self.foreign_key is None
                else [column.to_dict() for column in self.foreign_key]
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        foreign_key = data.get("foreign_key")
        return cls(
            key=data["key"],
            primary_key=bool(data.get("primary_key", False)),
            non_null=bool(data.get("non_null", False)),
            unique=bool(data.get("unique", False)),
            foreign_key=(
                None
                if foreign_key is None
                else [cls.from_dict(item) for item in foreign_key]
            ),
        )

    def flags(self) -> str:
        """Short flag summary used in listings (e.g. ``PK,NN,UQ``)."""
        names = []
        if self.primary_key:
            names.append("PK")
        if self.non_null:
            names.append("NN")
        if self.unique:
            names.append("UQ")
        if self.foreign_key:
            names.append("FK(" + ",".join(c.key for c in self.foreign_key) + ")")
        return ",".join(names)
