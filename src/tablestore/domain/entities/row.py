"""Row entity: an ordered list of values aligned to a table's columns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tablestore.domain.value_objects import Value


@dataclass
class Row:
    """A row of values.

    Values are positionally aligned with the owning table's column list at
    the time the row was inserted.
    """

    values: list[Value] = field(default_factory=list)

    @classmethod
    def of(cls, *values: Any) -> Row:
        """Build a row from plain Python primitives.

        Example:
            >>> Row.of(1, "alice", None).as_strings()
            ['1', 'alice', None]
        """
        return cls([Value.of(v) for v in values])

    def add_value(self, value: Any) -> None:
        self.values.append(Value.of(value))

    def as_strings(self) -> list[str | None]:
        """String projection of every value (None for Null)."""
        return [value.as_string() for value in self.values]

    def copy(self) -> Row:
        return Row(list(self.values))

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, Any]:
        return {"values": [value.to_json() for value in self.values]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Row:
        return cls([Value.from_json(item) for item in data.get("values", [])])
