"""Tagged primitive values stored in table rows.

A Value is one of five kinds: string, boolean, 64-bit integer, 64-bit float
or null. Comparisons and display go through the canonical string projection
returned by :meth:`Value.as_string`.

Snapshot/wire format (externally tagged):
    {"Str": "abc"}  {"Bool": true}  {"Int": 42}  {"Float": 1.5}  "Null"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ValueKind(Enum):
    """Kinds of primitive values. The enum value is the wire tag."""

    STR = "Str"
    BOOL = "Bool"
    INT = "Int"
    FLOAT = "Float"
    NULL = "Null"


@dataclass(frozen=True, slots=True)
class Value:
    """An immutable tagged primitive.

    Use the ``from_*`` constructors rather than building instances directly;
    they pair the kind with a payload of the right Python type.

    Example:
        >>> Value.from_int(7).as_string()
        '7'
        >>> Value.from_bool(True).as_string()
        'true'
        >>> Value.null().as_string() is None
        True
    """

    kind: ValueKind
    data: str | bool | int | float | None = None

    @classmethod
    def from_str(cls, value: str) -> Value:
        return cls(ValueKind.STR, value)

    @classmethod
    def from_bool(cls, value: bool) -> Value:
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def from_int(cls, value: int) -> Value:
        return cls(ValueKind.INT, int(value))

    @classmethod
    def from_float(cls, value: float) -> Value:
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL, None)

    @classmethod
    def from_optional(cls, value: str | None) -> Value:
        """Build a string value, mapping absence to Null."""
        if value is None:
            return cls.null()
        return cls.from_str(value)

    @classmethod
    def of(cls, value: Any) -> Value:
        """Coerce a plain Python primitive (or a Value) into a Value."""
        if isinstance(value, Value):
            return value
        if value is None:
            return cls.null()
        # bool must be tested before int (bool is an int subclass)
        if isinstance(value, bool):
            return cls.from_bool(value)
        if isinstance(value, int):
            return cls.from_int(value)
        if isinstance(value, float):
            return cls.from_float(value)
        if isinstance(value, str):
            return cls.from_str(value)
        raise TypeError(f"Unsupported value type: {type(value).__name__}")

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def as_string(self) -> str | None:
        """Canonical string projection; None only for Null."""
        if self.kind is ValueKind.NULL:
            return None
        if self.kind is ValueKind.BOOL:
            return "true" if self.data else "false"
        if self.kind is ValueKind.FLOAT:
            return repr(self.data)
        return str(self.data)

    def to_python(self) -> str | bool | int | float | None:
        """Return the untagged payload."""
        return self.data

    def to_json(self) -> Any:
        """Serialize to the externally tagged JSON shape."""
        if self.kind is ValueKind.NULL:
            return ValueKind.NULL.value
        return {self.kind.value: self.data}

    @classmethod
    def from_json(cls, data: Any) -> Value:
        """Deserialize from the externally tagged JSON shape.

        Raises:
            ValueError: If the payload is not a valid tagged value.
        """
        if isinstance(data, Value):
            return data
        if data == ValueKind.NULL.value or data is None:
            return cls.null()
        if not isinstance(data, dict) or len(data) != 1:
            raise ValueError(f"Invalid tagged value: {data!r}")

        tag, payload = next(iter(data.items()))
        if tag == ValueKind.STR.value and isinstance(payload, str):
            return cls.from_str(payload)
        if tag == ValueKind.BOOL.value and isinstance(payload, bool):
            return cls.from_bool(payload)
        if tag == ValueKind.INT.value and isinstance(payload, int) and not isinstance(payload, bool):
            if not INT64_MIN <= payload <= INT64_MAX:
                raise ValueError(f"Integer out of 64-bit range: {payload}")
            return cls.from_int(payload)
        if tag == ValueKind.FLOAT.value and isinstance(payload, (int, float)) and not isinstance(payload, bool):
            try:
                return cls.from_float(payload)
            except OverflowError as e:
                raise ValueError(f"Float out of range: {data!r}") from e
        raise ValueError(f"Invalid tagged value: {data!r}")

    def __str__(self) -> str:
        text = self.as_string()
        return "NULL" if text is None else text
