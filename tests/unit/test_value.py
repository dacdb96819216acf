"""Unit tests for the Value value object."""

from __future__ import annotations

import pytest

from tablestore.domain.value_objects import INT64_MAX, INT64_MIN, Value, ValueKind


@pytest.mark.unit
class TestValueConstruction:
    """Tests for Value constructors."""

    def test_typed_constructors(self) -> None:
        """Each constructor pairs the right kind with its payload."""
        assert Value.from_str("a") == Value(ValueKind.STR, "a")
        assert Value.from_bool(True) == Value(ValueKind.BOOL, True)
        assert Value.from_int(3) == Value(ValueKind.INT, 3)
        assert Value.from_float(1.5) == Value(ValueKind.FLOAT, 1.5)
        assert Value.null() == Value(ValueKind.NULL, None)

    def test_of_maps_python_primitives(self) -> None:
        """Value.of picks the kind from the Python type."""
        assert Value.of("x").kind is ValueKind.STR
        assert Value.of(1).kind is ValueKind.INT
        assert Value.of(1.0).kind is ValueKind.FLOAT
        assert Value.of(None).is_null

    def test_of_bool_is_not_int(self) -> None:
        """Booleans stay booleans even though bool subclasses int."""
        assert Value.of(False) == Value.from_bool(False)

    def test_of_passes_values_through(self) -> None:
        value = Value.from_int(9)
        assert Value.of(value) is value

    def test_of_rejects_unsupported_types(self) -> None:
        with pytest.raises(TypeError):
            Value.of([1, 2])

    def test_from_optional(self) -> None:
        """Absent strings become Null."""
        assert Value.from_optional(None).is_null
        assert Value.from_optional("v") == Value.from_str("v")

    def test_values_are_immutable(self) -> None:
        value = Value.from_int(1)
        with pytest.raises(AttributeError):
            value.data = 2  # type: ignore[misc]


@pytest.mark.unit
class TestStringProjection:
    """Tests for as_string, the basis of matching and display."""

    def test_null_projects_to_none(self) -> None:
        assert Value.null().as_string() is None

    def test_booleans_are_lowercase(self) -> None:
        assert Value.from_bool(True).as_string() == "true"
        assert Value.from_bool(False).as_string() == "false"

    def test_numbers(self) -> None:
        assert Value.from_int(-42).as_string() == "-42"
        assert Value.from_float(1.0).as_string() == "1.0"
        assert Value.from_float(2.5).as_string() == "2.5"

    def test_strings_are_unchanged(self) -> None:
        assert Value.from_str("hello world").as_string() == "hello world"

    def test_str_shows_null(self) -> None:
        """Display form uses NULL for Null."""
        assert str(Value.null()) == "NULL"
        assert str(Value.from_int(5)) == "5"


@pytest.mark.unit
class TestTaggedJson:
    """Tests for the externally tagged JSON form."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Value.from_str("abc"), {"Str": "abc"}),
            (Value.from_bool(True), {"Bool": True}),
            (Value.from_int(42), {"Int": 42}),
            (Value.from_float(1.5), {"Float": 1.5}),
            (Value.null(), "Null"),
        ],
    )
    def test_to_json(self, value: Value, expected: object) -> None:
        """Every kind has its documented JSON shape."""
        assert value.to_json() == expected
        assert Value.from_json(expected) == value

    def test_float_accepts_integral_json_number(self) -> None:
        assert Value.from_json({"Float": 2}) == Value.from_float(2.0)

    def test_int_range_is_enforced(self) -> None:
        """Integers outside the signed 64-bit range are rejected."""
        assert Value.from_json({"Int": INT64_MAX}).data == INT64_MAX
        assert Value.from_json({"Int": INT64_MIN}).data == INT64_MIN
        with pytest.raises(ValueError):
            Value.from_json({"Int": INT64_MAX + 1})

    def test_float_out_of_range(self) -> None:
        """An integral Float payload too large for a double is invalid."""
        with pytest.raises(ValueError, match="Float out of range"):
            Value.from_json({"Float": 10**400})

    @pytest.mark.parametrize(
        "payload",
        [
            {"Int": "1"},
            {"Int": True},
            {"Bool": 1},
            {"Str": 5},
            {"Text": "x"},
            {"Str": "a", "Int": 1},
            "null",
            42,
            [],
        ],
    )
    def test_invalid_payloads(self, payload: object) -> None:
        with pytest.raises(ValueError):
            Value.from_json(payload)
