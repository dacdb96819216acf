"""Value objects for the table store domain.

Exports:
    - Value: Tagged primitive (string, boolean, integer, float, null)
    - ValueKind: Enumeration of value kinds (also the wire tags)
"""

from tablestore.domain.value_objects.value import INT64_MAX, INT64_MIN, Value, ValueKind

__all__ = [
    "Value",
    "ValueKind",
    "INT64_MIN",
    "INT64_MAX",
]
