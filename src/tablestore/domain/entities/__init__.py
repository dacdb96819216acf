"""Domain entities for the table store.

Exports:
    - Column: Schema descriptor with constraint flags and optional foreign key
    - Row: Ordered values aligned to a table's columns
    - Table: Named schema plus rows
"""

from tablestore.domain.entities.column import Column
from tablestore.domain.entities.row import Row
from tablestore.domain.entities.table import Table

__all__ = [
    "Column",
    "Row",
    "Table",
]
