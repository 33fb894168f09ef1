from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Column schema model and declared value types.

A column declares one of a small closed set of value types. The declared type,
not the runtime type of a cell, decides which comparison rule applies.
"""

__all__ = [
    "ValueType",
    "Column",
]


class ValueType(Enum):
    """Declared value type of a column.

    The enum value is the type name reported in diff entries.
    """
    TEXT = "text"
    INT32 = "int32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"
    OTHER = "other"


@dataclass(frozen=True)
class Column:
    """Single column of a TabularDataset schema.

    ordinal is assigned by the owning dataset; -1 means "not yet attached".
    computed columns hold values produced by the collaborator (e.g. an expression
    evaluated by the query); they compare like any other column.
    """
    name: str
    value_type: ValueType = ValueType.OTHER
    ordinal: int = -1
    computed: bool = False

    @property
    def type_name(self) -> str:
        return self.value_type.value
