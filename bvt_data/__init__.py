"""Dataset comparison helpers for database build verification tests.

Typical use::

    from bvt_data import TabularDataset, ValueType, compare

    expected = TabularDataset("Expected", [("id", ValueType.INT32), ("name", ValueType.TEXT)], ["id"])
    expected.add_row([1, "one"])
    report = compare(expected, actual)  # None when nothing differs
"""

from .models import (
    MISSING,
    Column,
    ComparisonStats,
    DatasetError,
    DiffEntry,
    DiffReport,
    MissingKeyColumnError,
    Row,
    TabularDataset,
    ValueType,
)
from .services.differ import (
    ComparisonError,
    DatasetDiffer,
    InvalidArgumentError,
    SchemaMismatchError,
    compare,
)

__all__ = [
    "Column",
    "ValueType",
    "Row",
    "TabularDataset",
    "DatasetError",
    "MissingKeyColumnError",
    "DiffEntry",
    "DiffReport",
    "MISSING",
    "ComparisonStats",
    "ComparisonError",
    "InvalidArgumentError",
    "SchemaMismatchError",
    "DatasetDiffer",
    "compare",
]
