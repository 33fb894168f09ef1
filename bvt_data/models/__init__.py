"""Domain models for dataset comparison.

This package contains the tabular data model the comparison engine operates on
and the diff report it produces.
"""

from .column import Column, ValueType
from .comparison_stats import ComparisonStats
from .dataset import DatasetError, MissingKeyColumnError, Row, TabularDataset
from .diff_report import MISSING, DiffEntry, DiffReport, Missing

__all__ = [
    # Schema / data models
    "Column",
    "ValueType",
    "Row",
    "TabularDataset",
    "DatasetError",
    "MissingKeyColumnError",
    # Report models
    "DiffEntry",
    "DiffReport",
    "Missing",
    "MISSING",
    "ComparisonStats",
]
