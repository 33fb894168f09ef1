from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd

from ..models.column import Column, ValueType
from ..models.dataset import TabularDataset
from ..models.diff_report import MISSING, DiffReport

"""pandas bridge.

Query executors and file importers commonly materialize results as DataFrames.
These helpers convert such frames into TabularDatasets (declared types inferred
from dtypes, NA -> None, numpy scalars -> Python natives) and diff reports back
into frames for display or export.
"""

__all__ = [
    "REPORT_COLUMNS",
    "infer_value_type",
    "dataset_from_frame",
    "dataset_to_frame",
    "report_to_frame",
]

REPORT_COLUMNS = ["Key", "Row", "Column", "Expected", "Actual", "ExpectedType", "ActualType"]


def _is_na(value: Any) -> bool:
    if value is None:
        return True
    # list / dict 等のセルは pd.isna が配列を返すので対象外
    if np.ndim(value) != 0:
        return False
    return bool(pd.isna(value))


def _to_native(value: Any) -> Any:
    if _is_na(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def infer_value_type(series: pd.Series) -> ValueType:
    """Infer the declared type of a column from its dtype (and values for object)."""
    dtype = series.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return ValueType.OTHER
    if pd.api.types.is_integer_dtype(dtype):
        return ValueType.INT32
    if pd.api.types.is_float_dtype(dtype):
        return ValueType.FLOAT64
    if isinstance(dtype, pd.StringDtype):
        return ValueType.TEXT
    if pd.api.types.is_object_dtype(dtype):
        values = [v for v in series.tolist() if not _is_na(v)]
        if not values:
            return ValueType.OTHER
        if all(isinstance(v, Decimal) for v in values):
            return ValueType.DECIMAL
        if all(isinstance(v, str) for v in values):
            return ValueType.TEXT
    return ValueType.OTHER


def dataset_from_frame(
    frame: pd.DataFrame,
    key_columns: Sequence[str],
    *,
    name: str | None = None,
    value_types: Mapping[str, ValueType] | None = None,
) -> TabularDataset:
    """Build a TabularDataset from a DataFrame.

    Parameters
    ----------
    frame: 元データ (列順 = ordinal)
    key_columns: composite key column names
    name: dataset name (default: frame.attrs["name"] or "DataFrame")
    value_types: explicit declared types overriding dtype inference
    """
    overrides = dict(value_types or {})
    columns = []
    for col_name in frame.columns:
        label = str(col_name)
        vtype = overrides.get(label) or infer_value_type(frame[col_name])
        columns.append(Column(name=label, value_type=vtype))

    dataset = TabularDataset(
        name=name or frame.attrs.get("name", "DataFrame"),
        columns=columns,
        key_columns=key_columns,
    )
    for raw in frame.itertuples(index=False, name=None):
        dataset.add_row([_to_native(v) for v in raw])
    return dataset


def dataset_to_frame(dataset: TabularDataset) -> pd.DataFrame:
    """Convert a dataset back to a DataFrame (object dtype, None preserved)."""
    frame = pd.DataFrame(
        [list(row) for row in dataset], columns=dataset.column_names, dtype=object
    )
    frame.attrs["name"] = dataset.name
    return frame


def report_to_frame(report: DiffReport | None) -> pd.DataFrame:
    """Convert a diff report to a DataFrame; MISSING becomes NA."""
    if report is None:
        return pd.DataFrame(columns=REPORT_COLUMNS)
    records = [
        [
            e.key,
            e.row,
            e.column,
            e.expected,
            pd.NA if e.actual is MISSING else e.actual,
            e.expected_type,
            pd.NA if e.actual_type is MISSING else e.actual_type,
        ]
        for e in report
    ]
    return pd.DataFrame(records, columns=REPORT_COLUMNS)
