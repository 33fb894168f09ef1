from __future__ import annotations

import io
from decimal import Decimal

import pandas as pd
import pytest

from bvt_data import DatasetDiffer, TabularDataset, ValueType
from bvt_data.services.frames import dataset_from_frame, report_to_frame

"""End-to-end: delimited text materialized by pandas (as an import collaborator
would) compared against hand-built expected data."""

CSV_TEXT = """mytext,myinteger,mydouble,mydecimal
Text one.,42,2.00,2.00
Text two.,42,3.00,3.00
Text three.,43,4.00,4.00
Text four.,43,5.00,5.00
"""

COLUMNS = [
    ("mytext", ValueType.TEXT),
    ("myinteger", ValueType.INT32),
    ("mydouble", ValueType.FLOAT64),
    ("mydecimal", ValueType.DECIMAL),
]


def _expected() -> TabularDataset:
    ds = TabularDataset("Expected", COLUMNS, ["mytext", "myinteger"])
    for text, n, val in [("Text one.", 42, 2), ("Text two.", 42, 3), ("Text three.", 43, 4), ("Text four.", 43, 5)]:
        ds.add_row([text, n, float(val), Decimal(f"{val}.00")])
    return ds


@pytest.mark.parametrize("sep", [",", "\t", "|", ";"])
def test_delimited_import_matches_expected(sep):
    frame = pd.read_csv(io.StringIO(CSV_TEXT.replace(",", sep)), sep=sep)
    actual = dataset_from_frame(frame, ["mytext", "myinteger"], name="Test")

    # mydecimal は pandas では float64 として読まれる -> float/decimal 同値規則で一致
    assert actual.column("mydecimal").value_type is ValueType.FLOAT64
    assert DatasetDiffer().compare(_expected(), actual) is None


def test_import_with_changed_and_missing_rows():
    text = CSV_TEXT.replace("Text two.,42", "Text TWO.,42").replace("Text four.,43,5.00,5.00\n", "")
    frame = pd.read_csv(io.StringIO(text))
    actual = dataset_from_frame(frame, ["mytext", "myinteger"], name="Test")

    report, stats = DatasetDiffer().compare_with_stats(_expected(), actual)

    assert report is not None
    # Text two. と Text four. はキー不一致 -> 各 4 列 missing
    assert report.missing_rows() == [1, 3]
    assert stats.matched_rows == 2
    assert stats.missing_rows == 2

    frame_out = report_to_frame(report)
    assert len(frame_out) == 8
    assert frame_out["Actual"].isna().all()
    assert set(frame_out["Key"]) == {"Text two., 42", "Text four., 43"}


def test_excel_like_frame_with_decimal_objects():
    frame = pd.DataFrame(
        {
            "mytext": ["Text one."],
            "myinteger": [42],
            "mydouble": [2.0],
            "mydecimal": [Decimal("2.00")],
        }
    )
    actual = dataset_from_frame(frame, ["mytext", "myinteger"], name="Sheet1$")
    expected = TabularDataset("Expected", COLUMNS, ["mytext", "myinteger"], rows=[["Text one.", 42, 2.0, Decimal("2.00")]])

    assert DatasetDiffer().compare(expected, actual) is None
