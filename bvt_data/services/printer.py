from __future__ import annotations

import sys
from typing import TextIO

from ..models.dataset import TabularDataset
from ..models.diff_report import DiffReport
from .cell_comparator import render_value

"""Diagnostic table printer.

Renders a TabularDataset or DiffReport as aligned text rows. None and empty inputs
print a notice instead of failing, so callers can print unconditionally.
"""

__all__ = [
    "print_dataset",
    "print_report",
]

CELL_WIDTH = 14
REPORT_HEADERS = ["Key", "Row", "Column", "Expected", "Actual", "ExpectedType", "ActualType"]


def _line(cells: list[str]) -> str:
    return "\t".join(f"{c:<{CELL_WIDTH}}" for c in cells).rstrip()


def print_dataset(dataset: TabularDataset | None, *, quoted: bool = False, file: TextIO | None = None) -> None:
    """Print a dataset as aligned rows.

    Args:
        dataset: Dataset to print (None prints a notice)
        quoted: Print each cell as `"value",` so the output can be pasted into an
            expected-data fixture
        file: Output stream (default: stdout)
    """
    out = file or sys.stdout
    if dataset is None:
        print("\nDataTable is null.", file=out)
        return
    if len(dataset) == 0:
        print(f"\nDataTable '{dataset.name}' is empty.", file=out)
        return

    print(f"\nDataTable Name: {dataset.name}", file=out)
    print(_line(dataset.column_names), file=out)
    for row in dataset:
        cells = [render_value(v, c.value_type) for v, c in zip(row, dataset.columns)]
        if quoted:
            print(" ".join(f'"{c}",' for c in cells), file=out)
        else:
            print(_line(cells), file=out)


def print_report(report: DiffReport | None, *, file: TextIO | None = None) -> None:
    """Print a diff report; None prints a "no differences" notice."""
    out = file or sys.stdout
    if report is None:
        print("\nDiffs is null (no differences).", file=out)
        return
    if len(report) == 0:
        print("\nDiffs is empty.", file=out)
        return

    print(f"\nDiffs: expected='{report.expected_name}' actual='{report.actual_name}'", file=out)
    print(_line(REPORT_HEADERS), file=out)
    for e in report:
        print(
            _line([e.key, str(e.row), e.column, e.expected, str(e.actual), e.expected_type, str(e.actual_type)]),
            file=out,
        )
