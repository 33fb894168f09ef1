from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ..logging.diff_log import DiffLogBuffer
from ..models.column import Column
from ..models.comparison_stats import ComparisonStats
from ..models.dataset import Row, TabularDataset
from ..models.diff_report import MISSING, DiffEntry, DiffReport
from .cell_comparator import compare_cells, render_value
from .key_index import KeyIndex
from .progress import RowProgress

if TYPE_CHECKING:
    from ..config.loader import CompareConfig

logger = logging.getLogger(__name__)

"""Dataset comparison service.

Compares an "expected" TabularDataset against an "actual" one:

1. Reject an actual set with more rows than expected (InvalidArgumentError).
2. Reject differing column sets or key declarations (SchemaMismatchError).
3. Index actual rows by composite key (first row wins on duplicates).
4. Walk expected rows in insertion order; compare matched rows column by column,
   emit one MISSING entry per column for unmatched rows.
5. Return the DiffReport, or None when nothing differs.
"""

__all__ = [
    "ComparisonError",
    "InvalidArgumentError",
    "SchemaMismatchError",
    "DatasetDiffer",
    "compare",
]

KEY_SEPARATOR = ", "


class ComparisonError(Exception):
    """Base exception for comparison failures."""


class InvalidArgumentError(ComparisonError, ValueError):
    """Raised when the actual dataset has more rows than the expected one."""


class SchemaMismatchError(ComparisonError):
    """Raised when expected and actual schemas cannot be aligned."""


def _check_schema(expected: TabularDataset, actual: TabularDataset) -> None:
    exp_names = expected.column_names
    act_names = actual.column_names
    if len(exp_names) != len(act_names) or set(exp_names) != set(act_names):
        only_expected = [n for n in exp_names if not actual.has_column(n)]
        only_actual = [n for n in act_names if not expected.has_column(n)]
        raise SchemaMismatchError(
            f"column mismatch expected='{expected.name}' actual='{actual.name}': "
            f"count={len(exp_names)}/{len(act_names)} "
            f"only_expected={only_expected} only_actual={only_actual}"
        )
    exp_key = [c.name for c in expected.key_columns]
    act_key = [c.name for c in actual.key_columns]
    if exp_key != act_key:
        raise SchemaMismatchError(
            f"key mismatch expected='{expected.name}' {exp_key} actual='{actual.name}' {act_key}"
        )


class DatasetDiffer:
    """Reusable comparator.

    Args:
        verbose: Log diagnostics (missing rows, each difference) at INFO instead
            of DEBUG. A row-count mismatch is always logged as a warning
        show_progress: Show a tqdm bar over expected rows (TTY only)
        diff_log_directory: When set, every report is also written as JSON Lines
            into one diff log file per differ in this directory
    """

    def __init__(
        self,
        *,
        verbose: bool = False,
        show_progress: bool = False,
        diff_log_directory: Path | str | None = None,
    ) -> None:
        self.verbose = verbose
        self.show_progress = show_progress
        self.diff_log_directory = Path(diff_log_directory) if diff_log_directory else None
        self._level = logging.INFO if verbose else logging.DEBUG
        self._diff_log = DiffLogBuffer(self.diff_log_directory) if self.diff_log_directory else None

    @classmethod
    def from_config(cls, config: CompareConfig) -> DatasetDiffer:
        return cls(
            verbose=config.verbose,
            show_progress=config.show_progress,
            diff_log_directory=config.diff_log_directory,
        )

    def compare(self, expected: TabularDataset, actual: TabularDataset) -> DiffReport | None:
        """Compare expected against actual; None means no differences."""
        report, _ = self.compare_with_stats(expected, actual)
        return report

    def compare_with_stats(
        self, expected: TabularDataset, actual: TabularDataset
    ) -> tuple[DiffReport | None, ComparisonStats]:
        if len(actual) > len(expected):
            raise InvalidArgumentError(
                f"actual '{actual.name}' has more rows than expected '{expected.name}': "
                f"Expected: [{len(expected)}] Actual: [{len(actual)}]"
            )
        _check_schema(expected, actual)

        start = datetime.now(UTC)
        if len(actual) != len(expected):
            logger.warning(
                "Row counts do not match. Expected: [%d] Actual: [%d]", len(expected), len(actual)
            )

        index = KeyIndex(actual, probe_types=[c.value_type for c in expected.key_columns])
        if index.duplicates:
            logger.log(
                self._level,
                "actual '%s' has %d duplicate keys (first row wins)",
                actual.name,
                index.duplicates,
            )

        report = DiffReport(expected_name=expected.name, actual_name=actual.name)
        matched = 0
        missing = 0
        with RowProgress(len(expected), enabled=self.show_progress) as progress:
            for row_no, exp_row in enumerate(expected):
                key_values = expected.key_of(exp_row)
                key_text = KEY_SEPARATOR.join(
                    render_value(v, c.value_type) for v, c in zip(key_values, expected.key_columns)
                )
                act_row = index.lookup(key_values)
                if act_row is None:
                    missing += 1
                    logger.log(
                        self._level,
                        "Expected row '%d' not found in actual data. key=[%s]",
                        row_no,
                        key_text,
                    )
                    self._add_missing_row(report, expected, exp_row, row_no, key_text)
                else:
                    matched += 1
                    self._compare_row(report, expected, actual, exp_row, act_row, row_no, key_text)
                progress.advance()

        end = datetime.now(UTC)
        stats = ComparisonStats(
            expected_name=expected.name,
            actual_name=actual.name,
            expected_rows=len(expected),
            actual_rows=len(actual),
            matched_rows=matched,
            missing_rows=missing,
            diff_cells=len(report),
            duplicate_keys=index.duplicates,
            start_time=start,
            end_time=end,
            elapsed_seconds=(end - start).total_seconds(),
        )

        if not report.entries:
            return None, stats

        if self._diff_log is not None:
            self._diff_log.extend(report)
            path = self._diff_log.flush()
            logger.log(self._level, "diff log written: %s", path)
        return report, stats

    def _compare_row(
        self,
        report: DiffReport,
        expected: TabularDataset,
        actual: TabularDataset,
        exp_row: Row,
        act_row: Row,
        row_no: int,
        key_text: str,
    ) -> None:
        for exp_col in expected.columns:
            act_col: Column = actual.column(exp_col.name)
            exp_val = exp_row[exp_col.ordinal]
            act_val = act_row[act_col.ordinal]
            if compare_cells(exp_val, exp_col.value_type, act_val, act_col.value_type):
                continue
            entry = DiffEntry(
                key=key_text,
                row=row_no,
                column=exp_col.name,
                expected=render_value(exp_val, exp_col.value_type),
                actual=render_value(act_val, act_col.value_type),
                expected_type=exp_col.type_name,
                actual_type=act_col.type_name,
            )
            logger.log(
                self._level,
                "diff row=%d key=[%s] column=%s expected=%r actual=%r",
                row_no,
                key_text,
                entry.column,
                entry.expected,
                entry.actual,
            )
            report.append(entry)

    @staticmethod
    def _add_missing_row(
        report: DiffReport, expected: TabularDataset, exp_row: Row, row_no: int, key_text: str
    ) -> None:
        for col in expected.columns:
            report.append(
                DiffEntry(
                    key=key_text,
                    row=row_no,
                    column=col.name,
                    expected=render_value(exp_row[col.ordinal], col.value_type),
                    actual=MISSING,
                    expected_type=col.type_name,
                    actual_type=MISSING,
                )
            )


def compare(
    expected: TabularDataset, actual: TabularDataset, *, verbose: bool = False
) -> DiffReport | None:
    """Compare two datasets with a one-off DatasetDiffer."""
    return DatasetDiffer(verbose=verbose).compare(expected, actual)
