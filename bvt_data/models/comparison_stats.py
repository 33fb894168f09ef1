from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Comparison statistics model.

Aggregated counters for a single compare call, rendered as the SUMMARY line.
"""

__all__ = [
    "ComparisonStats",
]


@dataclass(frozen=True)
class ComparisonStats:
    """Counters and timing for one comparison."""
    expected_name: str
    actual_name: str
    expected_rows: int  # expected 側行数
    actual_rows: int  # actual 側行数
    matched_rows: int  # キー一致した行数
    missing_rows: int  # actual に見つからなかった expected 行数
    diff_cells: int  # DiffEntry 総数 (missing 行の列を含む)
    duplicate_keys: int  # actual 側の重複キー数 (first-wins で無視された行)
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def identical(self) -> bool:
        return self.diff_cells == 0
