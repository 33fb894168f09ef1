from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..models.diff_report import DiffEntry, DiffReport

"""Diff log buffering.

- JSON Lines: the DiffEntry fields plus `expected_name` / `actual_name` of the
  report the entry came from (null when appended without a report)
- One `diffs-YYYYMMDD-HHMMSS.log` (UTC) file per buffer, created on first flush
- Entries are buffered in memory and appended to the file on flush()
"""

__all__ = [
    "DiffLogBuffer",
    "LOG_RECORD_KEYS",
]

DEFAULT_LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

LOG_RECORD_KEYS = (
    "expected_name", "actual_name",
    "key", "row", "column", "expected", "actual", "expected_type", "actual_type",
)


class DiffLogBuffer:
    """In-memory buffer of diff entries. Flush writes JSON Lines.

    One buffer per DatasetDiffer, so every report compared by that differ lands
    in the same file. Not thread safe.
    """
    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory or DEFAULT_LOGS_DIR
        self._records: list[dict[str, Any]] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._directory / f"diffs-{stamp}.log"
        return self._file_path

    def append(
        self, entry: DiffEntry, *, expected_name: str | None = None, actual_name: str | None = None
    ) -> None:
        self._records.append(
            {"expected_name": expected_name, "actual_name": actual_name, **entry.to_dict()}
        )

    def extend(self, report: DiffReport) -> None:
        for entry in report:
            self.append(entry, expected_name=report.expected_name, actual_name=report.actual_name)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path:
        if not self._records:
            return self.file_path  # パス確定のみ、ファイルは作らない
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for record in self._records:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
        self._records.clear()
        return fp
