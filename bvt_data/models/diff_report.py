from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Final

"""DiffEntry / DiffReport models for dataset comparison.

A DiffReport is the ordered list of discrepancies found while comparing an
"expected" dataset against an "actual" one. Entries keep discovery order:
expected-row order first, then column order within a row.

A row present in expected but absent from actual yields one entry per column whose
actual value/type is the MISSING sentinel.
"""

__all__ = [
    "MISSING",
    "Missing",
    "DiffEntry",
    "DiffReport",
]


class Missing:
    """Singleton marker for "no corresponding row/value found".

    Never equal to any real value (including strings such as "<missing>").
    """
    _instance: Missing | None = None

    def __new__(cls) -> Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __str__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = Missing()


@dataclass(frozen=True)
class DiffEntry:
    """One detected discrepancy between expected and actual.

    Attributes:
        key: Key-column values of the expected row rendered and joined with ", "
        row: Ordinal of the row in the expected dataset (0-based)
        column: Column name
        expected: Expected cell rendered as text
        actual: Actual cell rendered as text, or MISSING when the row was not found
        expected_type: Declared type name of the expected column
        actual_type: Declared type name of the actual column, or MISSING
    """
    key: str
    row: int
    column: str
    expected: str
    actual: str | Missing
    expected_type: str
    actual_type: str | Missing

    @property
    def is_missing(self) -> bool:
        return self.actual is MISSING

    def to_dict(self) -> dict[str, Any]:
        # MISSING -> None (JSON null)
        return {
            "key": self.key,
            "row": self.row,
            "column": self.column,
            "expected": self.expected,
            "actual": None if self.actual is MISSING else self.actual,
            "expected_type": self.expected_type,
            "actual_type": None if self.actual_type is MISSING else self.actual_type,
        }

    def to_json_line(self) -> str:
        """Serialize to a single JSON line with a fixed key set."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass
class DiffReport:
    """Ordered collection of DiffEntry produced by one comparison.

    An empty report is never returned by the differ; "no differences" is None.
    """
    expected_name: str
    actual_name: str
    entries: list[DiffEntry] = field(default_factory=list)

    def append(self, entry: DiffEntry) -> None:
        self.entries.append(entry)

    def missing_rows(self) -> list[int]:
        """Expected row ordinals that had no matching actual row."""
        seen: list[int] = []
        for e in self.entries:
            if e.is_missing and (not seen or seen[-1] != e.row):
                seen.append(e.row)
        return seen

    def columns(self) -> list[str]:
        """Distinct differing column names in first-seen order."""
        return list(dict.fromkeys(e.column for e in self.entries))

    def for_row(self, row: int) -> list[DiffEntry]:
        return [e for e in self.entries if e.row == row]

    def to_json_lines(self) -> list[str]:
        return [e.to_json_line() for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DiffEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> DiffEntry:
        return self.entries[index]
