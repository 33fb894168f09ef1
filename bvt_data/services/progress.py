from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress display with tqdm (TTY only).

A single tqdm bar counts expected rows as they are compared. In non-TTY
environments (CI, captured test output) the bar is never created.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class RowProgress:
    """Progress bar over the expected rows of one comparison.

    Args:
        total_rows: Number of expected rows
        description: Progress bar label
        enabled: Request display; still suppressed when stdout is not a TTY
    """

    def __init__(self, total_rows: int, *, description: str = "Comparing rows", enabled: bool = True) -> None:
        self.total_rows = total_rows
        self.description = description
        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, rows: int = 1) -> None:
        if self.pbar is not None:
            self.pbar.update(rows)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
