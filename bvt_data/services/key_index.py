from __future__ import annotations

from collections.abc import Hashable, Sequence

from ..models.column import ValueType
from ..models.dataset import Row, TabularDataset
from .cell_comparator import tag_value

"""Composite key index over the "actual" dataset.

Key values are reduced to the hashable key form of each key column (see
CellValue.key_form), chosen from the pair of declared types on both sides. Lookup
is therefore a plain dict access that still follows the cell equality rules.

Duplicate keys are tolerated: the first row with a given key wins, later rows with
the same key are counted in `duplicates` and otherwise ignored.
"""

__all__ = [
    "KeyIndex",
    "key_tuple",
]

KeyTuple = tuple[Hashable, ...]


def key_tuple(
    values: Sequence[object], own_types: Sequence[ValueType], counterpart_types: Sequence[ValueType]
) -> KeyTuple:
    """Reduce raw key values to their lookup form against the counterpart types."""
    return tuple(
        tag_value(v, t).key_form(c)
        for v, t, c in zip(values, own_types, counterpart_types, strict=True)
    )


class KeyIndex:
    """Lookup from composite key value to row for one dataset.

    Parameters
    ----------
    dataset: インデックス対象 (通常 actual 側)
    probe_types: 照合する側 (expected) のキー列宣言型。省略時は dataset 自身の型
    """

    def __init__(self, dataset: TabularDataset, probe_types: Sequence[ValueType] | None = None) -> None:
        self._own_types = [c.value_type for c in dataset.key_columns]
        self._probe_types = list(probe_types) if probe_types is not None else list(self._own_types)
        if len(self._probe_types) != len(self._own_types):
            raise ValueError(
                f"probe key has {len(self._probe_types)} columns, "
                f"dataset '{dataset.name}' key has {len(self._own_types)}"
            )
        self._index: dict[KeyTuple, Row] = {}
        self.duplicates = 0
        for row in dataset:
            key = key_tuple(dataset.key_of(row), self._own_types, self._probe_types)
            if key in self._index:
                self.duplicates += 1
                continue
            self._index[key] = row

    def lookup(self, key_values: Sequence[object]) -> Row | None:
        """Find the row matching raw key values declared with the probe types."""
        key = key_tuple(key_values, self._probe_types, self._own_types)
        return self._index.get(key)

    def __contains__(self, key_values: Sequence[object]) -> bool:
        return self.lookup(key_values) is not None

    def __len__(self) -> int:
        return len(self._index)
