from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from .column import Column, ValueType

"""TabularDataset / Row domain models.

A TabularDataset is an ordered column schema plus an ordered, append-only row set
with a declared composite key. The key is used only to align rows during
comparison; uniqueness is not enforced here.

Row order is insertion order and is never re-sorted by key.
"""

__all__ = [
    "DatasetError",
    "MissingKeyColumnError",
    "Row",
    "TabularDataset",
]


class DatasetError(ValueError):
    """Raised when a dataset schema or row is structurally invalid."""


class MissingKeyColumnError(DatasetError):
    """Raised when a declared key column does not exist in the schema."""


ColumnDef = Column | tuple[str, ValueType] | str


@dataclass(frozen=True)
class Row:
    """One row of cell values in schema ordinal order.

    Cells are addressable by ordinal (int) or column name (str). None is the
    absent-value state.
    """
    values: tuple[Any, ...]
    ordinals: Mapping[str, int]

    def __getitem__(self, item: int | str) -> Any:
        if isinstance(item, str):
            try:
                return self.values[self.ordinals[item]]
            except KeyError:
                raise KeyError(f"unknown column: {item}") from None
        return self.values[item]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def as_dict(self) -> dict[str, Any]:
        return {name: self.values[idx] for name, idx in self.ordinals.items()}


def _to_column(definition: ColumnDef, ordinal: int) -> Column:
    if isinstance(definition, Column):
        return replace(definition, ordinal=ordinal)
    if isinstance(definition, str):
        return Column(name=definition, ordinal=ordinal)
    name, value_type = definition
    return Column(name=name, value_type=value_type, ordinal=ordinal)


class TabularDataset:
    """Ordered columns + ordered rows + composite key.

    Parameters
    ----------
    name: 診断表示用の名前
    columns: Column, (name, ValueType) or bare name (declared type OTHER)
    key_columns: ordered key column names (1 or more)
    rows: optional initial rows (sequences or name->value mappings)
    """

    def __init__(
        self,
        name: str,
        columns: Sequence[ColumnDef],
        key_columns: Sequence[str],
        rows: Iterable[Sequence[Any] | Mapping[str, Any]] | None = None,
    ) -> None:
        self.name = name
        self._columns = tuple(_to_column(definition, i) for i, definition in enumerate(columns))
        self._ordinals: dict[str, int] = {}
        for col in self._columns:
            if col.name in self._ordinals:
                raise DatasetError(f"dataset '{name}' has duplicate column: {col.name}")
            self._ordinals[col.name] = col.ordinal

        if not key_columns:
            raise DatasetError(f"dataset '{name}' declares no key columns")
        missing = [k for k in key_columns if k not in self._ordinals]
        if missing:
            raise MissingKeyColumnError(f"dataset '{name}' missing key columns: {missing}")
        self._key_columns = tuple(self._columns[self._ordinals[k]] for k in key_columns)

        self._rows: list[Row] = []
        for values in rows or ():
            self.add_row(values)

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self._columns]

    @property
    def key_columns(self) -> tuple[Column, ...]:
        return self._key_columns

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    def column(self, name: str) -> Column:
        try:
            return self._columns[self._ordinals[name]]
        except KeyError:
            raise KeyError(f"dataset '{self.name}' has no column: {name}") from None

    def has_column(self, name: str) -> bool:
        return name in self._ordinals

    def add_row(self, values: Sequence[Any] | Mapping[str, Any]) -> Row:
        """Append a row and return it.

        A mapping fills cells by column name (unnamed columns become None); a
        sequence must supply exactly one value per column.
        """
        if isinstance(values, Mapping):
            unknown = [k for k in values if k not in self._ordinals]
            if unknown:
                raise DatasetError(f"dataset '{self.name}' has no columns: {unknown}")
            cells = tuple(values.get(c.name) for c in self._columns)
        else:
            cells = tuple(values)
            if len(cells) != len(self._columns):
                raise DatasetError(
                    f"dataset '{self.name}' row has {len(cells)} cells, "
                    f"expected {len(self._columns)}"
                )
        row = Row(values=cells, ordinals=self._ordinals)
        self._rows.append(row)
        return row

    def key_of(self, row: Row) -> tuple[Any, ...]:
        """Raw key-column values of a row, in key declaration order."""
        return tuple(row.values[c.ordinal] for c in self._key_columns)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __repr__(self) -> str:
        keys = [c.name for c in self._key_columns]
        return (
            f"TabularDataset(name={self.name!r}, columns={self.column_names!r}, "
            f"key={keys!r}, rows={len(self._rows)})"
        )
