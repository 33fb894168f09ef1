from __future__ import annotations

import math
from collections.abc import Hashable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar

from ..models.column import ValueType

"""Cell comparison rules for heterogeneous declared types.

Each cell is wrapped in a tagged variant selected by the column's declared type
(TextValue, IntValue, FloatValue, DecimalValue, OtherValue). Equality between two
variants follows these rules, in order:

0. None (absent value) equals only None.
1. Same declared type: native equality. Floats compare exactly, no tolerance,
   except that NaN equals NaN.
2. float64 vs decimal (either side): the decimal is converted to float and the two
   compared by value (NaN equals NaN).
3. Any other mismatch: the rendered text of both sides must be equal.

A type mismatch never raises; rule 3 always resolves it.
"""

__all__ = [
    "NULL_TEXT",
    "CellValue",
    "TextValue",
    "IntValue",
    "FloatValue",
    "DecimalValue",
    "OtherValue",
    "tag_value",
    "render_value",
    "compare_cells",
]

# None の表示文字列 (比較には使わない)
NULL_TEXT = "NULL"

# NaN 同士は等しい扱い (キー検索でも同じ)
_NAN_KEY = object()
_UNHASHABLE_KEY = object()


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


@dataclass(frozen=True)
class CellValue:
    """Base tagged cell value. Subclasses fix value_type."""
    value: Any
    value_type: ClassVar[ValueType] = ValueType.OTHER

    def render(self) -> str:
        if self.value is None:
            return NULL_TEXT
        return str(self.value)

    def matches(self, other: CellValue) -> bool:
        if self.value is None or other.value is None:
            return self.value is None and other.value is None
        match self, other:
            case (FloatValue(), DecimalValue()) | (DecimalValue(), FloatValue()):
                try:
                    left, right = float(self.value), float(other.value)
                except (TypeError, ValueError):
                    # 数値化できない値は文字列比較へ
                    return self.render() == other.render()
                return left == right or (math.isnan(left) and math.isnan(right))
            case _ if self.value_type is other.value_type:
                if _is_nan(self.value) or _is_nan(other.value):
                    return _is_nan(self.value) and _is_nan(other.value)
                return bool(self.value == other.value)
            case _:
                return self.render() == other.render()

    def key_form(self, counterpart: ValueType) -> Hashable:
        """Hashable form used for key lookup against a column of `counterpart` type.

        Cells for which matches() holds produce equal key forms, given that both
        sides are keyed with each other's declared type. Unhashable values are keyed
        by their tagged text, so they never collide with a plain string.
        """
        if self.value is None:
            return None
        if counterpart is self.value_type:
            if _is_nan(self.value):
                return _NAN_KEY
            try:
                hash(self.value)
            except TypeError:
                return (_UNHASHABLE_KEY, self.render())
            return self.value
        if {self.value_type, counterpart} == {ValueType.FLOAT64, ValueType.DECIMAL}:
            try:
                number = float(self.value)
            except (TypeError, ValueError):
                return self.render()
            return _NAN_KEY if math.isnan(number) else number
        return self.render()


@dataclass(frozen=True)
class TextValue(CellValue):
    value_type: ClassVar[ValueType] = ValueType.TEXT


@dataclass(frozen=True)
class IntValue(CellValue):
    value_type: ClassVar[ValueType] = ValueType.INT32


@dataclass(frozen=True)
class FloatValue(CellValue):
    value_type: ClassVar[ValueType] = ValueType.FLOAT64

    def render(self) -> str:
        if isinstance(self.value, float):
            text = repr(self.value)
            # 2.0 -> "2"
            return text[:-2] if text.endswith(".0") else text
        return super().render()


@dataclass(frozen=True)
class DecimalValue(CellValue):
    value_type: ClassVar[ValueType] = ValueType.DECIMAL


@dataclass(frozen=True)
class OtherValue(CellValue):
    value_type: ClassVar[ValueType] = ValueType.OTHER


def tag_value(value: Any, value_type: ValueType) -> CellValue:
    """Wrap a raw cell value in the variant for its declared type."""
    match value_type:
        case ValueType.TEXT:
            return TextValue(value)
        case ValueType.INT32:
            return IntValue(value)
        case ValueType.FLOAT64:
            return FloatValue(value)
        case ValueType.DECIMAL:
            return DecimalValue(value)
        case _:
            return OtherValue(value)


def render_value(value: Any, value_type: ValueType) -> str:
    return tag_value(value, value_type).render()


def compare_cells(
    expected: Any, expected_type: ValueType, actual: Any, actual_type: ValueType
) -> bool:
    """Return True when the expected and actual cells are considered equal."""
    return tag_value(expected, expected_type).matches(tag_value(actual, actual_type))
