"""Ordering rules used to collect column statistics (minimum, maximum and
value size) for every combination of physical, converted and logical type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple, Type as PyType

from .format import ConvertedType, LogicalType, Type

_UINT32_MASK = 0xFFFFFFFF
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


def _as_bytes(value: Any) -> bytes:
    """Binary view of a byte-array value; text is taken as UTF-8."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def minimum(table: "FuncTable", a: Any, b: Any) -> Any:
    """Smaller of two values under ``table``; ``None`` counts as absent."""
    if a is None:
        return b
    if b is None:
        return a
    return a if table.less_than(a, b) else b


def maximum(table: "FuncTable", a: Any, b: Any) -> Any:
    """Larger of two values under ``table``; ``None`` counts as absent."""
    if a is None:
        return b
    if b is None:
        return a
    return b if table.less_than(a, b) else a


class FuncTable(ABC):
    """Comparison and size rules for the values of one column type."""

    size: int = 0

    @abstractmethod
    def less_than(self, a: Any, b: Any) -> bool:
        """Whether ``a`` orders strictly before ``b``."""

    def _size_of(self, val: Any) -> int:
        return self.size

    def min_max_size(self, min_val: Any, max_val: Any, val: Any) -> Tuple[Any, Any, int]:
        """Fold ``val`` into running minimum and maximum and report its size."""
        return minimum(self, min_val, val), maximum(self, max_val, val), self._size_of(val)


class _VariableSizeTable(FuncTable):
    def _size_of(self, val: Any) -> int:
        return len(_as_bytes(val))


class BoolFuncTable(FuncTable):
    size = 1

    def less_than(self, a: Any, b: Any) -> bool:
        return (not a) and bool(b)


class Int32FuncTable(FuncTable):
    size = 4

    def less_than(self, a: Any, b: Any) -> bool:
        return a < b


class UInt32FuncTable(FuncTable):
    """Signed 32-bit storage compared as unsigned."""

    size = 4

    def less_than(self, a: Any, b: Any) -> bool:
        return (a & _UINT32_MASK) < (b & _UINT32_MASK)


class Int64FuncTable(FuncTable):
    size = 8

    def less_than(self, a: Any, b: Any) -> bool:
        return a < b


class UInt64FuncTable(FuncTable):
    """Signed 64-bit storage compared as unsigned."""

    size = 8

    def less_than(self, a: Any, b: Any) -> bool:
        return (a & _UINT64_MASK) < (b & _UINT64_MASK)


class Int96FuncTable(_VariableSizeTable):
    """Twelve-byte little-endian two's-complement integers."""

    def less_than(self, a: Any, b: Any) -> bool:
        left, right = _as_bytes(a), _as_bytes(b)
        left_sign, right_sign = left[11] >> 7, right[11] >> 7
        if left_sign != right_sign:
            return left_sign > right_sign
        return left[11::-1] < right[11::-1]


class Float32FuncTable(FuncTable):
    size = 4

    def less_than(self, a: Any, b: Any) -> bool:
        return a < b


class Float64FuncTable(FuncTable):
    size = 8

    def less_than(self, a: Any, b: Any) -> bool:
        return a < b


class StringFuncTable(_VariableSizeTable):
    """Byte-wise lexicographic order."""

    def less_than(self, a: Any, b: Any) -> bool:
        return _as_bytes(a) < _as_bytes(b)


class IntervalFuncTable(_VariableSizeTable):
    """Twelve-byte intervals compared from the last byte backwards."""

    def less_than(self, a: Any, b: Any) -> bool:
        return _as_bytes(a)[11::-1] < _as_bytes(b)[11::-1]


class DecimalStringFuncTable(_VariableSizeTable):
    """Big-endian two's-complement integers of any length."""

    def less_than(self, a: Any, b: Any) -> bool:
        return cmp_int_binary(a, b, "BigEndian", True)


def _sign_bit(data: bytes) -> int:
    return (data[0] >> 7) & 1 if data else 0


def cmp_int_binary(a: Any, b: Any, order: str, signed: bool) -> bool:
    """Whether the integer encoded in ``a`` is less than the one in ``b``.

    ``order`` is ``"LittleEndian"`` or ``"BigEndian"``; shorter operands are
    zero- or sign-extended to the length of the longer one.
    """
    left, right = _as_bytes(a), _as_bytes(b)
    if order == "LittleEndian":
        left, right = left[::-1], right[::-1]

    width = max(len(left), len(right))
    if signed:
        left = (b"\xff" if _sign_bit(left) else b"\x00") * (width - len(left)) + left
        right = (b"\xff" if _sign_bit(right) else b"\x00") * (width - len(right)) + right
        left_sign, right_sign = _sign_bit(left), _sign_bit(right)
        if left_sign != right_sign:
            return left_sign > right_sign
    else:
        left = left.rjust(width, b"\x00")
        right = right.rjust(width, b"\x00")
    return left < right


_PLAIN_TABLES: dict = {
    Type.BOOLEAN: BoolFuncTable,
    Type.INT32: Int32FuncTable,
    Type.INT64: Int64FuncTable,
    Type.INT96: Int96FuncTable,
    Type.FLOAT: Float32FuncTable,
    Type.DOUBLE: Float64FuncTable,
    Type.BYTE_ARRAY: StringFuncTable,
    Type.FIXED_LEN_BYTE_ARRAY: StringFuncTable,
}

_CONVERTED_TABLES: dict = {
    ConvertedType.UTF8: StringFuncTable,
    ConvertedType.BSON: StringFuncTable,
    ConvertedType.JSON: StringFuncTable,
    ConvertedType.ENUM: StringFuncTable,
    ConvertedType.INT_8: Int32FuncTable,
    ConvertedType.INT_16: Int32FuncTable,
    ConvertedType.INT_32: Int32FuncTable,
    ConvertedType.DATE: Int32FuncTable,
    ConvertedType.TIME_MILLIS: Int32FuncTable,
    ConvertedType.UINT_8: UInt32FuncTable,
    ConvertedType.UINT_16: UInt32FuncTable,
    ConvertedType.UINT_32: UInt32FuncTable,
    ConvertedType.INT_64: Int64FuncTable,
    ConvertedType.TIME_MICROS: Int64FuncTable,
    ConvertedType.TIMESTAMP_MILLIS: Int64FuncTable,
    ConvertedType.TIMESTAMP_MICROS: Int64FuncTable,
    ConvertedType.UINT_64: UInt64FuncTable,
    ConvertedType.INTERVAL: IntervalFuncTable,
}


def _decimal_table(physical_type: Optional[Type]) -> Optional[PyType[FuncTable]]:
    if physical_type in (Type.BYTE_ARRAY, Type.FIXED_LEN_BYTE_ARRAY):
        return DecimalStringFuncTable
    if physical_type is Type.INT32:
        return Int32FuncTable
    if physical_type is Type.INT64:
        return Int64FuncTable
    return None


def find_func_table(
    physical_type: Optional[Type],
    converted_type: Optional[ConvertedType] = None,
    logical_type: Optional[LogicalType] = None,
) -> FuncTable:
    """Choose the statistics rules for a column.

    Raises ``ValueError`` when no rule applies to the given types.
    """
    if converted_type is None and logical_type is None:
        table = _PLAIN_TABLES.get(physical_type)
        if table is not None:
            return table()

    if converted_type is not None:
        if converted_type is ConvertedType.DECIMAL:
            table = _decimal_table(physical_type)
        else:
            table = _CONVERTED_TABLES.get(converted_type)
        if table is not None:
            return table()

    if logical_type is not None:
        if logical_type.time is not None or logical_type.timestamp is not None:
            return find_func_table(physical_type)
        if logical_type.is_date:
            return Int32FuncTable()
        if logical_type.integer is not None:
            if logical_type.integer.is_signed:
                return find_func_table(physical_type)
            if physical_type is Type.INT32:
                return UInt32FuncTable()
            if physical_type is Type.INT64:
                return UInt64FuncTable()
        elif logical_type.decimal is not None:
            table = _decimal_table(physical_type)
            if table is not None:
                return table()
        elif (
            logical_type.is_bson
            or logical_type.is_json
            or logical_type.is_string
            or logical_type.is_uuid
        ):
            return StringFuncTable()

    raise ValueError(
        f"no known func table for type={physical_type!r}, "
        f"converted_type={converted_type!r}, logical_type={logical_type!r}"
    )