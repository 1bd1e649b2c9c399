"""Parquet metadata vocabulary: physical types, converted types, encodings,
compression codecs, logical types and schema elements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class Type(IntEnum):
    """Physical storage type of a column."""

    BOOLEAN = 0
    INT32 = 1
    INT64 = 2
    INT96 = 3
    FLOAT = 4
    DOUBLE = 5
    BYTE_ARRAY = 6
    FIXED_LEN_BYTE_ARRAY = 7


class ConvertedType(IntEnum):
    """Legacy annotation that refines how a physical type is interpreted."""

    UTF8 = 0
    MAP = 1
    MAP_KEY_VALUE = 2
    LIST = 3
    ENUM = 4
    DECIMAL = 5
    DATE = 6
    TIME_MILLIS = 7
    TIME_MICROS = 8
    TIMESTAMP_MILLIS = 9
    TIMESTAMP_MICROS = 10
    UINT_8 = 11
    UINT_16 = 12
    UINT_32 = 13
    UINT_64 = 14
    INT_8 = 15
    INT_16 = 16
    INT_32 = 17
    INT_64 = 18
    JSON = 19
    BSON = 20
    INTERVAL = 21


class FieldRepetitionType(IntEnum):
    """How often a field may occur within its parent."""

    REQUIRED = 0
    OPTIONAL = 1
    REPEATED = 2


class Encoding(IntEnum):
    """Value encodings used in data pages."""

    PLAIN = 0
    PLAIN_DICTIONARY = 2
    RLE = 3
    BIT_PACKED = 4
    DELTA_BINARY_PACKED = 5
    DELTA_LENGTH_BYTE_ARRAY = 6
    DELTA_BYTE_ARRAY = 7
    RLE_DICTIONARY = 8
    BYTE_STREAM_SPLIT = 9


class CompressionCodec(IntEnum):
    """Page compression codecs."""

    UNCOMPRESSED = 0
    SNAPPY = 1
    GZIP = 2
    LZO = 3
    BROTLI = 4
    LZ4 = 5
    ZSTD = 6
    LZ4_RAW = 7


class TimeUnit(Enum):
    """Resolution of TIME and TIMESTAMP logical types."""

    MILLIS = "MILLIS"
    MICROS = "MICROS"
    NANOS = "NANOS"


@dataclass
class DecimalType:
    precision: int = 0
    scale: int = 0


@dataclass
class TimeType:
    is_adjusted_to_utc: bool = False
    unit: Optional[TimeUnit] = None


@dataclass
class TimestampType:
    is_adjusted_to_utc: bool = False
    unit: Optional[TimeUnit] = None


@dataclass
class IntType:
    bit_width: int = 0
    is_signed: bool = False


@dataclass
class LogicalType:
    """Logical annotation of a column; normally exactly one member is set."""

    is_string: bool = False
    is_map: bool = False
    is_list: bool = False
    is_enum: bool = False
    is_date: bool = False
    is_json: bool = False
    is_bson: bool = False
    is_uuid: bool = False
    decimal: Optional[DecimalType] = None
    time: Optional[TimeType] = None
    timestamp: Optional[TimestampType] = None
    integer: Optional[IntType] = None


@dataclass
class SchemaElement:
    """One node of a flattened Parquet schema."""

    name: str = ""
    type: Optional[Type] = None
    type_length: Optional[int] = None
    repetition_type: Optional[FieldRepetitionType] = None
    num_children: Optional[int] = None
    converted_type: Optional[ConvertedType] = None
    scale: Optional[int] = None
    precision: Optional[int] = None
    field_id: Optional[int] = None
    logical_type: Optional[LogicalType] = None


def type_from_string(name: str) -> Type:
    """Return the physical type with exactly this name."""
    try:
        return Type[name]
    except KeyError:
        raise ValueError(f"not a valid Type string: {name!r}") from None


def converted_type_from_string(name: str) -> ConvertedType:
    """Return the converted type with exactly this name."""
    try:
        return ConvertedType[name]
    except KeyError:
        raise ValueError(f"not a valid ConvertedType string: {name!r}") from None