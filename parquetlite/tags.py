"""Field tags of the form ``name=Name, type=INT32, ...`` and the schema
elements and logical types derived from them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, TypeVar

from .format import (
    ConvertedType,
    DecimalType,
    Encoding,
    FieldRepetitionType,
    IntType,
    LogicalType,
    SchemaElement,
    TimestampType,
    TimeType,
    TimeUnit,
    converted_type_from_string,
    type_from_string,
)

_T = TypeVar("_T")


@dataclass
class Tag:
    """Parsed description of one field, with key and value parts for maps."""

    in_name: str = ""
    ex_name: str = ""

    type: str = ""
    key_type: str = ""
    value_type: str = ""

    converted_type: str = ""
    key_converted_type: str = ""
    value_converted_type: str = ""

    length: int = 0
    key_length: int = 0
    value_length: int = 0

    scale: int = 0
    key_scale: int = 0
    value_scale: int = 0

    precision: int = 0
    key_precision: int = 0
    value_precision: int = 0

    is_adjusted_to_utc: bool = False
    key_is_adjusted_to_utc: bool = False
    value_is_adjusted_to_utc: bool = False

    field_id: int = 0
    key_field_id: int = 0
    value_field_id: int = 0

    encoding: Encoding = Encoding.PLAIN
    key_encoding: Encoding = Encoding.PLAIN
    value_encoding: Encoding = Encoding.PLAIN

    omit_stats: bool = False
    key_omit_stats: bool = False
    value_omit_stats: bool = False

    repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED
    key_repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED
    value_repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED

    logical_type_fields: Dict[str, str] = field(default_factory=dict)
    key_logical_type_fields: Dict[str, str] = field(default_factory=dict)
    value_logical_type_fields: Dict[str, str] = field(default_factory=dict)


_STRING_KEYS = {
    "type": "type",
    "keytype": "key_type",
    "valuetype": "value_type",
    "convertedtype": "converted_type",
    "keyconvertedtype": "key_converted_type",
    "valueconvertedtype": "value_converted_type",
}

_INT_KEYS = {
    "length": "length",
    "keylength": "key_length",
    "valuelength": "value_length",
    "scale": "scale",
    "keyscale": "key_scale",
    "valuescale": "value_scale",
    "precision": "precision",
    "keyprecision": "key_precision",
    "valueprecision": "value_precision",
    "fieldid": "field_id",
    "keyfieldid": "key_field_id",
    "valuefieldid": "value_field_id",
}

_BOOL_KEYS = {
    "isadjustedtoutc": "is_adjusted_to_utc",
    "keyisadjustedtoutc": "key_is_adjusted_to_utc",
    "valueisadjustedtoutc": "value_is_adjusted_to_utc",
    "omitstats": "omit_stats",
    "keyomitstats": "key_omit_stats",
    "valueomitstats": "value_omit_stats",
}

_REPETITION_KEYS = {
    "repetitiontype": "repetition_type",
    "keyrepetitiontype": "key_repetition_type",
    "valuerepetitiontype": "value_repetition_type",
}

_REPETITIONS = {
    "repeated": FieldRepetitionType.REPEATED,
    "required": FieldRepetitionType.REQUIRED,
    "optional": FieldRepetitionType.OPTIONAL,
}

_SUB_ENCODINGS = {
    "rle": Encoding.RLE,
    "delta_binary_packed": Encoding.DELTA_BINARY_PACKED,
    "delta_length_byte_array": Encoding.DELTA_LENGTH_BYTE_ARRAY,
    "delta_byte_array": Encoding.DELTA_BYTE_ARRAY,
    "plain_dictionary": Encoding.PLAIN_DICTIONARY,
    "byte_stream_split": Encoding.BYTE_STREAM_SPLIT,
}

_ENCODINGS = {
    **_SUB_ENCODINGS,
    "plain": Encoding.PLAIN,
    "rle_dictionary": Encoding.RLE_DICTIONARY,
}

_ENCODING_KEYS = {
    "encoding": ("encoding", _ENCODINGS),
    "keyencoding": ("key_encoding", _SUB_ENCODINGS),
    "valueencoding": ("value_encoding", _SUB_ENCODINGS),
}

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


def str_to_int32(text: str) -> int:
    """Parse a decimal integer and truncate it to a signed 32-bit value."""
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    value = int(text)
    if not -(1 << 63) <= value < (1 << 63):
        raise ValueError(f"integer {text!r} out of range")
    return _wrap(value, 32)


def str_to_bool(text: str) -> bool:
    """Parse one of 1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean {text!r}")


def head_to_upper(text: str) -> str:
    """Upper-case an initial ASCII letter, or prefix a non-letter start."""
    if not text:
        return text
    first = text[0]
    if ("a" <= first <= "z") or ("A" <= first <= "Z"):
        return first.upper() + text[1:]
    return "PARGO_PREFIX_" + text


def string_to_variable_name(text: str) -> str:
    """Turn a column name into an identifier; other bytes become their decimal value."""
    if not text:
        return text
    pieces = []
    for byte in text.encode("utf-8"):
        char = chr(byte)
        if char.isascii() and (char.isalnum() or char == "_"):
            pieces.append(char)
        else:
            pieces.append(str(byte))
    return head_to_upper("".join(pieces))


def parse_tag(text: str) -> Tag:
    """Parse a comma separated ``key=value`` tag string."""
    tag = Tag()
    for item in text.replace("\t", "").split(","):
        item = item.strip()
        parts = item.split("=", 1)
        if len(parts) != 2:
            raise ValueError(f"expect 'key=value' but got '{item}'")
        key = parts[0].lower().strip()
        value = parts[1].strip()

        if key in _STRING_KEYS:
            setattr(tag, _STRING_KEYS[key], value)
        elif key in _INT_KEYS:
            try:
                setattr(tag, _INT_KEYS[key], str_to_int32(value))
            except ValueError as err:
                raise ValueError(f"failed to parse {key}: {err}") from err
        elif key in _BOOL_KEYS:
            try:
                setattr(tag, _BOOL_KEYS[key], str_to_bool(value))
            except ValueError as err:
                raise ValueError(f"failed to parse {key}: {err}") from err
        elif key == "name":
            if not tag.in_name:
                tag.in_name = string_to_variable_name(value)
            tag.ex_name = value
        elif key == "inname":
            tag.in_name = value
        elif key in _REPETITION_KEYS:
            repetition = _REPETITIONS.get(value.lower())
            if repetition is None:
                raise ValueError(f"unknown {key}: '{value}'")
            setattr(tag, _REPETITION_KEYS[key], repetition)
        elif key in _ENCODING_KEYS:
            attribute, choices = _ENCODING_KEYS[key]
            encoding = choices.get(value.lower())
            if encoding is None:
                raise ValueError(f"unknown {key} type: '{value}'")
            setattr(tag, attribute, encoding)
        elif key.startswith("logicaltype"):
            tag.logical_type_fields[key] = value
        elif key.startswith("keylogicaltype"):
            tag.key_logical_type_fields[key[3:]] = value
        elif key.startswith("valuelogicaltype"):
            tag.value_logical_type_fields[key[5:]] = value
        else:
            raise ValueError(f"unrecognized tag '{key}'")
    return tag


def schema_element_from_tag(tag: Tag) -> SchemaElement:
    """Build the schema element of a primitive field described by a tag."""
    try:
        physical = type_from_string(tag.type)
    except ValueError as err:
        raise ValueError(f"type {tag.type}: {err}") from err

    try:
        converted: Optional[ConvertedType] = converted_type_from_string(tag.converted_type)
    except ValueError:
        converted = None

    element = SchemaElement(
        name=tag.in_name,
        type=physical,
        type_length=tag.length,
        repetition_type=tag.repetition_type,
        num_children=None,
        converted_type=converted,
        scale=tag.scale,
        precision=tag.precision,
        field_id=tag.field_id,
    )

    if tag.logical_type_fields:
        try:
            element.logical_type = logical_type_from_fields(tag.logical_type_fields)
        except ValueError as err:
            raise ValueError(f"failed to create logicaltype from field map: {err}") from err
    else:
        element.logical_type = logical_type_from_converted_type(element, tag)
    return element


def _parse_field(
    fields: Dict[str, str], name: str, parser: Callable[[str], _T], what: str
) -> _T:
    try:
        return parser(fields.get(name, ""))
    except ValueError as err:
        raise ValueError(f"cannot parse {name} as {what}: {err}") from err


def _time_unit(fields: Dict[str, str]) -> TimeUnit:
    unit = fields.get("logicaltype.unit", "")
    try:
        return TimeUnit(unit)
    except ValueError:
        raise ValueError(f"logicaltype time error, unknown unit: {unit}") from None


_MARKER_LOGICAL_TYPES = {
    "STRING": "is_string",
    "MAP": "is_map",
    "LIST": "is_list",
    "ENUM": "is_enum",
    "DATE": "is_date",
    "JSON": "is_json",
    "BSON": "is_bson",
    "UUID": "is_uuid",
}


def logical_type_from_fields(fields: Dict[str, str]) -> LogicalType:
    """Build a logical type from ``logicaltype`` and ``logicaltype.*`` entries."""
    if "logicaltype" not in fields:
        raise ValueError("does not have logicaltype")
    kind = fields["logicaltype"]
    logical = LogicalType()

    if kind in _MARKER_LOGICAL_TYPES:
        setattr(logical, _MARKER_LOGICAL_TYPES[kind], True)
    elif kind == "DECIMAL":
        precision = _parse_field(fields, "logicaltype.precision", str_to_int32, "int32")
        scale = _parse_field(fields, "logicaltype.scale", str_to_int32, "int32")
        logical.decimal = DecimalType(precision=precision, scale=scale)
    elif kind == "TIME":
        adjusted = _parse_field(fields, "logicaltype.isadjustedtoutc", str_to_bool, "boolean")
        logical.time = TimeType(is_adjusted_to_utc=adjusted, unit=_time_unit(fields))
    elif kind == "TIMESTAMP":
        adjusted = _parse_field(fields, "logicaltype.isadjustedtoutc", str_to_bool, "boolean")
        logical.timestamp = TimestampType(is_adjusted_to_utc=adjusted, unit=_time_unit(fields))
    elif kind == "INTEGER":
        bit_width = _parse_field(fields, "logicaltype.bitwidth", str_to_int32, "int32")
        signed = _parse_field(fields, "logicaltype.issigned", str_to_bool, "boolean")
        logical.integer = IntType(bit_width=_wrap(bit_width, 8), is_signed=signed)
    else:
        raise ValueError(f"unknow logicaltype: {kind}")
    return logical


_INTEGER_CONVERTED = {
    ConvertedType.INT_8: (8, True),
    ConvertedType.INT_16: (16, True),
    ConvertedType.INT_32: (32, True),
    ConvertedType.INT_64: (64, True),
    ConvertedType.UINT_8: (8, False),
    ConvertedType.UINT_16: (16, False),
    ConvertedType.UINT_32: (32, False),
    ConvertedType.UINT_64: (64, False),
}

_MARKER_CONVERTED = {
    ConvertedType.DATE: "is_date",
    ConvertedType.BSON: "is_bson",
    ConvertedType.ENUM: "is_enum",
    ConvertedType.JSON: "is_json",
    ConvertedType.LIST: "is_list",
    ConvertedType.MAP: "is_map",
    ConvertedType.UTF8: "is_string",
}


def logical_type_from_converted_type(element: SchemaElement, tag: Tag) -> Optional[LogicalType]:
    """Derive the logical type equivalent to an element's converted type, if any."""
    converted = element.converted_type
    if converted is None:
        return None

    logical = LogicalType()
    if converted in _INTEGER_CONVERTED:
        bit_width, signed = _INTEGER_CONVERTED[converted]
        logical.integer = IntType(bit_width=bit_width, is_signed=signed)
    elif converted in _MARKER_CONVERTED:
        setattr(logical, _MARKER_CONVERTED[converted], True)
    elif converted is ConvertedType.DECIMAL:
        logical.decimal = DecimalType(precision=tag.precision, scale=tag.scale)
    elif converted is ConvertedType.TIME_MICROS:
        logical.time = TimeType(tag.is_adjusted_to_utc, TimeUnit.MICROS)
    elif converted is ConvertedType.TIME_MILLIS:
        logical.time = TimeType(tag.is_adjusted_to_utc, TimeUnit.MILLIS)
    elif converted is ConvertedType.TIMESTAMP_MICROS:
        logical.timestamp = TimestampType(tag.is_adjusted_to_utc, TimeUnit.MICROS)
    elif converted is ConvertedType.TIMESTAMP_MILLIS:
        logical.timestamp = TimestampType(tag.is_adjusted_to_utc, TimeUnit.MILLIS)
    else:
        return None
    return logical


def key_tag(tag: Tag) -> Tag:
    """Tag of the key field of a map described by ``tag``."""
    return Tag(
        in_name="Key",
        ex_name="key",
        type=tag.key_type,
        converted_type=tag.key_converted_type,
        is_adjusted_to_utc=tag.key_is_adjusted_to_utc,
        length=tag.key_length,
        scale=tag.key_scale,
        precision=tag.key_precision,
        field_id=tag.key_field_id,
        encoding=tag.key_encoding,
        omit_stats=tag.key_omit_stats,
        repetition_type=FieldRepetitionType.REQUIRED,
    )


def value_tag(tag: Tag) -> Tag:
    """Tag of the value field of a map (or element of a list) described by ``tag``."""
    return Tag(
        in_name="Value",
        ex_name="value",
        type=tag.value_type,
        converted_type=tag.value_converted_type,
        is_adjusted_to_utc=tag.value_is_adjusted_to_utc,
        length=tag.value_length,
        scale=tag.value_scale,
        precision=tag.value_precision,
        field_id=tag.value_field_id,
        encoding=tag.value_encoding,
        omit_stats=tag.value_omit_stats,
        repetition_type=tag.value_repetition_type,
    )