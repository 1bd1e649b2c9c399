import pytest

from parquetlite.format import (
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
    Type,
)
from parquetlite.tags import (
    Tag,
    head_to_upper,
    key_tag,
    logical_type_from_converted_type,
    logical_type_from_fields,
    parse_tag,
    schema_element_from_tag,
    str_to_bool,
    str_to_int32,
    string_to_variable_name,
    value_tag,
)


@pytest.mark.parametrize(
    "text, expected",
    [("", ""), ("hello", "Hello"), ("HeHH", "HeHH"), ("a", "A")],
)
def test_head_to_upper(text, expected):
    assert head_to_upper(text) == expected


def test_head_to_upper_non_letter_prefix():
    assert head_to_upper("_x") == "PARGO_PREFIX__x"
    assert head_to_upper("1abc") == "PARGO_PREFIX_1abc"


@pytest.mark.parametrize(
    "text, expected",
    [("", ""), ("name", "Name"), ("b.c", "B46c"), ("my_col2", "My_col2"), ("a-b", "A45b")],
)
def test_string_to_variable_name(text, expected):
    assert string_to_variable_name(text) == expected


def test_string_to_variable_name_encodes_each_utf8_byte():
    assert string_to_variable_name("aé") == "A195169"


def test_parse_tag_basic():
    tag = parse_tag("name=Name, type=FIXED_LEN_BYTE_ARRAY, length=12")
    assert tag.in_name == "Name"
    assert tag.ex_name == "Name"
    assert tag.type == "FIXED_LEN_BYTE_ARRAY"
    assert tag.length == 12
    assert tag.repetition_type is FieldRepetitionType.REQUIRED
    assert tag.encoding is Encoding.PLAIN


def test_parse_tag_name_with_dot():
    tag = parse_tag("name=b.c, type=INT32, encoding=PLAIN")
    assert tag.in_name == "B46c"
    assert tag.ex_name == "b.c"


def test_parse_tag_inname_wins_regardless_of_order():
    assert parse_tag("name=name, inname=NameIn").in_name == "NameIn"
    first = parse_tag("inname=NameIn, name=name")
    assert first.in_name == "NameIn"
    assert first.ex_name == "name"


def test_parse_tag_ignores_tabs_case_and_spaces():
    tag = parse_tag("name=a,\t Type = INT32 ,\tRepetitionType=optional")
    assert tag.type == "INT32"
    assert tag.repetition_type is FieldRepetitionType.OPTIONAL


def test_parse_tag_map_fields():
    tag = parse_tag(
        "name=score, type=MAP, convertedtype=MAP, keytype=BYTE_ARRAY, "
        "keyconvertedtype=UTF8, valuetype=INT32, valuerepetitiontype=OPTIONAL, "
        "keyencoding=delta_byte_array, valueencoding=RLE, keylength=3, valuefieldid=-4"
    )
    assert tag.key_type == "BYTE_ARRAY"
    assert tag.key_converted_type == "UTF8"
    assert tag.value_type == "INT32"
    assert tag.value_repetition_type is FieldRepetitionType.OPTIONAL
    assert tag.key_encoding is Encoding.DELTA_BYTE_ARRAY
    assert tag.value_encoding is Encoding.RLE
    assert tag.key_length == 3
    assert tag.value_field_id == -4


def test_parse_tag_booleans():
    tag = parse_tag("name=x, omitstats=true, keyisadjustedtoutc=1, valueomitstats=F")
    assert tag.omit_stats is True
    assert tag.key_is_adjusted_to_utc is True
    assert tag.value_omit_stats is False


def test_parse_tag_last_duplicate_wins():
    tag = parse_tag("name=int_8, type=INT32, convertedtype=INT32, convertedtype=INT_8")
    assert tag.converted_type == "INT_8"


def test_parse_tag_logical_type_fields():
    tag = parse_tag(
        "name=t, type=INT32, logicaltype=TIME, logicaltype.unit=MILLIS, "
        "keylogicaltype=STRING, valuelogicaltype.unit=NANOS"
    )
    assert tag.logical_type_fields == {"logicaltype": "TIME", "logicaltype.unit": "MILLIS"}
    assert tag.key_logical_type_fields == {"logicaltype": "STRING"}
    assert tag.value_logical_type_fields == {"logicaltype.unit": "NANOS"}


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "expect 'key=value'"),
        ("name", "expect 'key=value'"),
        ("name=a, colour=red", "unrecognized tag 'colour'"),
        ("name=a, length=abc", "failed to parse length"),
        ("name=a, omitstats=maybe", "failed to parse omitstats"),
        ("name=a, repetitiontype=sometimes", "unknown repetitiontype"),
        ("name=a, encoding=zip", "unknown encoding type"),
        ("name=a, keyencoding=plain", "unknown keyencoding type"),
        ("name=a, valueencoding=rle_dictionary", "unknown valueencoding type"),
    ],
)
def test_parse_tag_errors(text, message):
    with pytest.raises(ValueError, match=message):
        parse_tag(text)


def test_parse_tag_accepts_all_main_encodings():
    assert parse_tag("name=a, encoding=plain").encoding is Encoding.PLAIN
    assert parse_tag("name=a, encoding=RLE_DICTIONARY").encoding is Encoding.RLE_DICTIONARY
    assert parse_tag("name=a, encoding=Byte_Stream_Split").encoding is Encoding.BYTE_STREAM_SPLIT


@pytest.mark.parametrize(
    "text, expected",
    [("12", 12), ("-5", -5), ("+7", 7), ("2147483647", 2147483647), ("2147483648", -2147483648)],
)
def test_str_to_int32(text, expected):
    assert str_to_int32(text) == expected


@pytest.mark.parametrize("text", ["", "1.5", " 1", "0x10", "1_000", "99999999999999999999"])
def test_str_to_int32_rejects(text):
    with pytest.raises(ValueError):
        str_to_int32(text)


@pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
def test_str_to_bool_true(text):
    assert str_to_bool(text) is True


@pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
def test_str_to_bool_false(text):
    assert str_to_bool(text) is False


@pytest.mark.parametrize("text", ["", "yes", "tRUE", "2"])
def test_str_to_bool_rejects(text):
    with pytest.raises(ValueError):
        str_to_bool(text)


def test_schema_element_from_converted_integer():
    element = schema_element_from_tag(parse_tag("name=age, type=INT32, convertedtype=INT_8"))
    assert element.name == "Age"
    assert element.type is Type.INT32
    assert element.converted_type is ConvertedType.INT_8
    assert element.num_children is None
    assert element.logical_type == LogicalType(integer=IntType(bit_width=8, is_signed=True))


def test_schema_element_decimal():
    element = schema_element_from_tag(
        parse_tag("name=d, type=INT32, convertedtype=DECIMAL, scale=2, precision=9")
    )
    assert element.scale == 2
    assert element.precision == 9
    assert element.logical_type == LogicalType(decimal=DecimalType(precision=9, scale=2))


def test_schema_element_unknown_converted_type_is_ignored():
    element = schema_element_from_tag(parse_tag("name=x, type=INT32, convertedtype=INT32"))
    assert element.converted_type is None
    assert element.logical_type is None


def test_schema_element_from_logical_fields():
    element = schema_element_from_tag(
        parse_tag(
            "name=t, type=INT32, logicaltype=TIME, "
            "logicaltype.isadjustedtoutc=true, logicaltype.unit=MILLIS"
        )
    )
    assert element.converted_type is None
    assert element.logical_type == LogicalType(time=TimeType(True, TimeUnit.MILLIS))


def test_schema_element_carries_tag_values():
    element = schema_element_from_tag(
        parse_tag("name=f, type=FIXED_LEN_BYTE_ARRAY, length=10, fieldid=3, repetitiontype=OPTIONAL")
    )
    assert element.type_length == 10
    assert element.field_id == 3
    assert element.repetition_type is FieldRepetitionType.OPTIONAL


@pytest.mark.parametrize("text", ["name=x, type=FOO", "name=x"])
def test_schema_element_bad_type(text):
    with pytest.raises(ValueError, match="type"):
        schema_element_from_tag(parse_tag(text))


def test_schema_element_bad_logical_fields():
    with pytest.raises(ValueError, match="failed to create logicaltype"):
        schema_element_from_tag(parse_tag("name=x, type=INT32, logicaltype=WHAT"))


@pytest.mark.parametrize(
    "kind, attribute",
    [
        ("STRING", "is_string"),
        ("MAP", "is_map"),
        ("LIST", "is_list"),
        ("ENUM", "is_enum"),
        ("DATE", "is_date"),
        ("JSON", "is_json"),
        ("BSON", "is_bson"),
        ("UUID", "is_uuid"),
    ],
)
def test_logical_type_from_fields_markers(kind, attribute):
    logical = logical_type_from_fields({"logicaltype": kind})
    assert getattr(logical, attribute) is True
    assert logical.decimal is None and logical.integer is None


def test_logical_type_from_fields_decimal():
    logical = logical_type_from_fields(
        {"logicaltype": "DECIMAL", "logicaltype.precision": "9", "logicaltype.scale": "2"}
    )
    assert logical.decimal == DecimalType(precision=9, scale=2)


def test_logical_type_from_fields_timestamp():
    logical = logical_type_from_fields(
        {
            "logicaltype": "TIMESTAMP",
            "logicaltype.isadjustedtoutc": "false",
            "logicaltype.unit": "MICROS",
        }
    )
    assert logical.timestamp == TimestampType(False, TimeUnit.MICROS)


def test_logical_type_from_fields_integer():
    logical = logical_type_from_fields(
        {"logicaltype": "INTEGER", "logicaltype.bitwidth": "16", "logicaltype.issigned": "false"}
    )
    assert logical.integer == IntType(bit_width=16, is_signed=False)


@pytest.mark.parametrize(
    "fields, message",
    [
        ({}, "does not have logicaltype"),
        ({"logicaltype": "VARIANT"}, "unknow logicaltype: VARIANT"),
        ({"logicaltype": "DECIMAL", "logicaltype.scale": "2"}, "logicaltype.precision"),
        (
            {"logicaltype": "TIME", "logicaltype.isadjustedtoutc": "true", "logicaltype.unit": "SECONDS"},
            "unknown unit: SECONDS",
        ),
        ({"logicaltype": "TIMESTAMP", "logicaltype.unit": "MILLIS"}, "logicaltype.isadjustedtoutc"),
        ({"logicaltype": "INTEGER", "logicaltype.bitwidth": "8"}, "logicaltype.issigned"),
    ],
)
def test_logical_type_from_fields_errors(fields, message):
    with pytest.raises(ValueError, match=message):
        logical_type_from_fields(fields)


def test_logical_type_from_converted_type_none():
    assert logical_type_from_converted_type(SchemaElement(), Tag()) is None
    interval = SchemaElement(converted_type=ConvertedType.INTERVAL)
    assert logical_type_from_converted_type(interval, Tag()) is None


def test_logical_type_from_converted_type_unsigned():
    element = SchemaElement(converted_type=ConvertedType.UINT_64)
    assert logical_type_from_converted_type(element, Tag()) == LogicalType(
        integer=IntType(bit_width=64, is_signed=False)
    )


def test_logical_type_from_converted_type_uses_tag_utc():
    element = SchemaElement(converted_type=ConvertedType.TIMESTAMP_MICROS)
    logical = logical_type_from_converted_type(element, Tag(is_adjusted_to_utc=True))
    assert logical.timestamp == TimestampType(True, TimeUnit.MICROS)
    time_element = SchemaElement(converted_type=ConvertedType.TIME_MILLIS)
    assert logical_type_from_converted_type(time_element, Tag()).time == TimeType(
        False, TimeUnit.MILLIS
    )


def test_logical_type_from_converted_type_utf8():
    element = SchemaElement(converted_type=ConvertedType.UTF8)
    assert logical_type_from_converted_type(element, Tag()) == LogicalType(is_string=True)


def test_key_tag():
    source = parse_tag(
        "name=score, type=MAP, keytype=BYTE_ARRAY, keyconvertedtype=UTF8, "
        "keylength=5, keyrepetitiontype=OPTIONAL, keyencoding=plain_dictionary"
    )
    key = key_tag(source)
    assert (key.in_name, key.ex_name) == ("Key", "key")
    assert key.type == "BYTE_ARRAY"
    assert key.converted_type == "UTF8"
    assert key.length == 5
    assert key.encoding is Encoding.PLAIN_DICTIONARY
    assert key.repetition_type is FieldRepetitionType.REQUIRED


def test_value_tag():
    source = parse_tag(
        "name=score, type=MAP, valuetype=INT32, valueconvertedtype=INT_16, "
        "valuerepetitiontype=OPTIONAL, valuescale=1, valueprecision=4, valueomitstats=true"
    )
    value = value_tag(source)
    assert (value.in_name, value.ex_name) == ("Value", "value")
    assert value.type == "INT32"
    assert value.converted_type == "INT_16"
    assert value.repetition_type is FieldRepetitionType.OPTIONAL
    assert (value.scale, value.precision) == (1, 4)
    assert value.omit_stats is True
    assert value.logical_type_fields == {}