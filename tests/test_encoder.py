import pytest

from parquetlite.binary import pack_float32, pack_float64, pack_int32
from parquetlite.encoder import (
    to_int64,
    write_bit_packed,
    write_bit_packed_deprecated,
    write_byte_stream_split,
    write_byte_stream_split_float32,
    write_byte_stream_split_float64,
    write_delta,
    write_delta_byte_array,
    write_delta_int32,
    write_delta_int64,
    write_delta_length_byte_array,
    write_plain,
    write_plain_boolean,
    write_plain_byte_array,
    write_plain_double,
    write_plain_fixed_len_byte_array,
    write_plain_float,
    write_plain_int32,
    write_plain_int64,
    write_plain_int96,
    write_rle,
    write_rle_bit_packed_hybrid,
    write_rle_bit_packed_hybrid_int32,
    write_rle_int32,
    write_unsigned_varint,
)
from parquetlite.format import Type


@pytest.mark.parametrize(
    "values, expected",
    [
        ([1, 2, 3], [1, 2, 3]),
        ([True, False, True], [1, 0, 1]),
        ([], []),
    ],
)
def test_to_int64(values, expected):
    assert to_int64(values) == expected


def test_write_unsigned_varint():
    expected = bytes(
        [0x00, 0x7F, 0x80, 0x01, 0x80, 0x40, 0xFF, 0x7F, 0x80, 0x80, 0x01,
         0xFF, 0xFF, 0x7F, 0x80, 0x80, 0x80, 0x01, 0x80, 0x80, 0x80, 0x40,
         0xFF, 0xFF, 0xFF, 0x7F]
    )
    numbers = [0x0, 0x7F, 0x80, 0x2000, 0x3FFF, 0x4000, 0x1FFFFF, 0x200000, 0x8000000, 0xFFFFFFF]
    assert b"".join(write_unsigned_varint(n) for n in numbers) == expected


def test_write_unsigned_varint_rejects_negative():
    with pytest.raises(ValueError):
        write_unsigned_varint(-1)


@pytest.mark.parametrize(
    "values, bit_width, expected",
    [
        ([0, 0, 0], 0, bytes([3 << 1])),
        ([3], 2, bytes([1 << 1, 3])),
        ([1, 2, 3, 3], 2, bytes([1 << 1, 1, 1 << 1, 2, 2 << 1, 3])),
    ],
)
def test_write_rle(values, bit_width, expected):
    assert write_rle(values, bit_width, Type.INT64) == expected


def test_write_rle_int32_matches_generic_rle():
    values = [5, 5, 1, 7, 7, 7]
    assert write_rle_int32(values, 3) == write_rle(values, 3, Type.INT32)


def test_rle_hybrid_prefixes_length():
    values = [1, 1, 2, 3]
    out = write_rle_bit_packed_hybrid(values, 2, Type.INT64)
    assert out[:4] == pack_int32([len(out) - 4])
    assert out[4:] == write_rle(values, 2, Type.INT64)


def test_rle_hybrid_int32_prefixes_length():
    values = [4, 4, 4, 0]
    out = write_rle_bit_packed_hybrid_int32(values, 3)
    assert out[:4] == pack_int32([len(out) - 4])
    assert out[4:] == write_rle_int32(values, 3)


@pytest.mark.parametrize(
    "values, bit_width, expected",
    [
        ([0, 0, 0, 0, 0, 0, 0, 0], 0, bytes([3])),
        ([0, 1, 2, 3, 4, 5, 6, 7], 3, bytes([3, 0x88, 0xC6, 0xFA])),
    ],
)
def test_write_bit_packed(values, bit_width, expected):
    assert write_bit_packed(values, bit_width, True) == expected


def test_write_bit_packed_without_header_drops_header():
    values = [0, 1, 2, 3, 4, 5, 6, 7]
    assert write_bit_packed(values, 3, False) == write_bit_packed(values, 3, True)[1:]


def test_write_bit_packed_empty():
    assert write_bit_packed([], 3, True) == b""


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([True], bytes([1])),
        ([True, False], bytes([1])),
        ([True, False, False, True, False], bytes([9])),
    ],
)
def test_write_plain_boolean(values, expected):
    assert write_plain_boolean(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([0], bytes([0, 0, 0, 0])),
        ([0, 1, 2], bytes([0, 0, 0, 0, 1, 0, 0, 0, 2, 0, 0, 0])),
    ],
)
def test_write_plain_int32(values, expected):
    assert write_plain_int32(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([0], bytes(8)),
        ([0, 1, 2], bytes([0] * 8 + [1] + [0] * 7 + [2] + [0] * 7)),
    ],
)
def test_write_plain_int64(values, expected):
    assert write_plain_int64(values) == expected


def test_write_plain_int96():
    assert write_plain_int96([]) == b""
    assert write_plain_int96([bytes(12)]) == bytes(12)
    values = [bytes(12), bytes([1] + [0] * 11), bytes([2] + [0] * 11)]
    expected = bytes([0] * 12 + [1] + [0] * 11 + [2] + [0] * 11)
    assert write_plain_int96(values) == expected


def test_write_plain_byte_array():
    assert write_plain_byte_array([]) == b""
    assert write_plain_byte_array(["a", "abc"]) == bytes([1, 0, 0, 0, 97, 3, 0, 0, 0, 97, 98, 99])


def test_write_plain_fixed_len_byte_array():
    assert write_plain_fixed_len_byte_array([]) == b""
    assert write_plain_fixed_len_byte_array(["bca", "abc"]) == bytes([98, 99, 97, 97, 98, 99])


def test_write_plain_dispatch():
    assert write_plain([0, 1, 2], Type.INT32) == write_plain_int32([0, 1, 2])
    assert write_plain([True, False], Type.BOOLEAN) == write_plain_boolean([True, False])
    assert write_plain([0.5], Type.FLOAT) == write_plain_float([0.5])
    assert write_plain([0.5], Type.DOUBLE) == write_plain_double([0.5])
    assert write_plain([], Type.INT32) == b""


@pytest.mark.parametrize(
    "values, expected",
    [
        ([1, 2, 3, 4, 5], bytes([128, 1, 4, 5, 2, 2, 0, 0, 0, 0])),
        (
            [7, 5, 3, 1, 2, 3, 4, 5],
            bytes([128, 1, 4, 8, 14, 3, 2, 0, 0, 0, 192, 63, 0, 0, 0, 0, 0, 0]),
        ),
    ],
)
def test_write_delta_int32(values, expected):
    assert write_delta_int32(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([1, 2, 3, 4, 5], bytes([128, 1, 4, 5, 2, 2, 0, 0, 0, 0])),
        (
            [7, 5, 3, 1, 2, 3, 4, 5],
            bytes([128, 1, 4, 8, 14, 3, 2, 0, 0, 0, 192, 63, 0, 0, 0, 0, 0, 0]),
        ),
    ],
)
def test_write_delta_int64(values, expected):
    assert write_delta_int64(values) == expected


def test_write_delta_single_negative_value_has_header_only():
    assert write_delta_int32([-1]) == bytes([128, 1, 4, 1, 1])


def test_write_delta_dispatch():
    values = [3, 1, 4, 1, 5]
    assert write_delta(values, Type.INT32) == write_delta_int32(values)
    assert write_delta(values, Type.INT64) == write_delta_int64(values)
    assert write_delta(values, Type.BOOLEAN) == b""
    assert write_delta([], Type.INT32) == b""


def test_write_delta_empty_rejected():
    with pytest.raises(ValueError):
        write_delta_int32([])


def test_write_delta_length_byte_array():
    expected = bytes(
        [128, 1, 4, 4, 10, 0, 1, 0, 0, 0, 2, 0, 0, 0, 72, 101, 108, 108, 111, 87, 111,
         114, 108, 100, 70, 111, 111, 98, 97, 114, 65, 66, 67, 68, 69, 70]
    )
    assert write_delta_length_byte_array(["Hello", "World", "Foobar", "ABCDEF"]) == expected


def test_write_delta_byte_array():
    expected = bytes(
        [128, 1, 4, 4, 0, 0, 0, 0, 0, 0, 128, 1, 4, 4, 10, 0, 1, 0, 0, 0, 2, 0, 0, 0,
         72, 101, 108, 108, 111, 87, 111, 114, 108, 100, 70, 111, 111, 98, 97, 114,
         65, 66, 67, 68, 69, 70]
    )
    assert write_delta_byte_array(["Hello", "World", "Foobar", "ABCDEF"]) == expected


def test_write_delta_byte_array_empty():
    assert write_delta_byte_array([]) == b""


def test_write_delta_byte_array_uses_shared_prefixes():
    out = write_delta_byte_array(["abc", "abd"])
    assert out == write_delta_int32([0, 2]) + write_delta_length_byte_array(["abc", "d"])


def test_write_bit_packed_deprecated():
    assert write_bit_packed_deprecated([1, 2, 3, 4], 3) == bytes([41])


def test_write_bit_packed_deprecated_empty():
    assert write_bit_packed_deprecated([], 3) == b""


def test_byte_stream_split_float32_interleaves_bytes():
    values = [1.5, -2.25, 8.0]
    out = write_byte_stream_split_float32(values)
    assert len(out) == 4 * len(values)
    for index, value in enumerate(values):
        assert out[index::len(values)] == pack_float32([value])


def test_byte_stream_split_float64_interleaves_bytes():
    values = [0.1, -3.0]
    out = write_byte_stream_split_float64(values)
    assert len(out) == 8 * len(values)
    for index, value in enumerate(values):
        assert out[index::len(values)] == pack_float64([value])


def test_byte_stream_split_single_value_equals_plain():
    assert write_byte_stream_split_float32([2.5]) == pack_float32([2.5])


def test_byte_stream_split_dispatch():
    assert write_byte_stream_split([1.0, 2.0], Type.FLOAT) == write_byte_stream_split_float32([1.0, 2.0])
    assert write_byte_stream_split([1.0, 2.0], Type.DOUBLE) == write_byte_stream_split_float64([1.0, 2.0])
    assert write_byte_stream_split([1.0], Type.INT32) == b""
    assert write_byte_stream_split([], Type.FLOAT) == b""