"""Encoders for Parquet page values: plain, RLE / bit-packed hybrid, delta
binary packed, delta byte arrays and byte stream split."""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence, Union

from .binary import pack_float32, pack_float64, pack_int32, pack_int64
from .format import Type

ByteLike = Union[bytes, bytearray, memoryview, str]

_MASK64 = 0xFFFFFFFFFFFFFFFF

_BLOCK_SIZE = 128
_MINI_BLOCKS = 4
_VALUES_PER_MINI_BLOCK = _BLOCK_SIZE // _MINI_BLOCKS


def _as_bytes(value: ByteLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


def _zigzag(value: int, bits: int) -> int:
    """Zig-zag encode in ``bits``-wide arithmetic, sign-extended to 64 bits."""
    value = _wrap(value, bits)
    encoded = _wrap((value >> (bits - 1)) ^ _wrap(value << 1, bits), bits)
    return encoded & _MASK64


def to_int64(values: Sequence[Any]) -> List[int]:
    """Convert booleans or integers to 64-bit integers.

    The kind of the first value decides how all values are read.
    """
    if not values:
        return []
    if isinstance(values[0], bool):
        return [1 if value else 0 for value in values]
    return [_wrap(int(value), 64) for value in values]


def write_plain_boolean(values: Sequence[Any]) -> bytes:
    """Pack booleans one bit each, least significant bit first."""
    out = bytearray((len(values) + 7) // 8)
    for position, value in enumerate(values):
        if value:
            out[position // 8] |= 1 << (position % 8)
    return bytes(out)


def write_plain_int32(values: Iterable[int]) -> bytes:
    return pack_int32(values)


def write_plain_int64(values: Iterable[int]) -> bytes:
    return pack_int64(values)


def write_plain_int96(values: Iterable[ByteLike]) -> bytes:
    """Concatenate twelve-byte INT96 values."""
    return b"".join(_as_bytes(value) for value in values)


def write_plain_float(values: Iterable[float]) -> bytes:
    return pack_float32(values)


def write_plain_double(values: Iterable[float]) -> bytes:
    return pack_float64(values)


def write_plain_byte_array(values: Iterable[ByteLike]) -> bytes:
    """Each value prefixed by its length as a little-endian 32-bit integer."""
    out = bytearray()
    for value in values:
        data = _as_bytes(value)
        out += pack_int32([len(data)])
        out += data
    return bytes(out)


def write_plain_fixed_len_byte_array(values: Iterable[ByteLike]) -> bytes:
    return b"".join(_as_bytes(value) for value in values)


_PLAIN_WRITERS = {
    Type.BOOLEAN: write_plain_boolean,
    Type.INT32: write_plain_int32,
    Type.INT64: write_plain_int64,
    Type.INT96: write_plain_int96,
    Type.FLOAT: write_plain_float,
    Type.DOUBLE: write_plain_double,
    Type.BYTE_ARRAY: write_plain_byte_array,
    Type.FIXED_LEN_BYTE_ARRAY: write_plain_fixed_len_byte_array,
}


def write_plain(values: Sequence[Any], parquet_type: Type) -> bytes:
    """Plain-encode values of the given physical type; unknown types give no bytes."""
    if not values:
        return b""
    writer = _PLAIN_WRITERS.get(parquet_type)
    if writer is None:
        return b""
    return writer(values)


def write_unsigned_varint(num: int) -> bytes:
    """ULEB128 encoding of a non-negative integer."""
    if num < 0:
        raise ValueError(f"unsigned varint cannot hold a negative number: {num}")
    out = bytearray()
    while True:
        low = num & 0x7F
        num >>= 7
        if num:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def _runs(values: Sequence[Any]):
    """Yield ``(value, count)`` for each run of equal consecutive values."""
    start = 0
    total = len(values)
    while start < total:
        end = start + 1
        while end < total and values[end] == values[start]:
            end += 1
        yield values[start], end - start
        start = end


def write_rle(values: Sequence[Any], bit_width: int, parquet_type: Type) -> bytes:
    """RLE runs only: a varint header followed by the value in ceil(width/8) bytes."""
    byte_count = (bit_width + 7) // 8
    out = bytearray()
    for value, count in _runs(values):
        out += write_unsigned_varint(count << 1)
        out += write_plain([value], parquet_type)[:byte_count].ljust(byte_count, b"\x00")
    return bytes(out)


def write_rle_bit_packed_hybrid(values: Sequence[Any], bit_width: int, parquet_type: Type) -> bytes:
    """RLE runs preceded by their total length as a 32-bit integer."""
    body = write_rle(values, bit_width, parquet_type)
    return pack_int32([len(body)]) + body


def write_rle_int32(values: Sequence[int], bit_width: int) -> bytes:
    """RLE runs of 32-bit integers."""
    byte_count = (bit_width + 7) // 8
    out = bytearray()
    for value, count in _runs(values):
        out += write_unsigned_varint(count << 1)
        out += pack_int32([value])[:byte_count]
    return bytes(out)


def write_rle_bit_packed_hybrid_int32(values: Sequence[int], bit_width: int) -> bytes:
    body = write_rle_int32(values, bit_width)
    return pack_int32([len(body)]) + body


def write_bit_packed(values: Sequence[Any], bit_width: int, with_header: bool) -> bytes:
    """Pack the low ``bit_width`` bits of each value, least significant first.

    Only whole bytes are emitted; a trailing partial byte is dropped. The
    optional header is the varint ``(len(values) // 8) << 1 | 1``.
    """
    if bit_width < 0:
        raise ValueError(f"bit width must not be negative, got {bit_width}")
    if not values:
        return b""
    mask = (1 << bit_width) - 1
    accumulator = 0
    for position, value in enumerate(to_int64(values)):
        accumulator |= (value & mask) << (position * bit_width)
    byte_count = len(values) * bit_width // 8
    body = (accumulator & ((1 << (byte_count * 8)) - 1)).to_bytes(byte_count, "little")
    if with_header:
        return write_unsigned_varint((len(values) // 8) << 1 | 1) + body
    return body


def _write_delta(values: Sequence[int], bits: int) -> bytes:
    numbers = [_wrap(int(value), bits) for value in values]
    if not numbers:
        raise ValueError("cannot delta-encode an empty sequence")

    out = bytearray()
    out += write_unsigned_varint(_BLOCK_SIZE)
    out += write_unsigned_varint(_MINI_BLOCKS)
    out += write_unsigned_varint(len(numbers))
    out += write_unsigned_varint(_zigzag(numbers[0], bits))

    deltas = [_wrap(after - before, bits) for before, after in zip(numbers, numbers[1:])]
    for start in range(0, len(deltas), _BLOCK_SIZE):
        block = deltas[start:start + _BLOCK_SIZE]
        min_delta = min(block)
        block += [min_delta] * (_BLOCK_SIZE - len(block))
        shifted = [_wrap(delta - min_delta, bits) for delta in block]
        mini_blocks = [
            shifted[offset:offset + _VALUES_PER_MINI_BLOCK]
            for offset in range(0, _BLOCK_SIZE, _VALUES_PER_MINI_BLOCK)
        ]
        widths = [max(0, max(mini)).bit_length() for mini in mini_blocks]

        out += write_unsigned_varint(_zigzag(min_delta, bits))
        out += bytes(widths)
        for mini, width in zip(mini_blocks, widths):
            out += write_bit_packed(mini, width, False)
    return bytes(out)


def write_delta_int32(values: Sequence[int]) -> bytes:
    """Delta binary packed encoding in 32-bit arithmetic."""
    return _write_delta(values, 32)


def write_delta_int64(values: Sequence[int]) -> bytes:
    """Delta binary packed encoding in 64-bit arithmetic."""
    return _write_delta(values, 64)


def write_delta(values: Sequence[int], parquet_type: Type) -> bytes:
    """Delta-encode INT32 or INT64 values; other types give no bytes."""
    if not values:
        return b""
    if parquet_type is Type.INT32:
        return write_delta_int32(values)
    if parquet_type is Type.INT64:
        return write_delta_int64(values)
    return b""


def write_delta_length_byte_array(values: Sequence[ByteLike]) -> bytes:
    """Delta-encoded lengths followed by the concatenated data."""
    data = [_as_bytes(value) for value in values]
    return write_delta_int32([len(item) for item in data]) + b"".join(data)


def write_bit_packed_deprecated(values: Sequence[int], bit_width: int) -> bytes:
    """Legacy bit packing, most significant bit first; only whole bytes are emitted."""
    if not 0 <= bit_width <= 64:
        raise ValueError(f"bit width must be between 0 and 64, got {bit_width}")
    if not values:
        return b""
    mask = (1 << bit_width) - 1
    accumulator = 0
    for value in values:
        accumulator = (accumulator << bit_width) | (int(value) & mask)
    total_bits = len(values) * bit_width
    byte_count = total_bits // 8
    return (accumulator >> (total_bits - byte_count * 8)).to_bytes(byte_count, "big")


def _common_prefix_length(first: bytes, second: bytes) -> int:
    for position, (left, right) in enumerate(zip(first, second)):
        if left != right:
            return position
    return min(len(first), len(second))


def write_delta_byte_array(values: Sequence[ByteLike]) -> bytes:
    """Shared-prefix lengths and suffixes, each delta encoded."""
    if not values:
        return b""
    data = [_as_bytes(value) for value in values]
    prefix_lengths = [0]
    suffixes = [data[0]]
    for previous, current in zip(data, data[1:]):
        shared = _common_prefix_length(previous, current)
        prefix_lengths.append(shared)
        suffixes.append(current[shared:])
    return write_delta_int32(prefix_lengths) + write_delta_length_byte_array(suffixes)


def _byte_stream_split(packed: bytes, width: int) -> bytes:
    return b"".join(packed[offset::width] for offset in range(width))


def write_byte_stream_split_float32(values: Sequence[float]) -> bytes:
    """Byte ``k`` of every value goes to stream ``k``; streams are concatenated."""
    if not values:
        return b""
    return _byte_stream_split(pack_float32(values), 4)


def write_byte_stream_split_float64(values: Sequence[float]) -> bytes:
    if not values:
        return b""
    return _byte_stream_split(pack_float64(values), 8)


def write_byte_stream_split(values: Sequence[float], parquet_type: Type) -> bytes:
    """Byte stream split for FLOAT or DOUBLE; other types give no bytes."""
    if not values:
        return b""
    if parquet_type is Type.FLOAT:
        return write_byte_stream_split_float32(values)
    if parquet_type is Type.DOUBLE:
        return write_byte_stream_split_float64(values)
    return b""