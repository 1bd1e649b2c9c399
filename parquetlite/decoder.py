"""Decoders for Parquet page values: plain, RLE / bit-packed hybrid, delta
binary packed, delta byte arrays and byte stream split.

Byte-array values are returned as ``bytes``; integers as Python ``int``
already wrapped to the width of their physical type.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Callable, List

from .binary import read_float32, read_float64, read_int32, read_int64
from .format import Type

_MASK64 = 0xFFFFFFFFFFFFFFFF


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


def _unzigzag(encoded: int, bits: int) -> int:
    """Undo zig-zag encoding in ``bits``-wide arithmetic."""
    unsigned = encoded & ((1 << bits) - 1)
    return _wrap((unsigned >> 1) ^ -(unsigned & 1), bits)


def _read_some(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, treating missing bytes as zero.

    Raises ``EOFError`` when the stream is already exhausted.
    """
    if size < 0:
        raise ValueError(f"size must not be negative, got {size}")
    if size == 0:
        return b""
    data = stream.read(size)
    if not data:
        raise EOFError(f"expected {size} bytes but the stream is exhausted")
    return bytes(data).ljust(size, b"\x00")


def _read_full(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise ``EOFError``."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    data = b"".join(chunks)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes but only {len(data)} were available")
    return data


def read_plain_boolean(stream: BinaryIO, count: int) -> List[bool]:
    """Read ``count`` bit-packed booleans."""
    values = read_bit_packed(stream, count << 1, 1)
    return [value > 0 for value in values[:count]]


def read_plain_int32(stream: BinaryIO, count: int) -> List[int]:
    return read_int32(stream, count)


def read_plain_int64(stream: BinaryIO, count: int) -> List[int]:
    return read_int64(stream, count)


def read_plain_int96(stream: BinaryIO, count: int) -> List[bytes]:
    """Read ``count`` twelve-byte values.

    A short final read keeps the trailing bytes of the previous value.
    """
    buffer = bytearray(12)
    values = []
    for _ in range(count):
        chunk = stream.read(12)
        if not chunk:
            raise EOFError("stream exhausted while reading INT96 values")
        buffer[: len(chunk)] = chunk
        values.append(bytes(buffer))
    return values


def read_plain_float(stream: BinaryIO, count: int) -> List[float]:
    return read_float32(stream, count)


def read_plain_double(stream: BinaryIO, count: int) -> List[float]:
    return read_float64(stream, count)


def read_plain_byte_array(stream: BinaryIO, count: int) -> List[bytes]:
    """Read ``count`` values, each prefixed by a little-endian 32-bit length."""
    values = []
    for _ in range(count):
        (length,) = struct.unpack("<I", _read_some(stream, 4))
        data = stream.read(length) if length else b""
        values.append(bytes(data).ljust(length, b"\x00"))
    return values


def read_plain_fixed_len_byte_array(stream: BinaryIO, count: int, length: int) -> List[bytes]:
    """Read ``count`` values of ``length`` bytes each."""
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    return [_read_some(stream, length) for _ in range(count)]


_PLAIN_READERS: dict = {
    Type.BOOLEAN: lambda stream, count, width: read_plain_boolean(stream, count),
    Type.INT32: lambda stream, count, width: read_plain_int32(stream, count),
    Type.INT64: lambda stream, count, width: read_plain_int64(stream, count),
    Type.INT96: lambda stream, count, width: read_plain_int96(stream, count),
    Type.FLOAT: lambda stream, count, width: read_plain_float(stream, count),
    Type.DOUBLE: lambda stream, count, width: read_plain_double(stream, count),
    Type.BYTE_ARRAY: lambda stream, count, width: read_plain_byte_array(stream, count),
    Type.FIXED_LEN_BYTE_ARRAY: read_plain_fixed_len_byte_array,
}


def read_plain(stream: BinaryIO, parquet_type: Type, count: int, bit_width: int) -> list:
    """Read ``count`` plain-encoded values of the given physical type.

    ``bit_width`` is the value length of FIXED_LEN_BYTE_ARRAY columns.
    """
    reader = _PLAIN_READERS.get(parquet_type)
    if reader is None:
        raise ValueError(f"unknown parquet type: {parquet_type!r}")
    return reader(stream, count, bit_width)


def read_unsigned_varint(stream: BinaryIO) -> int:
    """Read a ULEB128 number; an exhausted stream ends the number early."""
    result = 0
    shift = 0
    while True:
        byte = stream.read(1)
        if not byte:
            break
        value = byte[0]
        if shift < 64:
            result |= (value & 0x7F) << shift
        if not value & 0x80:
            break
        shift += 7
    return result & _MASK64


def read_rle(stream: BinaryIO, header: int, bit_width: int) -> List[int]:
    """Read one RLE run: ``header >> 1`` copies of a ceil(width/8)-byte value."""
    count = header >> 1
    width = (bit_width + 7) // 8
    data = _read_some(stream, width)
    value = int.from_bytes(data[:4].ljust(4, b"\x00"), "little")
    return [value] * count


def read_bit_packed(stream: BinaryIO, header: int, bit_width: int) -> List[int]:
    """Read ``(header >> 1) * 8`` values of ``bit_width`` bits, least significant first."""
    count = (header >> 1) * 8
    if count == 0:
        return []
    if bit_width == 0:
        return [0] * count
    data = _read_some(stream, count * bit_width // 8)
    packed = int.from_bytes(data, "little")
    mask = (1 << bit_width) - 1
    return [
        _wrap((packed >> (position * bit_width)) & mask, 64) for position in range(count)
    ]


def read_rle_bit_packed_hybrid(stream: BinaryIO, bit_width: int, length: int) -> List[int]:
    """Read an RLE / bit-packed hybrid section of ``length`` bytes.

    A ``length`` of zero or less means the section starts with its length as
    a little-endian 32-bit integer.
    """
    if length <= 0:
        (length,) = read_plain_int32(stream, 1)
        if length < 0:
            raise ValueError(f"hybrid section length must not be negative, got {length}")
    body = _read_some(stream, length)
    section = io.BytesIO(body)
    values: List[int] = []
    while section.tell() < len(body):
        header = read_unsigned_varint(section)
        if header & 1 == 0:
            values.extend(read_rle(section, header, bit_width))
        else:
            values.extend(read_bit_packed(section, header, bit_width))
    return values


def _read_delta(stream: BinaryIO, bits: int) -> List[int]:
    block_size = read_unsigned_varint(stream)
    mini_blocks = read_unsigned_varint(stream)
    total = read_unsigned_varint(stream)
    first = _unzigzag(read_unsigned_varint(stream), bits)
    if mini_blocks == 0:
        raise ValueError("delta header declares no mini blocks")
    per_mini_block = block_size // mini_blocks

    values = [first]
    while len(values) < total:
        min_delta = _unzigzag(read_unsigned_varint(stream), bits)
        widths = stream.read(mini_blocks)
        if len(widths) < mini_blocks:
            raise EOFError("stream exhausted while reading mini block bit widths")
        before = len(values)
        for width in widths:
            if len(values) >= total:
                break
            for delta in read_bit_packed(stream, (per_mini_block // 8) << 1, width):
                if len(values) >= total:
                    break
                values.append(_wrap(values[-1] + delta + min_delta, bits))
        if len(values) == before:
            raise ValueError("delta block holds no values")
    return values[:total]


def read_delta_binary_packed_int32(stream: BinaryIO) -> List[int]:
    """Decode delta binary packed values in 32-bit arithmetic."""
    return _read_delta(stream, 32)


def read_delta_binary_packed_int64(stream: BinaryIO) -> List[int]:
    """Decode delta binary packed values in 64-bit arithmetic."""
    return _read_delta(stream, 64)


def read_delta_length_byte_array(stream: BinaryIO) -> List[bytes]:
    """Delta-encoded lengths followed by the concatenated data."""
    values = []
    for length in read_delta_binary_packed_int64(stream):
        if length < 0:
            raise ValueError(f"byte array length must not be negative, got {length}")
        if length == 0:
            values.append(b"")
        else:
            values.append(read_plain_fixed_len_byte_array(stream, 1, length)[0])
    return values


def read_delta_byte_array(stream: BinaryIO) -> List[bytes]:
    """Rebuild values from shared-prefix lengths and suffixes."""
    prefix_lengths = read_delta_binary_packed_int64(stream)
    suffixes = read_delta_length_byte_array(stream)
    if not prefix_lengths:
        return []
    if len(suffixes) < len(prefix_lengths):
        raise ValueError(
            f"{len(prefix_lengths)} prefix lengths but only {len(suffixes)} suffixes"
        )
    values = [suffixes[0]]
    for prefix_length, suffix in zip(prefix_lengths[1:], suffixes[1:]):
        previous = values[-1]
        if not 0 <= prefix_length <= len(previous):
            raise ValueError(
                f"prefix length {prefix_length} does not fit previous value of "
                f"{len(previous)} bytes"
            )
        values.append(previous[:prefix_length] + suffix)
    return values


def _read_byte_stream_split(
    stream: BinaryIO,
    count: int,
    width: int,
    reader: Callable[[BinaryIO, int], List[float]],
) -> List[float]:
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    data = _read_full(stream, count * width)
    streams = [data[k * count:(k + 1) * count] for k in range(width)]
    interleaved = b"".join(bytes(group) for group in zip(*streams))
    return reader(io.BytesIO(interleaved), count)


def read_byte_stream_split_float32(stream: BinaryIO, count: int) -> List[float]:
    """Read ``count`` floats stored as four byte streams."""
    return _read_byte_stream_split(stream, count, 4, read_float32)


def read_byte_stream_split_float64(stream: BinaryIO, count: int) -> List[float]:
    """Read ``count`` doubles stored as eight byte streams."""
    return _read_byte_stream_split(stream, count, 8, read_float64)