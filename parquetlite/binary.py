"""Little-endian fixed-width numbers read from binary streams and packed
into bytes."""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable, List

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _read_exact(stream: BinaryIO, size: int) -> bytes:
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


def _read(stream: BinaryIO, count: int, code: str, width: int) -> list:
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    data = _read_exact(stream, count * width)
    return list(struct.unpack(f"<{count}{code}", data))


def read_int32(stream: BinaryIO, count: int) -> List[int]:
    """Read ``count`` signed 32-bit integers."""
    return _read(stream, count, "i", 4)


def read_int64(stream: BinaryIO, count: int) -> List[int]:
    """Read ``count`` signed 64-bit integers."""
    return _read(stream, count, "q", 8)


def read_float32(stream: BinaryIO, count: int) -> List[float]:
    """Read ``count`` single-precision floats."""
    return _read(stream, count, "f", 4)


def read_float64(stream: BinaryIO, count: int) -> List[float]:
    """Read ``count`` double-precision floats."""
    return _read(stream, count, "d", 8)


def pack_int32(values: Iterable[int]) -> bytes:
    """Pack integers as 32-bit two's-complement values; wider ones are truncated."""
    masked = [int(value) & _MASK32 for value in values]
    return struct.pack(f"<{len(masked)}I", *masked)


def pack_int64(values: Iterable[int]) -> bytes:
    """Pack integers as 64-bit two's-complement values; wider ones are truncated."""
    masked = [int(value) & _MASK64 for value in values]
    return struct.pack(f"<{len(masked)}Q", *masked)


def pack_float32(values: Iterable[float]) -> bytes:
    """Pack numbers as single-precision floats."""
    items = [float(value) for value in values]
    return struct.pack(f"<{len(items)}f", *items)


def pack_float64(values: Iterable[float]) -> bytes:
    """Pack numbers as double-precision floats."""
    items = [float(value) for value in values]
    return struct.pack(f"<{len(items)}d", *items)