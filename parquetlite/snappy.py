"""Snappy block format: a varint of the uncompressed length followed by
literal and back-reference elements."""

from __future__ import annotations

from typing import Union

ByteLike = Union[bytes, bytearray, memoryview]

_TAG_LITERAL = 0
_TAG_COPY1 = 1
_TAG_COPY2 = 2
_TAG_COPY4 = 3

_MIN_MATCH = 4


def _write_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        low = value & 0x7F
        value >>= 7
        if value:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def _emit_literal(out: bytearray, chunk: bytes) -> None:
    if not chunk:
        return
    size = len(chunk) - 1
    if size < 60:
        out.append((size << 2) | _TAG_LITERAL)
    else:
        width = (size.bit_length() + 7) // 8
        out.append(((59 + width) << 2) | _TAG_LITERAL)
        out += size.to_bytes(width, "little")
    out += chunk


def _emit_copy_chunk(out: bytearray, offset: int, length: int) -> None:
    if 4 <= length <= 11 and offset < 2048:
        out.append(_TAG_COPY1 | ((length - 4) << 2) | ((offset >> 8) << 5))
        out.append(offset & 0xFF)
    elif offset <= 0xFFFF:
        out.append(_TAG_COPY2 | ((length - 1) << 2))
        out += offset.to_bytes(2, "little")
    else:
        out.append(_TAG_COPY4 | ((length - 1) << 2))
        out += offset.to_bytes(4, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy_chunk(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy_chunk(out, offset, 60)
        length -= 60
    _emit_copy_chunk(out, offset, length)


def compress(data: ByteLike) -> bytes:
    """Compress ``data`` into a Snappy block."""
    data = bytes(data)
    size = len(data)
    if size > 0xFFFFFFFF:
        raise ValueError("snappy blocks hold at most 4 GiB")
    out = bytearray(_write_varint(size))

    seen: dict = {}
    position = 0
    literal_start = 0
    while position + _MIN_MATCH <= size:
        key = data[position:position + _MIN_MATCH]
        candidate = seen.get(key)
        seen[key] = position
        if candidate is None:
            position += 1
            continue
        length = _MIN_MATCH
        while position + length < size and data[candidate + length] == data[position + length]:
            length += 1
        _emit_literal(out, data[literal_start:position])
        _emit_copy(out, position - candidate, length)
        position += length
        literal_start = position
    _emit_literal(out, data[literal_start:])
    return bytes(out)


def _read_varint(data: bytes) -> tuple:
    value = 0
    for index, byte in enumerate(data[:5]):
        value |= (byte & 0x7F) << (7 * index)
        if not byte & 0x80:
            if value > 0xFFFFFFFF:
                raise ValueError("snappy: decoded length too large")
            return value, index + 1
    raise ValueError("snappy: corrupt input, bad length header")


def _copy_back(out: bytearray, offset: int, length: int) -> None:
    if offset <= 0 or offset > len(out):
        raise ValueError(f"snappy: corrupt input, bad offset {offset}")
    start = len(out) - offset
    if offset >= length:
        out += out[start:start + length]
    else:
        for index in range(length):
            out.append(out[start + index])


def decompress(data: ByteLike) -> bytes:
    """Decompress a Snappy block; raises ``ValueError`` on corrupt input."""
    data = bytes(data)
    expected, position = _read_varint(data)
    out = bytearray()
    size = len(data)

    def take(count: int) -> bytes:
        nonlocal position
        if position + count > size:
            raise ValueError("snappy: corrupt input, truncated element")
        chunk = data[position:position + count]
        position += count
        return chunk

    while position < size:
        tag = data[position]
        position += 1
        kind = tag & 0x03
        if kind == _TAG_LITERAL:
            length = tag >> 2
            if length >= 60:
                length = int.from_bytes(take(length - 59), "little")
            out += take(length + 1)
        elif kind == _TAG_COPY1:
            length = 4 + ((tag >> 2) & 0x07)
            offset = ((tag >> 5) << 8) | take(1)[0]
            _copy_back(out, offset, length)
        elif kind == _TAG_COPY2:
            _copy_back(out, int.from_bytes(take(2), "little"), (tag >> 2) + 1)
        else:
            _copy_back(out, int.from_bytes(take(4), "little"), (tag >> 2) + 1)
        if len(out) > expected:
            raise ValueError("snappy: corrupt input, output exceeds declared length")

    if len(out) != expected:
        raise ValueError(
            f"snappy: corrupt input, declared {expected} bytes but decoded {len(out)}"
        )
    return bytes(out)