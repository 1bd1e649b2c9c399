"""Page compression codecs keyed by :class:`CompressionCodec`."""

from __future__ import annotations

import gzip
import io
from dataclasses import dataclass
from typing import Callable, Dict, Union

import lz4.block
import lz4.frame
import zstandard

from . import snappy
from .format import CompressionCodec

ByteLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Compressor:
    """A pair of functions that compress and restore a page body."""

    compress: Callable[[bytes], bytes]
    uncompress: Callable[[bytes], bytes]


def _identity(data: bytes) -> bytes:
    return data


def _gzip_uncompress(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError) as err:
        raise ValueError(f"gzip: {err}") from err


def _lz4_frame_uncompress(data: bytes) -> bytes:
    try:
        return lz4.frame.decompress(data)
    except RuntimeError as err:
        raise ValueError(f"lz4: {err}") from err


def _lz4_raw_compress(data: bytes) -> bytes:
    return lz4.block.compress(
        data, mode="high_compression", compression=9, store_size=False
    )


def _lz4_raw_uncompress(data: bytes) -> bytes:
    """Decode one LZ4 block that carries no size prefix."""
    out = bytearray()
    position = 0
    size = len(data)

    def extended(base: int) -> int:
        nonlocal position
        if base != 15:
            return base
        while True:
            if position >= size:
                raise ValueError("lz4: truncated length")
            byte = data[position]
            position += 1
            base += byte
            if byte != 255:
                return base

    while position < size:
        token = data[position]
        position += 1
        literal_length = extended(token >> 4)
        if position + literal_length > size:
            raise ValueError("lz4: truncated literals")
        out += data[position:position + literal_length]
        position += literal_length
        if position >= size:
            break
        if position + 2 > size:
            raise ValueError("lz4: truncated offset")
        offset = data[position] | (data[position + 1] << 8)
        position += 2
        if offset == 0 or offset > len(out):
            raise ValueError(f"lz4: invalid offset {offset}")
        match_length = extended(token & 0x0F) + 4
        start = len(out) - offset
        if offset >= match_length:
            out += out[start:start + match_length]
        else:
            for index in range(match_length):
                out.append(out[start + index])
    return bytes(out)


def _zstd_compress(data: bytes) -> bytes:
    return zstandard.ZstdCompressor().compress(data)


def _zstd_uncompress(data: bytes) -> bytes:
    try:
        with zstandard.ZstdDecompressor().stream_reader(
            io.BytesIO(data), read_across_frames=True
        ) as reader:
            return reader.read()
    except zstandard.ZstdError as err:
        raise ValueError(f"zstd: {err}") from err


_COMPRESSORS: Dict[CompressionCodec, Compressor] = {
    CompressionCodec.UNCOMPRESSED: Compressor(_identity, _identity),
    CompressionCodec.GZIP: Compressor(gzip.compress, _gzip_uncompress),
    CompressionCodec.LZ4: Compressor(lz4.frame.compress, _lz4_frame_uncompress),
    CompressionCodec.LZ4_RAW: Compressor(_lz4_raw_compress, _lz4_raw_uncompress),
    CompressionCodec.SNAPPY: Compressor(snappy.compress, snappy.decompress),
    CompressionCodec.ZSTD: Compressor(_zstd_compress, _zstd_uncompress),
}


def get_compressor(codec: CompressionCodec) -> Compressor:
    """The compressor for ``codec``; raises ``ValueError`` if it is unsupported."""
    try:
        return _COMPRESSORS[codec]
    except KeyError:
        raise ValueError(f"unsupported compress method: {codec!r}") from None


def compress(data: ByteLike, codec: CompressionCodec) -> bytes:
    """Compress ``data`` with ``codec``."""
    return get_compressor(codec).compress(bytes(data))


def uncompress(data: ByteLike, codec: CompressionCodec) -> bytes:
    """Restore ``data`` compressed with ``codec``."""
    return get_compressor(codec).uncompress(bytes(data))