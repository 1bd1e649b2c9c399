"""Parquet schema tags, column statistics, value encodings and page compression."""

__version__ = "0.1.0"
__all__ = [
    "binary",
    "compression",
    "decoder",
    "encoder",
    "format",
    "paths",
    "snappy",
    "stats",
    "tags",
]