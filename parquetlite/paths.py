"""Column path strings, rough value sizes and row/column table helpers."""

from __future__ import annotations

import dataclasses
from typing import Any, List, Sequence

PATH_DELIMITER = "\x01"

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def reform_path_str(path: str) -> str:
    """Replace dots in a dotted path with the internal delimiter."""
    return path.replace(".", PATH_DELIMITER)


def path_to_str(path: Sequence[str]) -> str:
    """Join path components with the internal delimiter."""
    return PATH_DELIMITER.join(path)


def str_to_path(text: str) -> List[str]:
    """Split a path string into its components."""
    return text.split(PATH_DELIMITER)


def path_str_index(text: str) -> int:
    """Number of components in a path string."""
    return len(text.split(PATH_DELIMITER))


def is_child_path(parent: str, child: str) -> bool:
    """Whether ``child`` equals ``parent`` or lies beneath it."""
    if not child.startswith(parent):
        return False
    return len(child) == len(parent) or child[len(parent)] == PATH_DELIMITER


def size_of(value: Any) -> int:
    """Approximate storage size of a value in bytes.

    ``None`` is 0, booleans 1, integers 4 within the signed 32-bit range and
    8 otherwise, floats 8, text and binary their byte length; containers,
    mappings and dataclass instances add up their parts; anything else is 4.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return 4 if _INT32_MIN <= value <= _INT32_MAX else 8
    if isinstance(value, float):
        return 8
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return len(value)
    if isinstance(value, dict):
        return sum(size_of(key) + size_of(item) for key, item in value.items())
    if isinstance(value, (list, tuple, set, frozenset)):
        return sum(size_of(item) for item in value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return sum(size_of(getattr(value, f.name)) for f in dataclasses.fields(value))
    return 4


def new_table(rows: int, cols: int) -> List[List[Any]]:
    """An empty ``rows`` by ``cols`` table filled with ``None``."""
    return [[None] * cols for _ in range(rows)]


def transpose_table(table: Sequence[Sequence[Any]]) -> List[List[Any]]:
    """Swap rows and columns; every row must have the same length."""
    return [list(column) for column in zip(*table, strict=True)]