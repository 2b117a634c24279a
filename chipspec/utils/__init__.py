"""Shared utility helpers for chipspec."""

import re
from enum import Enum
from typing import Any, Iterable, List, Tuple

_INT_LITERAL = re.compile(r"[+-]?(0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|[0-9][0-9_]*)")


def parse_int(value: Any) -> Any:
    """Convert integer literals such as ``"0x3FC8_8000"`` to ``int``.

    Non-string values are returned unchanged so Pydantic can report
    type errors itself.

    Examples:
        >>> parse_int("0x3FC8_8000")
        1070104576
        >>> parse_int(" 64 ")
        64
    """
    if isinstance(value, str):
        text = value.strip()
        match = _INT_LITERAL.fullmatch(text)
        if match:
            # Plain decimals are parsed base 10 so "010" is not rejected
            base = 0 if match.group(1)[:2].lower() in ("0x", "0b", "0o") else 10
            return int(text, base)
    return value


def enum_value(v: Any) -> str:
    """Extract the string value from an Enum member or return str(v)."""
    return v.value if isinstance(v, Enum) else str(v)


def filter_none(data: dict) -> dict:
    """Remove keys with None values from a dictionary.

    Passing None explicitly to Pydantic fields with defaults causes
    validation errors; filtering lets Pydantic use its own defaults.
    """
    return {k: v for k, v in data.items() if v is not None}


def find_duplicates(items: Iterable[Any]) -> List[Tuple[Any, List[int]]]:
    """Return ``(item, indices)`` for every item that occurs more than once.

    Order follows the first occurrence of each duplicated item.

    Examples:
        >>> find_duplicates([10, 11, 10, 12, 11])
        [(10, [0, 2]), (11, [1, 4])]
    """
    positions = {}
    for index, item in enumerate(items):
        positions.setdefault(item, []).append(index)
    return [(item, idx) for item, idx in positions.items() if len(idx) > 1]
