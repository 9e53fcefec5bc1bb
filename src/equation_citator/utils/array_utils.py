"""Sequence search helpers."""

import math
from typing import Any, List, Sequence


def _same(a: Any, b: Any) -> bool:
    """Element equality: identity for objects, value for primitives, NaN never equal."""
    if isinstance(a, float) and math.isnan(a):
        return False
    if a is None or b is None:
        return a is b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, (str, bytes)):
        return type(a) is type(b) and a == b
    return a is b


def _failure_table(pattern: Sequence[Any]) -> List[int]:
    table = [0] * len(pattern)
    k = 0
    for i in range(1, len(pattern)):
        while k > 0 and not _same(pattern[i], pattern[k]):
            k = table[k - 1]
        if _same(pattern[i], pattern[k]):
            k += 1
        table[i] = k
    return table


def find_array(pattern: Sequence[Any], target: Sequence[Any]) -> int:
    """
    Knuth-Morris-Pratt search for `pattern` as a contiguous run of `target`.

    Args:
        pattern: Elements to look for
        target: Sequence to search in

    Returns:
        Index of the first occurrence, 0 for an empty pattern, -1 if absent
    """
    if len(pattern) == 0:
        return 0
    if len(target) == 0:
        return -1

    table = _failure_table(pattern)
    k = 0
    for i, item in enumerate(target):
        while k > 0 and not _same(item, pattern[k]):
            k = table[k - 1]
        if _same(item, pattern[k]):
            k += 1
            if k == len(pattern):
                return i - k + 1
    return -1
