"""
Equality Engine

Decides structural equivalence of two object graphs.

RULES:
    - Values with different TypeTags are never equal.
    - Primitives compare by identity or value. NaN equals NaN, signed
      zeros are equal, booleans never equal numbers.
    - template_strict requires the exact same class on both sides;
      otherwise only the builtin base (see kinds.base_type) must match.
    - Buffers compare byte-for-byte, date/time values by value, patterns
      by pattern text and flags.
    - Sequences compare by length, then element-wise. partial is passed
      down to the elements but never relaxes the length check.
    - Sets compare by size and mutual deep containment.
    - Records and keyed containers compare by key set (exact, or one side
      a superset of the other with partial) and recursively per key.

Cycle safety comes from a PairTracker: a pair of references already under
comparison is treated as equal when it is met again.

deep_equal never mutates its inputs.
"""

from __future__ import annotations

import math
from decimal import Decimal
from numbers import Number
from typing import Any

from .kinds import TypeTag, base_type, classify, get_own, has_own, own_keys
from .options import ComparisonFlags
from .tracker import PairTracker


def deep_equal(a: Any, b: Any, flags: Any = None, **overrides: Any) -> bool:
    """
    Compare two values structurally.

    Args:
        a: First value
        b: Second value
        flags: ComparisonFlags or dict
        overrides: Keyword overrides (template_strict, partial, include_symbols)

    Returns:
        True if the graphs are structurally equivalent

    Example:
        deep_equal({"a": [1, 2]}, {"a": [1, 2]})              # True
        deep_equal({"a": 1, "b": 2}, {"a": 1}, partial=True)  # True
    """
    return _equal(a, b, ComparisonFlags.build(flags, **overrides), PairTracker())


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _primitive_equal(a: Any, b: Any, flags: ComparisonFlags) -> bool:
    if _is_nan(a) or _is_nan(b):
        return _is_nan(a) and _is_nan(b)

    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b

    if _is_number(a) and _is_number(b):
        return a == b

    if flags.template_strict and type(a) is not type(b):
        return False

    return bool(a == b)


def _equal(a: Any, b: Any, flags: ComparisonFlags, seen: PairTracker) -> bool:
    if a is b:
        return True

    tag = classify(a)
    if tag is not classify(b):
        return False

    if tag is TypeTag.PRIMITIVE:
        return _primitive_equal(a, b, flags)

    if flags.template_strict:
        if type(a) is not type(b):
            return False
    elif base_type(a) is not base_type(b):
        return False

    if tag is TypeTag.BUFFER:
        return bytes(a) == bytes(b)
    if tag is TypeTag.DATETIME:
        return a == b
    if tag is TypeTag.PATTERN:
        return a.pattern == b.pattern and a.flags == b.flags

    if not seen.enter(a, b):
        return True

    try:
        if tag is TypeTag.SEQUENCE:
            return _sequence_equal(a, b, flags, seen)
        if tag in (TypeTag.UNIQUE, TypeTag.WEAK_UNIQUE):
            return _unique_equal(a, b, flags, seen)
        return _keys_equal(a, b, flags, seen)
    finally:
        seen.leave(a, b)


def _sequence_equal(a: Any, b: Any, flags: ComparisonFlags, seen: PairTracker) -> bool:
    if len(a) != len(b):
        return False

    for left, right in zip(a, b):
        if not _equal(left, right, flags, seen):
            return False
    return True


def _unique_equal(a: Any, b: Any, flags: ComparisonFlags, seen: PairTracker) -> bool:
    remaining = list(b)
    if len(remaining) != len(a):
        return False

    for item in a:
        match = next((i for i, candidate in enumerate(remaining) if candidate is item), None)
        if match is None:
            match = next(
                (i for i, candidate in enumerate(remaining) if _equal(item, candidate, flags, seen)),
                None,
            )
        if match is None:
            return False
        del remaining[match]
    return True


def _keys_equal(a: Any, b: Any, flags: ComparisonFlags, seen: PairTracker) -> bool:
    keys_a = own_keys(a, flags.include_symbols)
    keys_b = own_keys(b, flags.include_symbols)

    if not flags.partial and len(keys_a) != len(keys_b):
        return False

    # With partial, the smaller key set must be contained in the larger one
    if len(keys_a) <= len(keys_b):
        keys, other = keys_a, b
    else:
        keys, other = keys_b, a

    for key in keys:
        if not has_own(other, key):
            return False
        if not _equal(get_own(a, key), get_own(b, key), flags, seen):
            return False
    return True
