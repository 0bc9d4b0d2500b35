"""
Containment Matcher

Tests whether a reference "contains" a set of requested values:

    text      -> substrings          contain("abcabc", "abc")
    sequence  -> items               contain([1, 2, 3], [1, 3])
    record    -> keys                contain({"a": 1, "b": 2}, ["a"])
    record    -> key/value pairs     contain({"a": 1, "b": 2}, {"a": 1})

Policies:
    deep  compare items/values with deep_equal instead of ==
    once  every requested value may match at most once
    only  the reference may contain nothing but the requested values
    part  a partial match (at least one requested value) is enough

Each requested value owns one slot in a MatchTally for the duration of
the call. The verdict is computed from the tally and the "misses" flag
(reference content that matched nothing).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .equality import deep_equal
from .errors import EmptyInputError, TypeMismatchError
from .escape import escape_regex
from .kinds import TypeTag, classify, get_own, has_own, own_keys
from .options import ContainOptions

logger = logging.getLogger(__name__)

_RECORD_LIKE = (TypeTag.RECORD, TypeTag.KEYED, TypeTag.WEAK_KEYED)
_ITERABLE = (TypeTag.SEQUENCE, TypeTag.UNIQUE, TypeTag.WEAK_UNIQUE)


@dataclass
class MatchTally:
    """Per-value occurrence counts plus the unmatched-input flag."""

    counts: List[int] = field(default_factory=list)
    misses: bool = False

    @classmethod
    def for_values(cls, values: List[Any]) -> "MatchTally":
        return cls(counts=[0] * len(values))

    def hit(self, index: int) -> None:
        self.counts[index] += 1

    def verdict(self, options: ContainOptions) -> bool:
        if options.only and (self.misses or not options.once):
            return not self.misses

        result = False
        for count in self.counts:
            result = result or count > 0
            if options.once and count > 1:
                return False
            if not options.part and count == 0:
                return False
        return result


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    # Booleans never match numbers (True == 1 in Python)
    if isinstance(a, bool) is not isinstance(b, bool):
        return False
    return bool(a == b)


def _index_of(values: List[Any], item: Any) -> Optional[int]:
    for index, value in enumerate(values):
        if _same(value, item):
            return index
    return None


def _distinct(values: List[Any]) -> List[Any]:
    result: List[Any] = []
    for value in values:
        if _index_of(result, value) is None:
            result.append(value)
    return result


def contain(reference: Any, values: Any, options: Any = None, **overrides: Any) -> bool:
    """
    Test whether reference contains values.

    Args:
        reference: String, sequence/set, or record/mapping
        values: A single value, a list (or set) of values, or, for a
            record reference, a dict of expected key/value pairs
        options: ContainOptions or dict (deep, once, only, part,
            include_symbols)
        overrides: Keyword overrides for options

    Returns:
        True if the containment policy is satisfied

    Raises:
        TypeMismatchError: unsupported reference, or non-string values
            for a string reference
        EmptyInputError: no values requested

    Example:
        contain([1, 2], [1, 2], once=True, only=True)      # True
        contain("abcx", ["abc", "y"], only=True)           # False
    """
    options = ContainOptions.build(options, **overrides)
    ref_tag = classify(reference)

    pairs = None
    if ref_tag in _RECORD_LIKE and classify(values) in _RECORD_LIKE:
        pairs = values
        values = own_keys(values)
    elif isinstance(values, (list, set, frozenset)):
        values = list(values)
    else:
        values = [values]

    if not isinstance(reference, str) and ref_tag not in _RECORD_LIKE + _ITERABLE:
        raise TypeMismatchError("Reference must be a string, a sequence or a record")

    values = _distinct(values)
    if not values:
        raise EmptyInputError("Values array cannot be empty")

    if options.deep:
        flags = options.comparison_flags()

        def compare(a: Any, b: Any) -> bool:
            return deep_equal(a, b, flags)
    else:
        compare = _same

    tally = MatchTally.for_values(values)

    if isinstance(reference, str):
        _match_text(reference, values, tally)
    elif ref_tag in _ITERABLE:
        if not _match_items(reference, values, tally, options, compare):
            return False
    elif not _match_keys(reference, values, pairs, tally, options, compare):
        return False

    return tally.verdict(options)


def _match_text(reference: str, values: List[Any], tally: MatchTally) -> None:
    for value in values:
        if not isinstance(value, str):
            raise TypeMismatchError("Cannot compare string reference to non-string value")

    pattern = re.compile("(" + "|".join(escape_regex(value) for value in values) + ")")

    def remove(match: re.Match) -> str:
        tally.hit(values.index(match.group(1)))
        return ""

    leftovers = pattern.sub(remove, reference)
    tally.misses = bool(leftovers)


def _match_items(
    reference: Any,
    values: List[Any],
    tally: MatchTally,
    options: ContainOptions,
    compare: Callable[[Any, Any], bool],
) -> bool:
    items = list(reference)
    only_once = bool(options.only and options.once)
    if only_once and len(items) != len(values):
        return False

    for item in items:
        matched = None
        for index, candidate in enumerate(values):
            if only_once and tally.counts[index]:
                continue
            if compare(candidate, item):
                matched = index
                break

        if matched is None:
            tally.misses = True
        else:
            tally.hit(matched)
    return True


def _match_keys(
    reference: Any,
    values: List[Any],
    pairs: Any,
    tally: MatchTally,
    options: ContainOptions,
    compare: Callable[[Any, Any], bool],
) -> bool:
    for key in own_keys(reference, options.include_symbols):
        index = _index_of(values, key)
        if index is None:
            tally.misses = True
            continue

        if pairs is not None and not compare(get_own(pairs, key), get_own(reference, key)):
            logger.debug(f"Value mismatch on key {key!r}")
            return False

        tally.hit(index)
    return True


def intersect(first: Any, second: Any, first_only: bool = False) -> Any:
    """
    Find the common unique items of two collections.

    Args:
        first: Sequence, set or mapping used as the lookup side
        second: Iterable scanned in order
        first_only: Return only the first common item

    Returns:
        List of common items in second's order (or the first one, or None)
    """
    if first is None or second is None:
        return None if first_only else []

    lookup = first
    if classify(first) is TypeTag.SEQUENCE:
        try:
            lookup = set(first)
        except TypeError:
            lookup = list(first)

    common: List[Any] = []
    for value in second:
        if _has(lookup, value) and _index_of(common, value) is None:
            if first_only:
                return value
            common.append(value)

    return None if first_only else common


def _has(lookup: Any, value: Any) -> bool:
    if classify(lookup) is TypeTag.RECORD and not isinstance(lookup, dict):
        return has_own(lookup, value)
    try:
        return value in lookup
    except TypeError:
        # Unhashable values cannot be members of a hashed collection
        return False
