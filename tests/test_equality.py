"""
Tests for deep structural equality.

These tests verify:
    - Primitive rules (NaN, signed zero, bool vs number)
    - Template strictness and partial key sets
    - Sequences, sets, buffers, date/time values and patterns
    - Cyclic graphs terminate and compare correctly
"""

import collections
import datetime
import re
from decimal import Decimal

from deepstruct import ComparisonFlags, Symbol, deep_equal


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class OtherPoint:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class TestPrimitives:
    """Test primitive comparison."""

    def test_identity(self):
        item = {"a": 1}
        assert deep_equal(item, item)

    def test_nan(self):
        assert deep_equal(float("nan"), float("nan"))
        assert deep_equal(Decimal("nan"), Decimal("nan"))
        assert not deep_equal(float("nan"), 1.0)

    def test_signed_zero(self):
        assert deep_equal(0.0, -0.0)

    def test_bool_is_not_number(self):
        assert not deep_equal(True, 1)
        assert not deep_equal(0, False)
        assert deep_equal(True, True)

    def test_numbers_across_types(self):
        assert deep_equal(1, 1.0)

    def test_strings(self):
        assert deep_equal("a", "a")
        assert not deep_equal("a", "b")

    def test_none(self):
        assert deep_equal(None, None)
        assert not deep_equal(None, {})


class TestRecords:
    """Test dict and attribute record comparison."""

    def test_nested(self):
        assert deep_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]})
        assert not deep_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 3}]})

    def test_key_order_irrelevant(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_missing_key_vs_none(self):
        """An absent key differs from a key holding None."""
        assert not deep_equal({"a": None}, {"b": None})

    def test_partial(self):
        """partial lets either side be a superset."""
        assert deep_equal({"a": 1, "b": 2}, {"a": 1}, partial=True)
        assert deep_equal({"a": 1}, {"a": 1, "b": 2}, partial=True)
        assert not deep_equal({"a": 1, "b": 2}, {"a": 1})
        assert not deep_equal({"a": 1, "b": 2}, {"a": 2}, partial=True)
        assert not deep_equal({"a": 1, "b": 2}, {"c": 1}, partial=True)

    def test_partial_sequence_length(self):
        """partial never relaxes sequence length."""
        assert not deep_equal([1, 2], [1], partial=True)

    def test_template_strict(self):
        assert not deep_equal(Point(1, 2), OtherPoint(1, 2))
        assert deep_equal(Point(1, 2), OtherPoint(1, 2), template_strict=False)

    def test_dict_subclass(self):
        ordered = collections.OrderedDict(a=1)
        assert not deep_equal(ordered, {"a": 1})
        assert deep_equal(ordered, {"a": 1}, ComparisonFlags(template_strict=False))

    def test_record_vs_dict(self):
        """Attribute records and dicts have different bases."""
        assert not deep_equal(Point(1, 2), {"x": 1, "y": 2}, template_strict=False)

    def test_symbols(self):
        meta = Symbol("meta")
        a = {"a": 1, meta: 1}
        b = {"a": 1, meta: 2}
        assert not deep_equal(a, b)
        assert deep_equal(a, b, include_symbols=False)

    def test_flags_from_dict(self):
        assert deep_equal({"a": 1, "b": 2}, {"a": 1}, {"partial": True})


class TestCollections:
    """Test sequences, sets and other kinds."""

    def test_sequence_and_tuple_differ(self):
        assert not deep_equal([1], (1,))
        assert deep_equal((1, [2]), (1, [2]))

    def test_sequence_order(self):
        assert not deep_equal([1, 2], [2, 1])

    def test_sets(self):
        assert deep_equal({1, 2}, {2, 1})
        assert not deep_equal({1, 2}, {1, 3})
        assert not deep_equal({1}, {1, 2})

    def test_set_deep_members(self):
        """Set members are matched structurally, not by hash."""
        assert deep_equal({(1, (2,))}, {(1, (2,))})
        assert deep_equal(frozenset({Point(1, 2)}), frozenset({Point(1, 2)}))

    def test_buffers(self):
        assert deep_equal(b"abc", b"abc")
        assert not deep_equal(b"abc", b"abd")
        assert not deep_equal(b"abc", bytearray(b"abc"))
        assert deep_equal(bytearray(b"abc"), bytearray(b"abc"))

    def test_datetime(self):
        assert deep_equal(datetime.date(2020, 1, 1), datetime.date(2020, 1, 1))
        assert not deep_equal(datetime.date(2020, 1, 1), datetime.date(2020, 1, 2))

    def test_pattern(self):
        assert deep_equal(re.compile("a+"), re.compile("a+"))
        assert not deep_equal(re.compile("a+"), re.compile("a+", re.IGNORECASE))

    def test_keyed_containers(self):
        assert deep_equal(collections.ChainMap({"a": [1]}), collections.ChainMap({"a": [1]}))


class TestCycles:
    """Test cyclic graphs."""

    def test_self_reference(self):
        a = {"name": "x"}
        a["self"] = a
        b = {"name": "x"}
        b["self"] = b
        assert deep_equal(a, b)

    def test_cycle_with_difference(self):
        a = {"name": "x"}
        a["self"] = a
        b = {"name": "y"}
        b["self"] = b
        assert not deep_equal(a, b)

    def test_mutual_recursion(self):
        a1, a2 = [], []
        a1.append(a2)
        a2.append(a1)
        b1, b2 = [], []
        b1.append(b2)
        b2.append(b1)
        assert deep_equal(a1, b1)

    def test_inputs_not_mutated(self):
        a = {"a": [1, {"b": 2}]}
        b = {"a": [1, {"b": 2}]}
        deep_equal(a, b)
        assert a == {"a": [1, {"b": 2}]}
        assert b == {"a": [1, {"b": 2}]}
