"""
Tests for key-path lookup and the detach/restore scope.
"""

import types

import pytest
from deepstruct import InvalidArgumentError, InvalidPathError, MissingPathError, reach, reach_template
from deepstruct.paths import detached, reach_set, restore


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class TestReach:
    """Test reach()."""

    def test_dotted(self):
        assert reach({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_list_chain(self):
        assert reach({"a": {"b.c": 1}}, ["a", "b.c"]) == 1

    def test_no_chain(self):
        obj = {"a": 1}
        assert reach(obj, None) is obj
        assert reach(obj, False) is obj

    def test_sequence_indices(self):
        obj = {"a": [10, 20, 30]}
        assert reach(obj, "a.1") == 20
        assert reach(obj, "a.-1") == 30
        assert reach(obj, ["a", 0]) == 10
        assert reach(obj, "a.5") is None

    def test_attribute_record(self):
        assert reach({"p": Point(1, 2)}, "p.y") == 2

    def test_default(self):
        assert reach({"a": {}}, "a.b.c", default="x") == "x"
        assert reach({"a": 1}, "a.b", default="x") == "x"

    def test_separator(self):
        assert reach({"a": {"b": 1}}, "a/b", separator="/") == 1

    def test_separator_with_list(self):
        with pytest.raises(InvalidArgumentError):
            reach({}, ["a"], separator="/")

    def test_strict_missing(self):
        with pytest.raises(MissingPathError):
            reach({"a": {}}, "a.b.c", strict=True)

    def test_strict_final_segment_may_be_absent(self):
        assert reach({"a": {}}, "a.b", strict=True) is None

    def test_strict_invalid(self):
        with pytest.raises(InvalidPathError):
            reach({"a": 1}, "a.b", strict=True)

    def test_sets_need_iterables(self):
        obj = {"a": {5}}
        assert reach(obj, "a.0") is None
        assert reach(obj, "a.0", iterables=True) == 5

    def test_function_attributes(self):
        def handler():
            pass

        handler.meta = {"name": "x"}
        assert reach({"fn": handler}, "fn.meta.name") == "x"
        assert reach({"fn": handler}, "fn.meta.name", functions=False) is None

    def test_present_none_value(self):
        assert reach({"a": None}, "a", default=1) is None


class TestReachTemplate:
    """Test reach_template()."""

    def test_substitution(self):
        obj = {"a": {"b": 1}, "name": "x"}
        assert reach_template(obj, "{name}: {a.b}") == "x: 1"

    def test_missing_renders_empty(self):
        assert reach_template({}, "[{a.b}]") == "[]"


class TestDetached:
    """Test the detach/restore scope."""

    def test_detach_and_restore(self):
        inner = [1]
        source = {"a": {"b": inner}}
        with detached(source, ["a.b"]) as storage:
            assert source["a"]["b"] is None
            assert storage == [("a.b", inner)]
        assert source["a"]["b"] is inner

    def test_restored_on_error(self):
        inner = [1]
        source = {"a": inner}
        with pytest.raises(RuntimeError):
            with detached(source, ["a"]):
                raise RuntimeError("fail")
        assert source["a"] is inner

    def test_primitives_not_detached(self):
        source = {"a": 1}
        with detached(source, ["a", "missing"]) as storage:
            assert storage == []
            assert source == {"a": 1}

    def test_path_through_tuple(self):
        """Unassignable paths raise a path error and leave the source intact."""
        first = [0]
        inner = [1]
        source = {"x": first, "a": (inner, 2)}
        with pytest.raises(InvalidPathError):
            with detached(source, ["x", "a.0"]):
                pass
        assert source == {"x": [0], "a": ([1], 2)}
        assert source["x"] is first

    def test_restore_into_other(self):
        target = {"a": {"b": None}}
        value = {"c": 1}
        restore(target, [("a.b", value)])
        assert target["a"]["b"] is value


class TestReachSet:
    """Test reach_set()."""

    def test_sets_nested(self):
        obj = {"a": [0, {"b": 1}]}
        reach_set(obj, "a.1.b", 2)
        reach_set(obj, "a.-2", 5)
        assert obj == {"a": [5, {"b": 2}]}

    def test_missing_parent(self):
        with pytest.raises(MissingPathError):
            reach_set({"a": {}}, "a.b.c", 1)

    def test_invalid_parent(self):
        with pytest.raises(InvalidPathError):
            reach_set({"a": 1}, "a.b", 1)

    def test_tuple_parent(self):
        with pytest.raises(InvalidPathError):
            reach_set({"a": ([1], 2)}, "a.0", None)

    def test_read_only_mapping_parent(self):
        with pytest.raises(InvalidPathError):
            reach_set({"a": types.MappingProxyType({"b": [1]})}, "a.b", None)

    def test_index_out_of_range(self):
        with pytest.raises(MissingPathError):
            reach_set({"a": [1]}, "a.3", None)
