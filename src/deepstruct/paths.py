"""
Key-path lookup and the shallow-key detach/reattach scope.

A key-path is either a dotted string ("a.b.0") or a list of segments
(["a", "b", 0]). Integer-like segments index sequences, negative values
counting from the end.

The shallow-key mechanism needs to move values out of a source graph for
the duration of one deep traversal and put them back afterwards:

    with detached(source, ["a.b"]) as storage:
        copy = clone(source)        # source["a"]["b"] is None here
    restore(copy, storage)          # source is already restored

The source is mutated inside the scope; callers must keep other units of
work away from it until the scope exits.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidArgumentError, InvalidPathError, MissingPathError
from .kinds import TypeTag, classify, get_own, is_mutable_mapping, is_mutable_sequence, store_own

logger = logging.getLogger(__name__)

_MISSING = object()
_INTEGER = re.compile(r"^-?\d+$")
_TEMPLATE = re.compile(r"{([^}]+)}")


def _split(chain: Any, separator: Optional[str]) -> List[Any]:
    if isinstance(chain, (list, tuple)):
        if separator is not None:
            raise InvalidArgumentError("Separator option not valid for list-based chain")
        return list(chain)
    return str(chain).split(separator or ".")


def _index(key: Any, length: int) -> Any:
    if isinstance(key, bool):
        return key
    if isinstance(key, str) and _INTEGER.match(key):
        key = int(key)
    if isinstance(key, int) and key < 0:
        key = length + key
    return key


def _step(ref: Any, key: Any, functions: bool, iterables: bool) -> Tuple[bool, Any]:
    """
    Take one step down a path.

    Returns:
        (traversable, value) where value is _MISSING if the segment is absent
    """
    tag = classify(ref)

    if tag is TypeTag.SEQUENCE:
        key = _index(key, len(ref))
        if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(ref):
            return True, ref[key]
        return True, _MISSING

    if tag in (TypeTag.UNIQUE, TypeTag.WEAK_UNIQUE):
        if not iterables:
            return False, _MISSING
        items = list(ref)
        key = _index(key, len(items))
        if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(items):
            return True, items[key]
        return True, _MISSING

    if tag in (TypeTag.RECORD, TypeTag.KEYED, TypeTag.WEAK_KEYED):
        return True, get_own(ref, key, _MISSING)

    if callable(ref) and functions and hasattr(ref, "__dict__"):
        return True, vars(ref).get(key, _MISSING)

    return False, _MISSING


def reach(
    obj: Any,
    chain: Any,
    separator: Optional[str] = None,
    strict: bool = False,
    default: Any = None,
    functions: bool = True,
    iterables: bool = False,
) -> Any:
    """
    Look up a nested value by key-path.

    Args:
        obj: Root of the graph
        chain: Dotted string or list of segments; None or False returns obj
        separator: Segment separator for string chains (default ".")
        strict: Raise instead of returning default when the path breaks
            before its final segment
        default: Returned when the path cannot be followed
        functions: Allow stepping into a function's attributes
        iterables: Allow indexing into sets by position

    Returns:
        The value at the path, or default

    Raises:
        MissingPathError: strict and a non-final segment is absent
        InvalidPathError: strict and the walk hits a non-traversable value
    """
    if chain is None or chain is False:
        return obj

    path = _split(chain, separator)
    ref = obj
    for i, key in enumerate(path):
        last = i + 1 == len(path)

        if ref is None:
            if strict and not last:
                raise MissingPathError("Missing segment", key, "in reach path", chain)
            return default

        traversable, value = _step(ref, key, functions, iterables)
        if not traversable:
            if strict:
                raise InvalidPathError("Invalid segment", key, "in reach path", chain)
            return default

        if value is _MISSING:
            if strict and not last:
                raise MissingPathError("Missing segment", key, "in reach path", chain)
            return default

        ref = value

    return ref


def reach_template(obj: Any, template: str, **options: Any) -> str:
    """
    Replace every {path} in template with the value reached from obj.

    Example:
        reach_template({"a": {"b": 1}}, "value: {a.b}")  ->  "value: 1"
    """
    def substitute(match: re.Match) -> str:
        value = reach(obj, match.group(1), **options)
        return "" if value is None else str(value)

    return _TEMPLATE.sub(substitute, template)


def reach_set(obj: Any, chain: Any, value: Any) -> None:
    """
    Assign value at a key-path. Every segment up to the last must exist.

    Raises:
        MissingPathError: a parent segment or the target index is absent
        InvalidPathError: the parent cannot be assigned into (a primitive,
            a tuple, a read-only mapping)
    """
    path = _split(chain, None)
    if not path:
        raise InvalidArgumentError("Empty key path")

    parent = reach(obj, path[:-1], strict=True, default=_MISSING) if len(path) > 1 else obj
    if parent is _MISSING or parent is None:
        raise MissingPathError("Missing parent for", path[-1], "in path", chain)

    tag = classify(parent)
    key = path[-1]
    if tag is TypeTag.SEQUENCE:
        if not is_mutable_sequence(parent):
            raise InvalidPathError("Cannot assign", key, "into immutable sequence in path", chain)
        key = _index(key, len(parent))
        if not (isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(parent)):
            raise MissingPathError("Missing index", key, "in path", chain)
    elif tag in (TypeTag.KEYED, TypeTag.WEAK_KEYED):
        if not is_mutable_mapping(parent):
            raise InvalidPathError("Cannot assign", key, "into read-only mapping in path", chain)
    elif tag is not TypeTag.RECORD:
        raise InvalidPathError("Cannot assign", key, "in path", chain)

    store_own(parent, key, value)


def _is_reference(value: Any) -> bool:
    return value is not None and (classify(value) is not TypeTag.PRIMITIVE or callable(value))


@contextmanager
def detached(source: Any, paths: Sequence[Any]) -> Iterator[List[Tuple[Any, Any]]]:
    """
    Move the structured values at paths out of source for one scope.

    Each captured value is replaced with None in source. On exit, normal
    or exceptional, the captured values are put back into source.

    Yields:
        List of (path, value) pairs, for restore() into another graph
    """
    storage: List[Tuple[Any, Any]] = []
    try:
        for path in paths:
            value = reach(source, path)
            if _is_reference(value):
                reach_set(source, path, None)
                storage.append((path, value))

        if storage:
            logger.debug(f"Detached {len(storage)} shallow path(s) from {type(source).__name__}")
        yield storage
    finally:
        restore(source, storage)


def restore(target: Any, storage: List[Tuple[Any, Any]]) -> None:
    """Reattach captured (path, value) pairs into target."""
    for path, value in storage:
        reach_set(target, path, value)
