"""
Clone Engine

Produces a structurally independent copy of an object graph.

Dispatch is by TypeTag (see kinds.py), resolved once per value:

    PRIMITIVE     returned unchanged
    BUFFER        byte-for-byte duplicate of the same kind
    DATETIME      new instance carrying the same value
    PATTERN       recompiled from pattern text and flags
    SEQUENCE      new container, elements cloned in order
    UNIQUE        new set, elements cloned
    KEYED         new mapping of the same kind, keys kept, values cloned
    WEAK_*        new weak container, entries kept by reference
                  (a cloned entry would have no strong owner and vanish),
                  except weak-keyed values which are cloned
    RECORD        new instance of the same class (or a plain dict /
                  SimpleNamespace without preserve_template), own
                  properties cloned

Subclasses of the builtin containers (a tagged list, a dict subclass
with extra attributes) also get their instance attributes cloned when
the class is preserved.

CYCLES:
    Every mutable target is registered in the CycleTracker before its
    children are populated. A child referring back to an ancestor
    resolves to the partially built target, so aliasing and cycles in the
    source are reproduced in the copy.

Immutable sequences and frozen sets can only be built once their
elements exist, so they are registered after construction.
"""

from __future__ import annotations

import collections
import datetime
import re
import types
import weakref
from typing import Any, Callable, Optional

from .errors import InvalidArgumentError
from .kinds import (
    TypeTag,
    base_type,
    classify,
    container_attributes,
    get_own,
    is_dict_record,
    is_immutable,
    is_mutable_mapping,
    is_mutable_sequence,
    is_mutable_set,
    own_keys,
    store_own,
)
from .options import TraversalOptions
from .paths import detached, restore
from .tracker import CycleTracker


def clone(value: Any, options: Any = None, **overrides: Any) -> Any:
    """
    Deep-clone a value.

    Args:
        value: Root of the graph to copy
        options: TraversalOptions or dict (shallow, preserve_template,
            include_symbols are used)
        overrides: Keyword overrides for options

    Returns:
        The copy (or value itself for primitives and immutable records)

    Example:
        source = {"a": [1, 2], "b": {"c": 3}}
        copy = clone(source)
        copy["a"] is source["a"]   # False
    """
    return _clone(value, TraversalOptions.build(options, **overrides), None)


def _clone(value: Any, options: TraversalOptions, seen: Optional[CycleTracker]) -> Any:
    tag = classify(value)
    if tag is TypeTag.PRIMITIVE:
        return value

    if options.shallow:
        if options.shallow is not True:
            return _clone_with_shallow(value, options)

        def child(item: Any) -> Any:
            return item
    else:
        if seen is None:
            seen = CycleTracker()
        elif value in seen:
            return seen.get(value)

        def child(item: Any) -> Any:
            return _clone(item, options, seen)

    if tag is TypeTag.BUFFER:
        return _clone_buffer(value)
    if tag is TypeTag.DATETIME:
        return _clone_datetime(value)
    if tag is TypeTag.PATTERN:
        return re.compile(value.pattern, value.flags)
    if tag is TypeTag.SEQUENCE:
        return _clone_sequence(value, options, seen, child)
    if tag in (TypeTag.UNIQUE, TypeTag.WEAK_UNIQUE):
        return _clone_unique(value, options, seen, child)
    if tag in (TypeTag.KEYED, TypeTag.WEAK_KEYED):
        return _clone_keyed(value, options, seen, child)
    return _clone_record(value, options, seen, child)


def _register(seen: Optional[CycleTracker], value: Any, target: Any) -> None:
    if seen is not None:
        seen.set(value, target)


def _template(value: Any, options: TraversalOptions) -> type:
    return type(value) if options.preserve_template else base_type(value)


def _clone_buffer(value: Any) -> Any:
    if isinstance(value, memoryview):
        return memoryview(bytearray(value))
    return type(value)(value)


def _clone_datetime(value: Any) -> Any:
    if isinstance(value, datetime.timedelta):
        return type(value)(days=value.days, seconds=value.seconds, microseconds=value.microseconds)
    return value.replace()


def _clone_sequence(value: Any, options: TraversalOptions, seen, child: Callable) -> Any:
    cls = _template(value, options)

    if not is_mutable_sequence(value):
        # tuple and named tuples
        items = [child(item) for item in value]
        if hasattr(cls, "_fields"):
            copy = cls._make(items)
        else:
            copy = cls(items)
        _register(seen, value, copy)
        _copy_attributes(value, copy, child)
        return copy

    if issubclass(cls, collections.deque):
        copy = cls([], value.maxlen)
    elif issubclass(cls, list):
        copy = cls.__new__(cls)
    else:
        copy = cls()

    _register(seen, value, copy)
    for item in value:
        copy.append(child(item))
    _copy_attributes(value, copy, child)
    return copy


def _clone_unique(value: Any, options: TraversalOptions, seen, child: Callable) -> Any:
    cls = _template(value, options)

    if classify(value) is TypeTag.WEAK_UNIQUE:
        copy = cls()
        _register(seen, value, copy)
        for item in value:
            copy.add(item)
        return copy

    if not is_mutable_set(value):
        copy = cls(child(item) for item in value)
        _register(seen, value, copy)
        _copy_attributes(value, copy, child)
        return copy

    copy = cls()
    _register(seen, value, copy)
    for item in value:
        copy.add(child(item))
    _copy_attributes(value, copy, child)
    return copy


def _clone_keyed(value: Any, options: TraversalOptions, seen, child: Callable) -> Any:
    cls = _template(value, options)

    if isinstance(value, weakref.WeakValueDictionary):
        copy = cls()
        _register(seen, value, copy)
        for key, item in value.items():
            copy[key] = item
        return copy

    if not is_mutable_mapping(value):
        # Read-only views are rebuilt around a cloned plain mapping
        copy = cls({key: child(item) for key, item in value.items()})
        _register(seen, value, copy)
        return copy

    copy = cls()
    _register(seen, value, copy)
    for key, item in list(value.items()):
        copy[key] = child(item)
    return copy


def _copy_attributes(value: Any, copy: Any, child: Callable) -> None:
    if type(copy) is not type(value):
        return
    for name, item in list(container_attributes(value).items()):
        object.__setattr__(copy, name, child(item))


def _new_instance(cls: type) -> Any:
    if cls.__new__ is object.__new__:
        return object.__new__(cls)
    return cls.__new__(cls)


def _clone_record(value: Any, options: TraversalOptions, seen, child: Callable) -> Any:
    dict_based = is_dict_record(value)

    if options.preserve_template:
        if is_immutable(value):
            return value

        cls = type(value)
        copy = _new_instance(cls)
        if issubclass(cls, collections.defaultdict):
            copy.default_factory = value.default_factory
    elif dict_based:
        copy = {}
    else:
        copy = types.SimpleNamespace()

    _register(seen, value, copy)
    for key in own_keys(value, options.include_symbols):
        store_own(copy, key, child(get_own(value, key)))
    _copy_attributes(value, copy, child)
    return copy


def _clone_with_shallow(value: Any, options: TraversalOptions) -> Any:
    paths = options.shallow
    if not isinstance(paths, (list, tuple)):
        raise InvalidArgumentError("Invalid shallow keys: must be True or a list of key paths")
    inner = options.replace(shallow=False)

    with detached(value, paths) as storage:
        copy = _clone(value, inner, None)
    restore(copy, storage)
    return copy
