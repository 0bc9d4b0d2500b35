"""
Structural Type Classification

Every value entering the traversal engine is resolved once to a TypeTag.
The tag decides how the value is cloned, compared, merged and searched.

CLASSIFICATION RULE:
    The tag comes from type(value).__mro__ matched against a closed table
    of builtin bases. type() cannot be forged, so an object overriding
    __class__ (which fools isinstance) still classifies by what it really
    is. Classes outside the table fall back to the collections.abc
    interfaces they inherit, then to their attribute storage.

Also defines:
    - Symbol: unique key token, the only "symbol-keyed" property type
    - own-key helpers: uniform key access over dicts, keyed containers,
      sequences and attribute records
"""

from __future__ import annotations

import collections
import dataclasses
import datetime
import functools
import re
import types
import weakref
from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Set
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, List, Tuple


class Symbol:
    """
    A unique key token.

    Two symbols are only ever equal to themselves, whatever their
    description. Dict keys that are Symbol instances are treated as
    symbol-keyed properties and can be excluded from traversal with
    include_symbols=False.

    Example:
        META = Symbol("meta")
        record = {"name": "a", META: {"source": "cache"}}
    """

    __slots__ = ("description",)

    def __init__(self, description: str | None = None):
        self.description = description

    def __repr__(self) -> str:
        if self.description is None:
            return "Symbol()"
        return f"Symbol({self.description})"


class TypeTag(Enum):
    """Closed set of traversal strategies."""

    RECORD = "record"
    SEQUENCE = "sequence"
    KEYED = "keyed"
    UNIQUE = "unique"
    WEAK_KEYED = "weak_keyed"
    WEAK_UNIQUE = "weak_unique"
    DATETIME = "datetime"
    PATTERN = "pattern"
    BUFFER = "buffer"
    PRIMITIVE = "primitive"


_BASE_TAGS: Dict[type, TypeTag] = {
    # Scalars and opaque callables
    type(None): TypeTag.PRIMITIVE,
    bool: TypeTag.PRIMITIVE,
    int: TypeTag.PRIMITIVE,
    float: TypeTag.PRIMITIVE,
    complex: TypeTag.PRIMITIVE,
    str: TypeTag.PRIMITIVE,
    Decimal: TypeTag.PRIMITIVE,
    Fraction: TypeTag.PRIMITIVE,
    Enum: TypeTag.PRIMITIVE,
    range: TypeTag.PRIMITIVE,
    slice: TypeTag.PRIMITIVE,
    type: TypeTag.PRIMITIVE,
    types.FunctionType: TypeTag.PRIMITIVE,
    types.BuiltinFunctionType: TypeTag.PRIMITIVE,
    types.MethodType: TypeTag.PRIMITIVE,
    types.ModuleType: TypeTag.PRIMITIVE,
    functools.partial: TypeTag.PRIMITIVE,
    property: TypeTag.PRIMITIVE,
    staticmethod: TypeTag.PRIMITIVE,
    classmethod: TypeTag.PRIMITIVE,
    BaseException: TypeTag.PRIMITIVE,
    Symbol: TypeTag.PRIMITIVE,
    # Byte buffers
    bytes: TypeTag.BUFFER,
    bytearray: TypeTag.BUFFER,
    memoryview: TypeTag.BUFFER,
    # Date/time values
    datetime.datetime: TypeTag.DATETIME,
    datetime.date: TypeTag.DATETIME,
    datetime.time: TypeTag.DATETIME,
    datetime.timedelta: TypeTag.DATETIME,
    # Patterns
    re.Pattern: TypeTag.PATTERN,
    # Containers
    list: TypeTag.SEQUENCE,
    tuple: TypeTag.SEQUENCE,
    collections.deque: TypeTag.SEQUENCE,
    dict: TypeTag.RECORD,
    set: TypeTag.UNIQUE,
    frozenset: TypeTag.UNIQUE,
    weakref.WeakKeyDictionary: TypeTag.WEAK_KEYED,
    weakref.WeakValueDictionary: TypeTag.WEAK_KEYED,
    weakref.WeakSet: TypeTag.WEAK_UNIQUE,
}


@functools.lru_cache(maxsize=512)
def _resolve(cls: type) -> Tuple[TypeTag, type]:
    for base in cls.__mro__:
        tag = _BASE_TAGS.get(base)
        if tag is not None:
            return tag, base

    if issubclass(cls, Mapping):
        return TypeTag.KEYED, cls
    if issubclass(cls, Set):
        return TypeTag.UNIQUE, cls
    if issubclass(cls, MutableSequence):
        return TypeTag.SEQUENCE, cls

    # Callable objects are passed through like functions
    if "__call__" in _class_attributes(cls):
        return TypeTag.PRIMITIVE, cls

    if _has_instance_dict(cls) or _slot_names(cls):
        return TypeTag.RECORD, object

    return TypeTag.PRIMITIVE, cls


def _class_attributes(cls: type) -> set:
    names = set()
    for base in cls.__mro__[:-1]:
        names.update(vars(base))
    return names


def _has_instance_dict(cls: type) -> bool:
    if getattr(cls, "__dictoffset__", 0):
        return True
    return any("__dict__" in vars(base) for base in cls.__mro__[:-1])


@functools.lru_cache(maxsize=512)
def _slot_names(cls: type) -> Tuple[str, ...]:
    names: List[str] = []
    for base in cls.__mro__:
        slots = vars(base).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{base.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return tuple(names)


def classify(value: Any) -> TypeTag:
    """
    Return the structural type tag of a value.

    Args:
        value: Any Python value

    Returns:
        TypeTag deciding the traversal strategy
    """
    return _resolve(type(value))[0]


def base_type(value: Any) -> type:
    """
    Return the builtin base a value was classified by.

    Attribute records share the base `object`, so two instances of
    different classes with the same attributes have the same base type.
    """
    return _resolve(type(value))[1]


def is_symbol(key: Any) -> bool:
    return type(key) is Symbol


def is_dict_record(value: Any) -> bool:
    """True for dict-backed records (dict and its subclasses)."""
    return base_type(value) is dict


def is_mutable_sequence(value: Any) -> bool:
    return issubclass(type(value), MutableSequence)


def is_immutable(value: Any) -> bool:
    """
    True when the value's class declares the immutability capability.

    A class declares it either with an `is_immutable = True` class
    attribute or by being a frozen dataclass.
    """
    cls = type(value)
    if getattr(cls, "is_immutable", False) is True:
        return True
    if dataclasses.is_dataclass(cls):
        params = getattr(cls, "__dataclass_params__", None)
        return bool(params is not None and params.frozen)
    return False


# =============================================================================
# OWN-KEY ACCESS
# =============================================================================

_MISSING = object()


def _is_mapping_like(value: Any) -> bool:
    tag, base = _resolve(type(value))
    return tag in (TypeTag.KEYED, TypeTag.WEAK_KEYED) or base is dict


def _populated_slots(value: Any) -> List[str]:
    names = []
    for name in _slot_names(type(value)):
        try:
            object.__getattribute__(value, name)
        except AttributeError:
            continue
        names.append(name)
    return names


def own_keys(value: Any, include_symbols: bool = True) -> List[Any]:
    """
    List the own keys of a structured value.

    Returns:
        - dicts and keyed containers: their keys
        - attribute records: instance attributes then populated slots
        - sequences: their indices
        - anything else: []
    """
    tag = classify(value)
    if _is_mapping_like(value):
        keys = list(value.keys())
    elif tag is TypeTag.RECORD:
        keys = list(vars(value)) if _has_instance_dict(type(value)) else []
        keys.extend(name for name in _populated_slots(value) if name not in keys)
    elif tag is TypeTag.SEQUENCE:
        keys = list(range(len(value)))
    else:
        return []

    if not include_symbols:
        keys = [key for key in keys if not is_symbol(key)]
    return keys


def has_own(value: Any, key: Any) -> bool:
    return get_own(value, key, _MISSING) is not _MISSING


def get_own(value: Any, key: Any, default: Any = None) -> Any:
    """
    Read an own property without invoking class-level accessors.

    Attribute records are read from their instance storage, so a
    property defined on the class is never evaluated.
    """
    tag = classify(value)
    if _is_mapping_like(value):
        try:
            return value[key] if key in value else default
        except TypeError:
            # Unhashable key
            return default

    if tag is TypeTag.RECORD:
        if _has_instance_dict(type(value)):
            storage = vars(value)
            if key in storage:
                return storage[key]
        if isinstance(key, str) and key in _slot_names(type(value)):
            try:
                return object.__getattribute__(value, key)
            except AttributeError:
                return default
        return default

    if tag is TypeTag.SEQUENCE:
        if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(value):
            return value[key]
        return default

    return default


def set_own(value: Any, key: Any, item: Any) -> None:
    """
    Assign an own property.

    Mappings and sequences use item assignment, attribute records use
    setattr() so frozen or validating classes keep their guarantees.
    """
    if _is_mapping_like(value) or classify(value) is TypeTag.SEQUENCE:
        value[key] = item
    else:
        setattr(value, key, item)


def store_own(value: Any, key: Any, item: Any) -> None:
    """Write an own property, bypassing any __setattr__ on attribute records."""
    if _is_mapping_like(value) or classify(value) is TypeTag.SEQUENCE:
        value[key] = item
    else:
        object.__setattr__(value, key, item)


_BUILTIN_CONTAINERS = (list, tuple, collections.deque, dict, set, frozenset)


def container_attributes(value: Any) -> Dict[str, Any]:
    """
    Instance attributes of a builtin container subclass.

    A list, tuple, deque, dict or set subclass keeps its items in builtin
    storage, so its instance __dict__ holds only attributes assigned on
    top (e.g. a tagged list). Anything else returns {}.
    """
    cls = type(value)
    if cls in _BUILTIN_CONTAINERS or base_type(value) not in _BUILTIN_CONTAINERS:
        return {}
    if not _has_instance_dict(cls):
        return {}
    return vars(value)


def is_mutable_mapping(value: Any) -> bool:
    return issubclass(type(value), MutableMapping)


def is_mutable_set(value: Any) -> bool:
    return issubclass(type(value), MutableSet)
