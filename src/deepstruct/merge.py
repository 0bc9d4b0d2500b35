"""
Merge Engine

merge(target, source):
    Combines source into target in place, source wins on conflict.
    Sequences are always extended by append (merge_arrays=False empties
    the target first), never overwritten by position.

apply_to_defaults(defaults, source):
    Returns a fresh copy of defaults with source merged over it. Source
    sequences replace default sequences, and None in source leaves the
    default in place unless null_override=True is requested.

Neither operation changes the structure of source. The shallow variant
of apply_to_defaults detaches the listed paths from source for the
duration of the merge and always puts them back.
"""

from __future__ import annotations

from typing import Any

from .clone import clone
from .errors import InvalidArgumentError
from .kinds import (
    TypeTag,
    classify,
    get_own,
    is_immutable,
    is_mutable_sequence,
    own_keys,
    set_own,
)
from .options import TraversalOptions
from .paths import detached, restore

# Keys that would rebind the target's class or instance storage
_TEMPLATE_KEYS = ("__class__", "__dict__")

_MISSING = object()


def merge(target: Any, source: Any, options: Any = None, **overrides: Any) -> Any:
    """
    Merge source into target in place.

    Args:
        target: Record or mutable sequence receiving the values
        source: Record, sequence or None
        options: TraversalOptions or dict (merge_arrays, null_override,
            include_symbols are used; null_override defaults to True)
        overrides: Keyword overrides for options

    Returns:
        target

    Raises:
        InvalidArgumentError: target/source of the wrong shape, or a
            sequence source merged onto a non-sequence target

    Example:
        merge({"a": [1], "x": 1}, {"a": [2], "x": None})
        # {"a": [1, 2], "x": None}
    """
    options = TraversalOptions.build(options, **overrides)
    if options.null_override is None:
        options = options.replace(null_override=True)
    return _merge(target, source, options)


def _merge(target: Any, source: Any, options: TraversalOptions) -> Any:
    target_tag = classify(target)
    if target_tag not in (TypeTag.RECORD, TypeTag.SEQUENCE):
        raise InvalidArgumentError("Invalid target value: must be a record or a sequence")

    if source is None:
        return target

    source_tag = classify(source)
    if source_tag not in (TypeTag.RECORD, TypeTag.SEQUENCE):
        raise InvalidArgumentError("Invalid source value: must be None, a record or a sequence")

    if source_tag is TypeTag.SEQUENCE:
        if not is_mutable_sequence(target):
            raise InvalidArgumentError("Cannot merge a sequence onto a record or an immutable sequence")

        # Snapshot first: target and source may be the same list
        items = list(source)
        if not options.merge_arrays:
            target.clear()
        for item in items:
            target.append(clone(item, include_symbols=options.include_symbols))
        return target

    if target_tag is not TypeTag.RECORD:
        raise InvalidArgumentError("Cannot merge a record onto a sequence")

    for key in own_keys(source, options.include_symbols):
        if isinstance(key, str) and key in _TEMPLATE_KEYS:
            continue

        value = get_own(source, key)
        if classify(value) is not TypeTag.PRIMITIVE:
            existing = get_own(target, key, _MISSING)
            if _can_recurse(existing, value):
                _merge(existing, value, options)
            else:
                set_own(target, key, clone(value, include_symbols=options.include_symbols))
        elif value is not None or options.null_override:
            # Explicit None check so that empty strings and zeros still apply
            set_own(target, key, value)

    return target


def _can_recurse(existing: Any, value: Any) -> bool:
    """
    True when the target slot can absorb value in place.

    Date/time values, buffers, patterns and the set and mapping container
    kinds are always replaced wholesale.
    """
    if existing is _MISSING or existing is None:
        return False

    tag = classify(value)
    existing_tag = classify(existing)
    if tag is TypeTag.RECORD:
        return existing_tag is TypeTag.RECORD and not is_immutable(existing)
    if tag is TypeTag.SEQUENCE:
        return existing_tag is TypeTag.SEQUENCE and is_mutable_sequence(existing)
    return False


def _is_falsy(value: Any) -> bool:
    return classify(value) is TypeTag.PRIMITIVE and not value


def apply_to_defaults(defaults: Any, source: Any, options: Any = None, **overrides: Any) -> Any:
    """
    Apply source to a copy of defaults.

    Args:
        defaults: Record (or sequence) of default values, never modified
        source: Falsy, True, or a record of overrides
        options: TraversalOptions or dict (shallow, null_override,
            include_symbols are used; null_override defaults to False)
        overrides: Keyword overrides for options

    Returns:
        None for a falsy source, a copy of defaults for True, otherwise a
        copy of defaults with source merged over it

    Raises:
        InvalidArgumentError: defaults or source of the wrong shape, or
            shallow given as anything but a list of key paths

    Example:
        apply_to_defaults({"x": 1, "y": 2}, {"x": None, "y": 3})
        # {"x": 1, "y": 3}
    """
    options = TraversalOptions.build(options, **overrides)

    if classify(defaults) not in (TypeTag.RECORD, TypeTag.SEQUENCE):
        raise InvalidArgumentError("Invalid defaults value: must be a record or a sequence")

    if not (source is True or _is_falsy(source) or classify(source) in (TypeTag.RECORD, TypeTag.SEQUENCE)):
        raise InvalidArgumentError("Invalid source value: must be True, falsy or a record")

    if _is_falsy(source):
        return None

    merge_options = options.replace(
        shallow=False,
        merge_arrays=False,
        null_override=bool(options.null_override),
    )

    if options.shallow:
        return _apply_to_defaults_with_shallow(defaults, source, options.shallow, merge_options)

    copy = clone(defaults, include_symbols=options.include_symbols)
    if source is True:
        return copy

    return _merge(copy, source, merge_options)


def _apply_to_defaults_with_shallow(defaults: Any, source: Any, paths: Any, options: TraversalOptions) -> Any:
    if not isinstance(paths, (list, tuple)):
        raise InvalidArgumentError("Invalid keys: shallow must be a list of key paths")

    copy = clone(defaults, shallow=list(paths), include_symbols=options.include_symbols)
    if source is True:
        return copy

    with detached(source, paths) as storage:
        _merge(copy, source, options)
    restore(copy, storage)
    return copy
