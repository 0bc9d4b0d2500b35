"""
Per-call configuration records.

Configuration is never global: every operation takes an optional options
record plus keyword overrides, and builds a fresh instance for the call.

    clone(value, shallow=["a.b"])
    clone(value, TraversalOptions(preserve_template=False))
    deep_equal(a, b, ComparisonFlags(partial=True), include_symbols=False)

Plain dicts are accepted in place of the dataclass instance.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import InvalidArgumentError

KeyPath = Union[str, Sequence[Any]]


def _build(cls, options: Any, overrides: Dict[str, Any]):
    if options is None:
        values: Dict[str, Any] = {}
    elif isinstance(options, cls):
        values = {f.name: getattr(options, f.name) for f in dataclasses.fields(cls)}
    elif isinstance(options, dict):
        values = dict(options)
    else:
        raise InvalidArgumentError(f"Invalid options: must be {cls.__name__}, dict or None, got {type(options).__name__}")

    values.update(overrides)
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidArgumentError(f"Unknown {cls.__name__} option(s): {', '.join(unknown)}")
    return cls(**values)


@dataclass
class TraversalOptions:
    """
    Options for clone, merge and apply_to_defaults.

    Properties:
        shallow:
            False for a full deep copy, True to duplicate only the top
            container, or a list of key-paths ("a.b" or ["a", "b"]) whose
            values are copied by reference
        preserve_template:
            Keep the source's class on the copy (default True)
        include_symbols:
            Visit Symbol-keyed properties (default True)
        merge_arrays:
            Append source sequences to target sequences instead of
            replacing them (default True)
        null_override:
            Whether None in the source overwrites the target. None means
            the operation default: True for merge, False for
            apply_to_defaults
    """

    shallow: Union[bool, List[KeyPath]] = False
    preserve_template: bool = True
    include_symbols: bool = True
    merge_arrays: bool = True
    null_override: Optional[bool] = None

    @classmethod
    def build(cls, options: Any = None, **overrides: Any) -> "TraversalOptions":
        return _build(cls, options, overrides)

    def replace(self, **changes: Any) -> "TraversalOptions":
        return dataclasses.replace(self, **changes)


@dataclass
class ComparisonFlags:
    """
    Governs one deep_equal invocation.

    Properties:
        template_strict: Both sides must have the exact same class
        partial: One side's key set may be a superset of the other's
        include_symbols: Compare Symbol-keyed properties
    """

    template_strict: bool = True
    partial: bool = False
    include_symbols: bool = True

    @classmethod
    def build(cls, options: Any = None, **overrides: Any) -> "ComparisonFlags":
        return _build(cls, options, overrides)


@dataclass
class ContainOptions:
    """
    Options for contain().

    only and part are tri-state: None means "not requested", which matters
    when deriving the deep comparison flags.
    """

    deep: bool = False
    once: bool = False
    only: Optional[bool] = None
    part: Optional[bool] = None
    include_symbols: bool = True

    @classmethod
    def build(cls, options: Any = None, **overrides: Any) -> "ContainOptions":
        return _build(cls, options, overrides)

    def comparison_flags(self) -> ComparisonFlags:
        """Derive deep comparison flags from only/part."""
        if self.only is not None:
            return ComparisonFlags(
                template_strict=bool(self.only),
                partial=not self.only,
                include_symbols=self.include_symbols,
            )
        if self.part is not None:
            return ComparisonFlags(
                template_strict=not self.part,
                partial=bool(self.part),
                include_symbols=self.include_symbols,
            )
        return ComparisonFlags(template_strict=False, partial=False, include_symbols=self.include_symbols)
