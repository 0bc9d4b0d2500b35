"""
Error taxonomy for deepstruct.

Every error here is a precondition or contract violation. They are raised
synchronously at the point of violation and never swallowed: none of the
operations perform I/O, so there is nothing to retry.

Hierarchy:
    DeepStructError
        InvalidArgumentError   target/source/defaults of the wrong shape
        EmptyInputError        containment called with no values
        TypeMismatchError      containment reference/value kinds disagree
        MissingPathError       strict path walk hit an absent segment
        InvalidPathError       strict path walk went through a non-traversable value

The concrete errors also derive from the closest builtin exception so that
callers can catch them as ValueError / TypeError / KeyError.
"""

from __future__ import annotations

import json
from typing import Any


class DeepStructError(Exception):
    """Base class for all deepstruct errors."""

    def __init__(self, *args: Any):
        super().__init__(_format_message(args))


class InvalidArgumentError(DeepStructError, ValueError):
    """Raised when an argument does not have the required shape."""
    pass


class EmptyInputError(DeepStructError, ValueError):
    """Raised when a containment check is given an empty values set."""
    pass


class TypeMismatchError(DeepStructError, TypeError):
    """Raised when a containment reference and its values cannot be compared."""
    pass


class MissingPathError(DeepStructError, KeyError):
    """Raised by strict path walks when a required segment is absent."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return Exception.__str__(self)


class InvalidPathError(DeepStructError, TypeError):
    """Raised by strict path walks that traverse a non-traversable value."""
    pass


def _format_message(args) -> str:
    parts = []
    for arg in args:
        if arg == "":
            continue
        if isinstance(arg, str):
            parts.append(arg)
        elif isinstance(arg, BaseException):
            parts.append(str(arg))
        else:
            try:
                parts.append(json.dumps(arg))
            except (TypeError, ValueError):
                parts.append(repr(arg))
    return " ".join(parts) or "Unknown error"


def assert_(condition: Any, *args: Any) -> None:
    """
    Raise DeepStructError unless condition is truthy.

    Args:
        condition: Value tested for truthiness
        args: Message parts. Strings are used as-is, exceptions contribute
            their message, anything else is JSON-encoded (repr() fallback).
            A single exception instance is raised unchanged.

    Raises:
        DeepStructError (or the exception passed as the only argument)
    """
    if condition:
        return

    if len(args) == 1 and isinstance(args[0], BaseException):
        raise args[0]

    raise DeepStructError(*args)
