"""
deepstruct: structural operations over Python object graphs.

    clone              deep copy, cycle safe, class preserving
    deep_equal         structural equivalence (strict or partial)
    merge              in-place recursive merge, source wins
    apply_to_defaults  defaults + overrides, on a fresh copy
    contain            substring / item / key / key-value containment

ARCHITECTURAL GUARANTEE:
------------------------
Every operation is synchronous and stateless between calls. Options are
passed per call; nothing is configured globally.

The only operations that touch their input are merge (which writes into
its target by contract) and the shallow-key variants of clone and
apply_to_defaults, which detach the listed paths from the source for the
duration of the call and always put them back.
"""

import logging

from .clone import clone
from .contain import MatchTally, contain, intersect
from .equality import deep_equal
from .errors import (
    DeepStructError,
    EmptyInputError,
    InvalidArgumentError,
    InvalidPathError,
    MissingPathError,
    TypeMismatchError,
    assert_,
)
from .escape import escape_header_attribute, escape_html, escape_json, escape_regex
from .helpers import Bench, block, flatten, ignore, once, stringify, wait
from .kinds import Symbol, TypeTag, classify
from .merge import apply_to_defaults, merge
from .options import ComparisonFlags, ContainOptions, TraversalOptions
from .paths import reach, reach_template

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Bench",
    "ComparisonFlags",
    "ContainOptions",
    "DeepStructError",
    "EmptyInputError",
    "InvalidArgumentError",
    "InvalidPathError",
    "MatchTally",
    "MissingPathError",
    "Symbol",
    "TraversalOptions",
    "TypeMismatchError",
    "TypeTag",
    "apply_to_defaults",
    "assert_",
    "block",
    "classify",
    "clone",
    "contain",
    "deep_equal",
    "escape_header_attribute",
    "escape_html",
    "escape_json",
    "escape_regex",
    "flatten",
    "ignore",
    "intersect",
    "merge",
    "once",
    "reach",
    "reach_template",
    "stringify",
    "wait",
]
