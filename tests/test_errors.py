"""
Tests for the error taxonomy and assert_.
"""

import pytest
from deepstruct.errors import (
    DeepStructError,
    EmptyInputError,
    InvalidArgumentError,
    InvalidPathError,
    MissingPathError,
    TypeMismatchError,
    assert_,
)


class TestHierarchy:
    """Errors are catchable as DeepStructError and as the closest builtin."""

    def test_builtin_bases(self):
        assert issubclass(InvalidArgumentError, ValueError)
        assert issubclass(EmptyInputError, ValueError)
        assert issubclass(TypeMismatchError, TypeError)
        assert issubclass(MissingPathError, KeyError)
        assert issubclass(InvalidPathError, TypeError)

    def test_common_base(self):
        for error in (InvalidArgumentError, EmptyInputError, TypeMismatchError, MissingPathError, InvalidPathError):
            assert issubclass(error, DeepStructError)

    def test_missing_path_message_not_quoted(self):
        """KeyError normally repr()s its message."""
        assert str(MissingPathError("Missing segment", "b")) == "Missing segment b"


class TestAssert:
    """Test assert_."""

    def test_passes(self):
        assert assert_(True, "never") is None

    def test_message_parts(self):
        with pytest.raises(DeepStructError, match=r'^Bad value \{"a": 1\}$'):
            assert_(False, "Bad", "value", {"a": 1})

    def test_empty_parts(self):
        with pytest.raises(DeepStructError, match="^Unknown error$"):
            assert_(0)

    def test_empty_strings_dropped(self):
        with pytest.raises(DeepStructError, match="^a b$"):
            assert_(None, "a", "", "b")

    def test_error_part(self):
        with pytest.raises(DeepStructError, match="^Failed: boom$"):
            assert_(False, "Failed:", ValueError("boom"))

    def test_single_error_reraised(self):
        error = KeyError("custom")
        with pytest.raises(KeyError) as info:
            assert_(False, error)
        assert info.value is error

    def test_unencodable_part(self):
        with pytest.raises(DeepStructError, match="object at"):
            assert_(False, object())
