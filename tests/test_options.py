"""
Tests for per-call option records.
"""

import pytest
from deepstruct.errors import InvalidArgumentError
from deepstruct.options import ComparisonFlags, ContainOptions, TraversalOptions


class TestTraversalOptions:
    """Test TraversalOptions construction."""

    def test_defaults(self):
        options = TraversalOptions.build()
        assert options.shallow is False
        assert options.preserve_template is True
        assert options.include_symbols is True
        assert options.merge_arrays is True
        assert options.null_override is None

    def test_overrides_win(self):
        """Keyword overrides replace values from the base record."""
        base = TraversalOptions(merge_arrays=False, include_symbols=False)
        options = TraversalOptions.build(base, merge_arrays=True)
        assert options.merge_arrays is True
        assert options.include_symbols is False
        assert base.merge_arrays is False

    def test_from_dict(self):
        options = TraversalOptions.build({"shallow": ["a.b"]})
        assert options.shallow == ["a.b"]

    def test_unknown_option(self):
        with pytest.raises(InvalidArgumentError, match="symbols"):
            TraversalOptions.build(symbols=False)

    def test_invalid_options_type(self):
        with pytest.raises(InvalidArgumentError):
            TraversalOptions.build("shallow")


class TestContainOptions:
    """Test derivation of deep comparison flags."""

    def test_no_only_no_part(self):
        flags = ContainOptions().comparison_flags()
        assert flags == ComparisonFlags(template_strict=False, partial=False)

    def test_only_wins(self):
        flags = ContainOptions(only=True, part=True).comparison_flags()
        assert flags.template_strict is True
        assert flags.partial is False

    def test_only_false(self):
        flags = ContainOptions(only=False).comparison_flags()
        assert flags.template_strict is False
        assert flags.partial is True

    def test_part(self):
        flags = ContainOptions(part=True).comparison_flags()
        assert flags.template_strict is False
        assert flags.partial is True

    def test_symbols_passed_down(self):
        flags = ContainOptions(include_symbols=False).comparison_flags()
        assert flags.include_symbols is False
