"""Unit tests for numeric normalization helpers."""
import math

import pytest
from app.services.normalizer import clamp, normalize_percent, parse_number, rescale, to_number


class TestToNumber:
    """Test to_number coercion."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$1,200.50", 1200.5),
            (" 42 ", 42.0),
            ("€3.5", 3.5),
            ("12abc", 12.0),
            (7, 7.0),
            (0.43, 0.43),
            ("-5", -5.0),
        ],
    )
    def test_parses_numbers_and_numeric_strings(self, raw, expected):
        """Test numbers and currency-formatted strings are parsed."""
        assert to_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "raw",
        [None, "abc", "", float("nan"), float("inf"), "1e999", "NaN", True, [], {}],
    )
    def test_unusable_input_becomes_zero(self, raw):
        """Test malformed or non-finite input degrades to zero."""
        result = to_number(raw)
        assert result == 0.0
        assert math.isfinite(result)

    def test_parse_number_distinguishes_absent(self):
        """Test parse_number returns None where to_number falls back to zero."""
        assert parse_number(None) is None
        assert parse_number("abc") is None
        assert parse_number(0) == 0.0
        assert parse_number("0") == 0.0


class TestNormalizePercent:
    """Test dual-representation percent handling."""

    def test_fraction_is_scaled(self):
        assert normalize_percent(0.43) == pytest.approx(43)

    def test_percentage_is_unchanged(self):
        assert normalize_percent(43) == 43

    def test_boundaries_are_read_as_fractions(self):
        """Test 0 stays 0 and 1 is read as 100%, not 1%."""
        assert normalize_percent(0) == 0
        assert normalize_percent(1) == 100

    @pytest.mark.parametrize("value", [1.5, 43, 99.9, 250])
    def test_idempotent_above_one(self, value):
        once = normalize_percent(value)
        assert normalize_percent(once) == once

    def test_negative_values_pass_through(self):
        assert normalize_percent(-0.5) == -0.5

    def test_non_finite_becomes_zero(self):
        assert normalize_percent(float("nan")) == 0.0


class TestClampAndRescale:
    """Test bounding helpers."""

    def test_clamp_defaults(self):
        assert clamp(-10) == 0
        assert clamp(150) == 100
        assert clamp(42.5) == 42.5

    def test_clamp_custom_bounds(self):
        assert clamp(5, lo=1, hi=3) == 3

    def test_rescale_maps_range(self):
        assert rescale(-0.2, -0.2, 0.2) == 0
        assert rescale(0.0, -0.2, 0.2) == pytest.approx(50)
        assert rescale(0.2, -0.2, 0.2) == pytest.approx(100)
        assert rescale(5.0, 0.5, 3.0) == 100
