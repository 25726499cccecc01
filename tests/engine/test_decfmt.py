"""
Tests for decimal-pattern number formatting.
"""

import math

import pytest

from smartscript.engine import PatternError, format_decimal


class TestFormatDecimal:

    @pytest.mark.parametrize("value,pattern,expected", [
        (3.14159, "0.00", "3.14"),
        (0.5, "0.0", "0.5"),
        (2, "0.00", "2.00"),
        (1234567.891, "#,##0.00", "1,234,567.89"),
        (0.25, "#.##", ".25"),
        (0, "#.##", "0"),
        (7, "000", "007"),
        (1.5, "#", "2"),
        (2.5, "#", "2"),
        (0.125, "0.00", "0.12"),
        (-1.5, "0.0", "-1.5"),
        (-1.5, "0.0;(0.0)", "(1.5)"),
        (0.256, "0.0%", "25.6%"),
        (12.0, "'#'0", "#12"),
        (5, "0.", "5."),
        (12345, "0.00E0", "1.23E4"),
        (0.00012, "0.0E00", "1.2E-04"),
    ])
    def test_patterns(self, value, pattern, expected):
        assert format_decimal(value, pattern) == expected

    @pytest.mark.parametrize("value,pattern,expected", [
        (math.inf, "0.00", "∞"),
        (math.inf, "0.0%", "∞%"),
        (-math.inf, "0.0", "-∞"),
        (-math.inf, "0.0;(0.0)", "(∞)"),
        (math.nan, "'$'0.00", "NaN"),
    ])
    def test_non_finite(self, value, pattern, expected):
        """Бесконечность получает префикс и суффикс, NaN - нет"""
        assert format_decimal(value, pattern) == expected

    def test_huge_integer(self):
        value = 10 ** 1500
        assert format_decimal(value, "0.00") == "1" + "0" * 1500 + ".00"

    @pytest.mark.parametrize("pattern", [
        "",
        "abc",
        "0.0.0",
        "#,##0.0,0",
        "0E",
        "'0",
    ])
    def test_invalid_patterns(self, pattern):
        with pytest.raises(PatternError):
            format_decimal(1, pattern)
