"""
Tests for ValueWrapper arithmetic and coercion.
"""

import pytest

from smartscript.engine import (
    DivisionByZeroError,
    InvalidOperandError,
    NumberFormatError,
    ValueWrapper,
    to_number,
)


class TestCoercion:

    @pytest.mark.parametrize("raw,expected", [
        (None, 0),
        (5, 5),
        (2.5, 2.5),
        ("12", 12),
        ("-3", -3),
        ("1.5", 1.5),
        ("1e3", 1000.0),
        ("2E-1", 0.2),
    ])
    def test_to_number(self, raw, expected):
        result = to_number(raw)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.parametrize("raw", ["abc", "", "1.2.3", "12a", "1_000"])
    def test_bad_strings(self, raw):
        with pytest.raises(NumberFormatError):
            to_number(raw)

    @pytest.mark.parametrize("raw", [True, [1], object()])
    def test_unsupported_types(self, raw):
        with pytest.raises(InvalidOperandError):
            to_number(raw)


class TestArithmetic:

    def test_integer_addition_stays_int(self):
        w = ValueWrapper(1)
        w.add(2)
        assert w.value == 3
        assert isinstance(w.value, int)

    def test_mixed_promotes_to_float(self):
        w = ValueWrapper(1)
        w.add(2.0)
        assert w.value == 3.0
        assert isinstance(w.value, float)

    def test_none_is_zero(self):
        w = ValueWrapper(None)
        w.add(None)
        assert w.value == 0
        assert isinstance(w.value, int)

    def test_string_operands(self):
        w = ValueWrapper("1.5")
        w.multiply("2")
        assert w.value == 3.0

    def test_subtract(self):
        w = ValueWrapper(10)
        w.subtract(4)
        assert w.value == 6

    def test_integer_division_truncates_toward_zero(self):
        w = ValueWrapper(-7)
        w.divide(2)
        assert w.value == -3

        w = ValueWrapper(7)
        w.divide(2)
        assert w.value == 3

    def test_float_division(self):
        w = ValueWrapper(7)
        w.divide(2.0)
        assert w.value == 3.5

    @pytest.mark.parametrize("divisor", [0, 0.0, "0", 1e-7, None])
    def test_division_by_zero(self, divisor):
        w = ValueWrapper(1)
        with pytest.raises(DivisionByZeroError):
            w.divide(divisor)
        assert w.value == 1

    def test_bad_operand_leaves_value(self):
        w = ValueWrapper(1)
        with pytest.raises(NumberFormatError):
            w.add("x")
        assert w.value == 1


class TestCompareAndDisplay:

    @pytest.mark.parametrize("left,right,expected", [
        (1, 2, -1),
        (2, 2, 0),
        (3, 2, 1),
        ("1.5", 1, 1),
        (None, 0, 0),
        (2, 2.0, 0),
    ])
    def test_num_compare(self, left, right, expected):
        assert ValueWrapper(left).num_compare(right) == expected

    def test_str(self):
        assert str(ValueWrapper(None)) == "null"
        assert str(ValueWrapper(3)) == "3"
        assert str(ValueWrapper(3.0)) == "3.0"
        assert str(ValueWrapper("abc")) == "abc"

    def test_equality_is_type_aware(self):
        assert ValueWrapper(1) == ValueWrapper(1)
        assert ValueWrapper(1) != ValueWrapper(1.0)
        assert ValueWrapper("1") != ValueWrapper(1)

    def test_copy_is_independent(self):
        original = ValueWrapper(1)
        duplicate = original.copy()
        duplicate.add(1)
        assert original.value == 1
        assert duplicate.value == 2
