"""
Decimal engine test suite: std_numeric() normalization, exact powers, division,
rounding modes and narrowing back to float.
"""

import math
from decimal import Decimal
from fractions import Fraction

import pytest

# Local ----------------------------------------------------------------------------------------------------------------

from hsize.numeric import (
    NumericConf, RoundingMethod, decimal_divide, decimal_multiply, decimal_power, decimal_powers,
    decimal_round, decimal_round_integer, decimal_to_float, std_numeric, to_decimal,
)


class TestStdNumericBasicTypes:
    """Test standard Python numeric types (int, float, None)."""

    @pytest.mark.parametrize(
        "value, expected, expected_type",
        [
            pytest.param(42, 42, int, id="int"),
            pytest.param(3.25, 3.25, float, id="float"),
            pytest.param(None, None, type(None), id="none"),
            pytest.param(10 ** 400, 10 ** 400, int, id="huge-int"),
            pytest.param(-123, -123, int, id="negative-int"),
        ],
    )
    def test_preserve_value_type(self, value, expected, expected_type):
        """Preserve values and types for supported numerics and None."""
        res = std_numeric(value)
        assert res == expected
        assert isinstance(res, expected_type)

    def test_special_floats_preserved(self):
        assert math.isinf(std_numeric(float("inf")))
        assert math.isnan(std_numeric(float("nan")))


class TestStdNumericDecimalFraction:

    @pytest.mark.parametrize(
        "val, expected, expected_type",
        [
            pytest.param(Decimal("42.0"), 42, int, id="decimal-integral"),
            pytest.param(Decimal("3.5"), 3.5, float, id="decimal-fractional"),
            pytest.param(Fraction(10, 2), 5, int, id="fraction-integral"),
            pytest.param(Fraction(1, 4), 0.25, float, id="fraction-fractional"),
            pytest.param(Decimal(10) ** 30, 10 ** 30, int, id="decimal-huge"),
        ],
    )
    def test_convert(self, val, expected, expected_type):
        res = std_numeric(val)
        assert res == expected
        assert isinstance(res, expected_type)


class TestStdNumericDuckTypes:

    def test_index(self):
        class Index:
            def __index__(self):
                return 7

        assert std_numeric(Index()) == 7

    def test_item(self):
        class Scalar:
            def item(self):
                return 2.5

        assert std_numeric(Scalar()) == 2.5

    def test_float(self):
        class Floaty:
            def __float__(self):
                return 1.25

        assert std_numeric(Floaty()) == 1.25


class TestStdNumericErrors:

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param("42", id="str"),
            pytest.param(b"42", id="bytes"),
            pytest.param([1], id="list"),
            pytest.param(True, id="bool"),
        ],
    )
    def test_modes(self, value):
        with pytest.raises(TypeError):
            std_numeric(value)
        assert math.isnan(std_numeric(value, on_error="nan"))
        assert std_numeric(value, on_error="none") is None

    def test_allow_bool(self):
        assert std_numeric(True, allow_bool=True) == 1


class TestToDecimal:

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(0.1, Decimal("0.1"), id="float-shortest-repr"),
            pytest.param(1536, Decimal(1536), id="int"),
            pytest.param(" 1.5 ", Decimal("1.5"), id="str"),
            pytest.param(Decimal("2.25"), Decimal("2.25"), id="decimal"),
            pytest.param(2 ** 80, Decimal(2 ** 80), id="big-int-exact"),
        ],
    )
    def test_convert(self, value, expected):
        assert to_decimal(value) == expected

    def test_non_finite_float(self):
        assert to_decimal(float("inf")).is_infinite()
        assert to_decimal(float("nan")).is_nan()

    def test_invalid_str(self):
        with pytest.raises(ValueError, match="not a decimal number"):
            to_decimal("1 KiB")

    @pytest.mark.parametrize("value", [True, None, [1]])
    def test_invalid_type(self, value):
        with pytest.raises(TypeError):
            to_decimal(value)


class TestDecimalPower:

    @pytest.mark.parametrize(
        "base, exponent, expected",
        [
            pytest.param(1024, 0, 1, id="1024^0"),
            pytest.param(1024, 3, 1024 ** 3, id="1024^3"),
            pytest.param(1000, 8, 10 ** 24, id="1000^8"),
            pytest.param(1024, 8, 1024 ** 8, id="1024^8-exact"),
            pytest.param(7, 3, 343, id="uncached-base"),
        ],
    )
    def test_exact(self, base, exponent, expected):
        assert decimal_power(base, exponent) == Decimal(expected)

    def test_powers_table(self):
        powers = decimal_powers(1000)
        assert len(powers) == NumericConf.MAX_EXPONENT + 1
        assert powers[0] == 1
        assert powers[-1] == Decimal(10) ** 24


class TestDecimalArithmetic:

    def test_multiply_exact(self):
        assert decimal_multiply(Decimal("1.5"), decimal_power(1024, 3)) == Decimal(1610612736)

    def test_divide(self):
        assert decimal_divide(Decimal(1536), Decimal(1024)) == Decimal("1.5")

    def test_divide_by_zero_is_nan(self):
        assert decimal_divide(Decimal(1), Decimal(0)).is_nan()

    def test_big_int_division_stays_exact(self):
        value = Decimal(2 ** 80 + 1)
        assert decimal_multiply(decimal_divide(value, Decimal(1)), Decimal(1)) == value


class TestDecimalRound:

    @pytest.mark.parametrize(
        "value, decimals, method, expected",
        [
            pytest.param("1.5", 0, "round", "2", id="round-half-up"),
            pytest.param("2.5", 0, "round", "3", id="round-half-up-even-base"),
            pytest.param("-1.5", 0, "round", "-1", id="round-negative-half-toward-zero"),
            pytest.param("-2.5", 0, "round", "-2", id="round-negative-half-toward-zero-2"),
            pytest.param("-1.6", 0, "round", "-2", id="round-negative-above-half"),
            pytest.param("1.005", 2, "round", "1.01", id="round-exact-decimal-tie"),
            pytest.param("1.46", 0, "floor", "1", id="floor"),
            pytest.param("-1.46", 0, "floor", "-2", id="floor-negative"),
            pytest.param("1.46", 0, "ceil", "2", id="ceil"),
            pytest.param("-1.46", 0, "ceil", "-1", id="ceil-negative"),
            pytest.param("1.99", 0, "trunc", "1", id="trunc"),
            pytest.param("-1.99", 0, "trunc", "-1", id="trunc-negative"),
            pytest.param("1.23456", 3, RoundingMethod.ROUND, "1.235", id="three-places"),
        ],
    )
    def test_methods(self, value, decimals, method, expected):
        assert decimal_round(Decimal(value), decimals, method) == Decimal(expected)

    def test_keeps_requested_places(self):
        assert str(decimal_round(Decimal("1.5"), 2)) == "1.50"

    def test_large_value(self):
        value = Decimal("1" + "0" * 100 + ".5")
        assert decimal_round(value) == 10 ** 100 + 1

    def test_non_finite_passthrough(self):
        assert decimal_round(Decimal("NaN")).is_nan()
        assert decimal_round(Decimal("Infinity")).is_infinite()

    def test_negative_decimals(self):
        with pytest.raises(ValueError, match="decimals must be >= 0"):
            decimal_round(Decimal(1), -1)

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            decimal_round(Decimal(1), 0, "bankers")

    def test_integer_shortcut(self):
        assert decimal_round_integer(Decimal("2.5"), "floor") == 2


class TestDecimalToFloat:

    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(Decimal("1.5"), 1.5, id="plain"),
            pytest.param(Decimal("-0"), 0.0, id="negative-zero"),
            pytest.param(Decimal("1e400"), math.inf, id="overflow"),
            pytest.param(Decimal("-1e400"), -math.inf, id="negative-overflow"),
        ],
    )
    def test_narrow(self, value, expected):
        assert decimal_to_float(value) == expected

    def test_negative_zero_has_no_sign(self):
        assert math.copysign(1.0, decimal_to_float(Decimal("-0"))) == 1.0

    def test_nan(self):
        assert math.isnan(decimal_to_float(Decimal("NaN")))
