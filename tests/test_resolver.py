#
# HSize - Unit Resolver Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from decimal import Decimal

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hsize.resolver import (
    UnitRule, UnknownUnitError, clamp_exponent, exponent_from_unit, resolve_exponent, resolve_unit,
)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestResolveExponent:

    @pytest.mark.parametrize(
        "magnitude, base, expected",
        [
            pytest.param("0", 1024, 0, id="zero"),
            pytest.param("0.5", 1000, 0, id="below-one"),
            pytest.param("1023", 1024, 0, id="just-below-kib"),
            pytest.param("1024", 1024, 1, id="kib"),
            pytest.param("1536", 1024, 1, id="one-and-half-kib"),
            pytest.param("999999", 1000, 1, id="just-below-mb"),
            pytest.param("1000000", 1000, 2, id="mb"),
            pytest.param(str(1024 ** 8), 1024, 8, id="yib"),
            pytest.param("1e30", 1000, 8, id="beyond-top-tier"),
            pytest.param("NaN", 1000, 0, id="nan"),
        ],
    )
    def test_exponent(self, magnitude, base, expected):
        assert resolve_exponent(Decimal(magnitude), base) == expected

    def test_max_exponent(self):
        assert resolve_exponent(Decimal(1024 ** 5), 1024, max_exponent=3) == 3

    def test_exact_at_tier_boundary(self):
        # Float log10 would misplace 1000**5 - 1
        assert resolve_exponent(Decimal(1000 ** 5 - 1), 1000) == 4


class TestClampExponent:

    @pytest.mark.parametrize(
        "exponent, expected",
        [
            pytest.param(-1, 0, id="below"),
            pytest.param(4, 4, id="inside"),
            pytest.param(12, 8, id="above"),
        ],
    )
    def test_clamp(self, exponent, expected):
        assert clamp_exponent(exponent) == expected


class TestExponentFromUnit:

    @pytest.mark.parametrize(
        "unit, expected",
        [
            pytest.param("KiB", 1, id="kib"),
            pytest.param("mb", 2, id="lowercase"),
            pytest.param("YB", 8, id="yotta"),
            pytest.param("B", 0, id="bytes"),
            pytest.param("", 0, id="empty"),
        ],
    )
    def test_exponent(self, unit, expected):
        assert exponent_from_unit(unit) == expected


class TestResolveUnit:

    @pytest.mark.parametrize(
        "unit, iec, base, exponent, is_bit, rule",
        [
            pytest.param("KB", True, 1024, 1, False, UnitRule.JEDEC, id="jedec-iec"),
            pytest.param("KB", False, 1000, 1, False, UnitRule.JEDEC, id="jedec-si"),
            pytest.param("GB", True, 1024, 3, False, UnitRule.JEDEC, id="jedec-gb"),
            pytest.param("kB", True, 1000, 1, False, UnitRule.TABLE, id="si-symbol"),
            pytest.param("kb", True, 1000, 1, False, UnitRule.TABLE, id="lowercase-kb"),
            pytest.param("KiB", False, 1024, 1, False, UnitRule.TABLE, id="iec-marker-always-binary"),
            pytest.param("Kib", True, 1024, 1, False, UnitRule.TABLE, id="kib-is-bytes"),
            pytest.param("b", True, 1, 0, False, UnitRule.TABLE, id="b-is-byte"),
            pytest.param("bits", True, 1, 0, True, UnitRule.TABLE, id="bits"),
            pytest.param("Mo", True, 1000, 2, False, UnitRule.TABLE, id="french"),
            pytest.param("megabits", True, 1000, 2, True, UnitRule.TABLE, id="decimal-bit-name"),
            pytest.param("gibibytes", False, 1024, 3, False, UnitRule.TABLE, id="binary-name"),
            pytest.param("kbyte", True, 1024, 1, False, UnitRule.PARTS, id="parts-iec"),
            pytest.param("kbyte", False, 1000, 1, False, UnitRule.PARTS, id="parts-si"),
            pytest.param("kibyte", False, 1024, 1, False, UnitRule.PARTS, id="parts-binary-marker"),
            pytest.param("koctets", True, 1024, 1, False, UnitRule.PARTS, id="parts-octets"),
            pytest.param("mbit", False, 1000, 2, True, UnitRule.PARTS, id="parts-bit"),
            pytest.param(" MiB ", True, 1024, 2, False, UnitRule.TABLE, id="whitespace"),
        ],
    )
    def test_decision_table(self, unit, iec, base, exponent, is_bit, rule):
        resolved = resolve_unit(unit, iec=iec)
        assert (resolved.base, resolved.exponent, resolved.is_bit, resolved.rule) == (base, exponent, is_bit, rule)

    def test_multiplier(self):
        assert resolve_unit("GiB").multiplier == Decimal(1024 ** 3)
        assert resolve_unit("B").multiplier == 1

    @pytest.mark.parametrize("unit", ["xB", "KBB", "", "kilo", "bytez"])
    def test_unknown(self, unit):
        with pytest.raises(UnknownUnitError, match="unknown unit"):
            resolve_unit(unit)

    def test_unknown_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_unit("parsecs")

    def test_type_error(self):
        with pytest.raises(TypeError, match="unit must be a str"):
            resolve_unit(1024)
