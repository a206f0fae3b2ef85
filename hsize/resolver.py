"""
Unit tier resolution in both directions.

Magnitude → tier picks the display exponent for a byte count. Unit string → tier
interprets a unit token found in text, which is where the SI/JEDEC overlap lives.

Unit token decision table, first match wins:

=====  ======================================  ===========================================
Rule   Token                                   Result
=====  ======================================  ===========================================
JEDEC  Uppercase prefix + "B", no "i" (KB, MB)  base 1024, or 1000 when iec=False
TABLE  Known symbol or long name, any case      From UNIT_MAP: "i" forces 1024,
                                               lowercase "kb"/"ko" style is 1000,
                                               "bit"/"bits" names are bit units
PARTS  Prefix letter + optional "i" + b/byte/   base 1024 if "i" present or iec=True,
       bit/o/octet spelling (kbyte, kioctet)   else 1000; "bit" spellings are bit units
=====  ======================================  ===========================================

Anything else raises UnknownUnitError.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum, unique

# Local ----------------------------------------------------------------------------------------------------------------
from .numeric import decimal_power
from .tools import fmt_type, fmt_value
from .units import PREFIX_EXPONENTS, UNIT_MAP, UnitsConf

_JEDEC_PATTERN = re.compile(r"^[KMGTPEZY]B$")
_PARTS_PATTERN = re.compile(r"^(?P<prefix>[kmgtpezy])(?P<binary>i?)(?P<suffix>b|bytes?|bits?|o|octets?)$")


# Classes --------------------------------------------------------------------------------------------------------------

class UnknownUnitError(ValueError):
    """Raised when a unit token matches no rule of the decision table."""


@unique
class UnitRule(StrEnum):
    JEDEC = "jedec"
    TABLE = "table"
    PARTS = "parts"


@dataclass(frozen=True)
class ResolvedUnit:
    """
    A unit token interpreted as a (base, exponent, is_bit) tier.

    Attributes:
        unit: The token as given.
        base: 1000 or 1024.
        exponent: Tier index in [0, 8].
        is_bit: True when the token names bits rather than bytes.
        rule: Decision table rule that resolved the token.
    """
    unit: str
    base: int
    exponent: int
    is_bit: bool
    rule: UnitRule

    @property
    def multiplier(self) -> Decimal:
        """Size of one unit in bytes, or in bits for bit units."""
        return decimal_power(self.base, self.exponent)


# Methods --------------------------------------------------------------------------------------------------------------

def resolve_exponent(magnitude: Decimal, base: int, max_exponent: int = UnitsConf.MAX_EXPONENT) -> int:
    """
    Largest exponent e in [0, max_exponent] with base**e <= magnitude.

    Values below one unit, zero and NaN resolve to exponent 0.

    Examples:
        >>> resolve_exponent(Decimal(1536), 1024)
        1
        >>> resolve_exponent(Decimal("0.5"), 1000)
        0
    """
    if magnitude.is_nan() or magnitude < 1:
        return 0
    exponent = 0
    while exponent < max_exponent and decimal_power(base, exponent + 1) <= magnitude:
        exponent += 1
    return exponent


def clamp_exponent(exponent: int, max_exponent: int = UnitsConf.MAX_EXPONENT) -> int:
    return max(0, min(max_exponent, exponent))


def exponent_from_unit(unit: str) -> int:
    """
    Exponent of a unit token from its leading prefix letter, 0 when there is none.

    Examples:
        >>> exponent_from_unit("MiB")
        2
        >>> exponent_from_unit("bytes")
        0
    """
    if not unit:
        return 0
    return PREFIX_EXPONENTS.get(unit[0].lower(), 0)


def resolve_unit(unit: str, *, iec: bool = True) -> ResolvedUnit:
    """
    Interpret a unit token as a (base, exponent, is_bit) tier.

    Args:
        unit: Unit token, e.g. "KiB", "kB", "KB", "megabits", "kbyte".
            Surrounding whitespace is ignored.
        iec: Resolve ambiguous uppercase units (KB, MB) as 1024-based. When False,
            they are 1000-based. Tokens with an "i" marker are always 1024-based.

    Raises:
        TypeError: If unit is not a str.
        UnknownUnitError: If the token is not a recognized unit.

    Examples:
        >>> resolve_unit("GB").base
        1024
        >>> resolve_unit("GB", iec=False).base
        1000
        >>> resolve_unit("kb").base
        1000
        >>> resolve_unit("Kib").base
        1024
    """
    if not isinstance(unit, str):
        raise TypeError(f"unit must be a str, got {fmt_type(unit)}")

    token = unit.strip()
    normalized = token.lower()

    if _JEDEC_PATTERN.match(token):
        base = UnitsConf.BINARY_BASE if iec else UnitsConf.DECIMAL_BASE
        return ResolvedUnit(token, base, exponent_from_unit(token), False, UnitRule.JEDEC)

    info = UNIT_MAP.get(normalized)
    if info is not None:
        return ResolvedUnit(token, info.base, info.exponent, info.is_bit, UnitRule.TABLE)

    parts = _PARTS_PATTERN.match(normalized)
    if parts:
        base = UnitsConf.BINARY_BASE if (parts["binary"] or iec) else UnitsConf.DECIMAL_BASE
        is_bit = parts["suffix"].startswith("bit")
        return ResolvedUnit(token, base, PREFIX_EXPONENTS[parts["prefix"]], is_bit, UnitRule.PARTS)

    raise UnknownUnitError(f"unknown unit: {fmt_value(unit)}")
