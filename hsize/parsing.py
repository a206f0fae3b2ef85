"""
Byte size parsing: human-readable strings like "1.5 GB" back to byte counts.

Input text is matched against BYTE_PATTERN, the number is read with locale separators,
the unit is resolved by resolver.resolve_unit() and the byte count is computed in Decimal.

Failures follow a strict/non-strict duality: strict parsing raises, non-strict parsing
returns nan. Integers beyond the float-safe range warn (non-strict) or raise OverflowError
(strict) because precision would be lost.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import re
import warnings
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .l10n import LocaleSpec, parse_locale_number
from .numeric import decimal_divide, decimal_multiply, decimal_power, decimal_to_float, std_numeric, to_decimal
from .resolver import UnknownUnitError, resolve_unit
from .sentinels import UNSET
from .tools import fmt_type, fmt_value
from .units import CustomUnitTable


# @formatter:off

class ParseConf:
    """
    Attributes:
        MAX_SAFE_INTEGER: Largest integer magnitude a float holds exactly, 2**53 - 1.
        DEFAULT_UNIT: Unit assumed for bare numbers.
    """
    MAX_SAFE_INTEGER = 2**53 - 1
    DEFAULT_UNIT = "b"


# A number never starts inside a digit run, which keeps the unanchored scan linear
_NUMBER = r"[+-]?(?<!\d)\d+(?:[.,]\d+)?(?:e[+-]?\d+)?"
_PREFIX = (r"(?:(?P<prefix>kilo|mega|giga|tera|peta|exa|zetta|yotta"
           r"|kibi|mebi|gibi|tebi|pebi|exbi|zebi|yobi|[kmgtpezy])(?P<binary>i?))?")
_BASE_UNIT = r"(?P<base_unit>b(?:ytes?|its?)?|o(?:ctets?)?)"

BYTE_PATTERN = re.compile(rf"^(?P<value>{_NUMBER})\s*(?P<unit>{_PREFIX}{_BASE_UNIT})?$", re.IGNORECASE)
"""Single value: "1.5 GB", "1,5 Mo", "100KiB", "-50 bytes", "2 kilobits"."""

GLOBAL_BYTE_PATTERN = re.compile(rf"(?P<value>{_NUMBER})\s*(?P<unit>{_PREFIX}{_BASE_UNIT})", re.IGNORECASE)
"""Unanchored variant with a required unit, for scanning free text."""

_CUSTOM_PATTERN = re.compile(rf"^(?P<value>{_NUMBER})\s*(?P<unit>.*)$", re.IGNORECASE | re.DOTALL)

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ParseSpec:
    """
    Immutable parsing configuration.

    Attributes:
        iec: Read ambiguous uppercase units (KB, MB) as 1024-based; 1000-based when False.
        bits: Read the number as bits, the result is divided by 8.
        strict: Raise on invalid input instead of returning nan.
        locale: Locale of the number separators, see l10n.resolve_locale().
        custom_units: Custom unit table replacing the built-in units.
    """
    iec: bool = True
    bits: bool = False
    strict: bool = False
    locale: LocaleSpec = None
    custom_units: CustomUnitTable | Mapping | None = None

    def __post_init__(self):
        for name in ("iec", "bits", "strict"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise TypeError(f"{name} must be a bool, got {fmt_type(value)}")
        if isinstance(self.custom_units, Mapping):
            object.__setattr__(self, 'custom_units', CustomUnitTable.from_config(self.custom_units))
        elif self.custom_units is not None and not isinstance(self.custom_units, CustomUnitTable):
            raise TypeError(f"custom_units must be a CustomUnitTable or mapping, got {fmt_type(self.custom_units)}")

    def merge(self, **overrides) -> "ParseSpec":
        """Create a new ParseSpec with the given fields replaced, UNSET overrides are skipped."""
        names = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise TypeError(f"unknown parse option(s): {', '.join(unknown)}")
        values = {name: getattr(self, name) for name in names}
        values.update({k: v for k, v in overrides.items() if v is not UNSET})
        return ParseSpec(**values)


DEFAULT_SPEC = ParseSpec()


# Methods --------------------------------------------------------------------------------------------------------------

def parse_size(input: Any, spec: ParseSpec | None = None, **options) -> float:
    """
    Parse a byte size string or number into a byte count.

    Args:
        input: A string like "1.5 GB", "100MiB", "1,5 Go"; a finite float (returned as is);
            or an int of any size (narrowed to float, see Raises/Warns).
        spec: Base ParseSpec, defaults to ParseSpec().
        **options: ParseSpec fields overriding the spec.

    Returns:
        Byte count as float, or nan for invalid input when not strict.

    Raises:
        ValueError: In strict mode, for empty or malformed strings, unknown units,
            non-finite numbers and values overflowing the float range.
        OverflowError: In strict mode, for ints beyond +/-(2**53 - 1).
        TypeError: In strict mode, for unsupported input types. Always, for invalid options.

    Warns:
        RuntimeWarning: In non-strict mode, for ints beyond +/-(2**53 - 1).

    Notes:
        A lowercase "b" after a prefix reads as bytes, so bit symbols written by
        format_size(bits=True) do not read back as bits: "1 Kib" is 1024.0 and "1 Gb"
        is 1e9. Spell bits out ("1 kibibit", "1 gigabits") or pass bits=True.

    Examples:
        >>> parse_size("1 KiB")
        1024.0
        >>> parse_size("1 KB")
        1024.0
        >>> parse_size("1 KB", iec=False)
        1000.0
        >>> parse_size("1 kB")
        1000.0
        >>> parse_size("8 b")
        8.0
        >>> parse_size("1,5 GiB", locale="de-DE")
        1610612736.0
        >>> parse_size("invalid")
        nan
    """
    if spec is None:
        spec = DEFAULT_SPEC
    elif not isinstance(spec, ParseSpec):
        raise TypeError(f"spec must be a ParseSpec or None, got {fmt_type(spec)}")
    if options:
        spec = spec.merge(**options)

    if isinstance(input, str):
        return _parse_string(input, spec)

    number = None if isinstance(input, bool) else std_numeric(input, on_error="none")
    if number is None:
        if spec.strict:
            raise TypeError(f"Expected a string or number, got {fmt_type(input)}")
        return math.nan

    if isinstance(number, int):
        if abs(number) > ParseConf.MAX_SAFE_INTEGER:
            if spec.strict:
                raise OverflowError(f"integer value exceeds safe integer range, precision would be lost: "
                                    f"{fmt_value(input)}")
            warnings.warn(
                f"integer value exceeds safe integer range, precision may be lost: {fmt_value(input)}",
                RuntimeWarning,
                stacklevel=2
            )
        return _finite_or_invalid(to_decimal(number), spec, f"Value out of range: {fmt_value(input)}")

    if not math.isfinite(number):
        return _invalid(spec, f"Expected finite number, got {fmt_value(input)}")
    return number


# Private Methods ------------------------------------------------------------------------------------------------------

def _parse_string(text: str, spec: ParseSpec) -> float:
    trimmed = text.strip()
    if not trimmed:
        return _invalid(spec, "Empty string")

    if spec.custom_units is not None:
        return _parse_custom(trimmed, spec)

    match = BYTE_PATTERN.match(trimmed)
    if not match:
        return _invalid(spec, f"Invalid byte string: {trimmed!r}")

    try:
        resolved = resolve_unit(match["unit"] or ParseConf.DEFAULT_UNIT, iec=spec.iec)
    except UnknownUnitError:
        return _invalid(spec, f"Invalid byte string: {trimmed!r}, unknown unit {match['unit']!r}")

    value = _read_number(match["value"], spec)
    result = decimal_multiply(value, resolved.multiplier)
    if resolved.is_bit or spec.bits:
        result = decimal_divide(result, Decimal(8))
    return _finite_or_invalid(result, spec, f"Value out of range: {trimmed!r}")


def _parse_custom(trimmed: str, spec: ParseSpec) -> float:
    table = spec.custom_units
    match = _CUSTOM_PATTERN.match(trimmed)
    if not match:
        return _invalid(spec, f"Invalid byte string: {trimmed!r}")

    unit = match["unit"].strip()
    exponent = table.lookup(unit) if unit else 0
    if exponent is None:
        return _invalid(spec, f"Unknown unit: {unit!r}")

    result = decimal_multiply(_read_number(match["value"], spec), decimal_power(table.base, exponent))
    return _finite_or_invalid(result, spec, f"Value out of range: {trimmed!r}")


def _read_number(text: str, spec: ParseSpec) -> Decimal:
    return to_decimal(parse_locale_number(text, spec.locale))


def _finite_or_invalid(value: Decimal, spec: ParseSpec, message: str) -> float:
    result = decimal_to_float(value)
    if not math.isfinite(result):
        return _invalid(spec, message)
    return result


def _invalid(spec: ParseSpec, message: str) -> float:
    if spec.strict:
        raise ValueError(message)
    return math.nan
