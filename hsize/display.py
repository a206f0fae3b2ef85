"""
Byte size formatting: byte counts to human-readable strings like "1.5 KiB".
"""

# ## Scope
#
# format_size() is a one-way conversion. Use parsing.parse_size() to read strings back;
# tier-aligned integer byte counts round-trip exactly in every unit system.
#
# ## Option precedence
#
#   unit > exponent > auto-selected tier
#   spacer > space=False > non_breaking_space > " "
#
# ## Arithmetic
#
# Scaling, the bit carry and rounding run in Decimal (see numeric.py), the result is
# narrowed to float only for the "array" and "object" outputs.

# Standard library -----------------------------------------------------------------------------------------------------
import math
import re
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import StrEnum, unique
from typing import Any, Mapping, NamedTuple, Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .l10n import LocaleSpec, get_renderer
from .numeric import (
    RoundingMethod, decimal_divide, decimal_multiply, decimal_power,
    decimal_round, decimal_to_float, std_numeric, to_decimal,
)
from .resolver import clamp_exponent, resolve_exponent, resolve_unit
from .sentinels import UNSET
from .tools import fmt_type, fmt_value, sequence_get
from .units import CustomUnitTable, UnitSystem, UnitsConf, long_unit_name, system_base, unit_symbols


# @formatter:off

class DisplayConf:
    """
    Formatter constants.

    Attributes:
        NBSP: Non-breaking space used when non_breaking_space=True.
        SPACE: Default spacer between value and unit.
        TEMPLATE_TOKEN: Placeholder syntax of templates, e.g. "{value}".
        THOUSANDS_PATTERN: Positions of thousands separators in an integer part.
    """
    NBSP = "\u00a0"
    SPACE = " "
    TEMPLATE_TOKEN = re.compile(r"\{(\w+)\}")
    THOUSANDS_PATTERN = re.compile(r"\B(?=(\d{3})+(?!\d))")


@unique
class FormatOutput(StrEnum):
    """
    Result shapes of format_size().

    Attributes:
        STRING (str)   : "1.5 KiB"
        ARRAY (str)    : SizeArray(value=1.5, unit="KiB")
        OBJECT (str)   : SizeObject(bytes=1536.0, value=1.5, unit="KiB", exponent=1)
        EXPONENT (str) : 1
    """
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    EXPONENT = "exponent"

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

class SizeArray(NamedTuple):
    value: float
    unit: str


@dataclass(frozen=True)
class SizeObject:
    bytes: float
    value: float
    unit: str
    exponent: int


@dataclass(frozen=True)
class FormatSpec:
    """
    Immutable formatting configuration.

    Every recognized option is a field; build variants with merge() instead of
    mutating. Values are validated and normalized on construction, so a FormatSpec
    instance is always usable by format_size().

    Attributes:
        system: Unit system, one of UnitSystem values.
        bits: Display bits instead of bytes. Ignored with custom_units.
        decimals: Maximum decimal places of the displayed value.
        rounding: Rounding method applied to the displayed value.
        minimum_fraction_digits: Overrides the minimum decimal places.
        maximum_fraction_digits: Overrides the maximum decimal places of the string output.
        locale: Locale identifier, sequence of identifiers, or True for the process locale.
        space: Put a space between value and unit.
        non_breaking_space: Use U+00A0 as the space.
        spacer: Custom separator between value and unit, takes precedence over space options.
        thousands_separator: Group separator of the integer part when no locale is used.
        signed: Prefix non-zero positive values with "+".
        pad: Keep trailing zeros up to `decimals` places.
        fixed_width: Left-pad the string output with spaces to this width, never truncate.
        long_form: Use long unit names, e.g. "kibibytes".
        long_forms: Custom long names indexed by exponent.
        unit: Force the output unit, e.g. "MiB".
        exponent: Force the output tier 0..8.
        output: Result shape, one of FormatOutput values.
        template: Output template with {value}, {unit}, {longUnit}, {bytes}, {exponent} tokens.
        custom_units: Custom unit table replacing the system units.
    """
    system: UnitSystem | str = UnitSystem.IEC
    bits: bool = False
    decimals: int = 2
    rounding: RoundingMethod | str = RoundingMethod.ROUND
    minimum_fraction_digits: int | None = None
    maximum_fraction_digits: int | None = None
    locale: LocaleSpec = None
    space: bool = True
    non_breaking_space: bool = False
    spacer: str | None = None
    thousands_separator: str | None = None
    signed: bool = False
    pad: bool = False
    fixed_width: int | None = None
    long_form: bool = False
    long_forms: Sequence[str] | None = None
    unit: str | None = None
    exponent: int | None = None
    output: FormatOutput | str = FormatOutput.STRING
    template: str | None = None
    custom_units: CustomUnitTable | Mapping | None = None

    def __post_init__(self):
        object.__setattr__(self, 'system', _as_enum(UnitSystem, self.system, "system"))
        object.__setattr__(self, 'rounding', _as_enum(RoundingMethod, self.rounding, "rounding"))
        object.__setattr__(self, 'output', _as_enum(FormatOutput, self.output, "output"))

        object.__setattr__(self, 'decimals', _validate_whole(self.decimals, "decimals"))
        for name in ("minimum_fraction_digits", "maximum_fraction_digits", "fixed_width"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _validate_whole(value, name))

        if self.exponent is not None:
            exponent = _validate_whole(self.exponent, "exponent")
            if exponent > UnitsConf.MAX_EXPONENT:
                raise ValueError(f"exponent must be an integer between 0 and {UnitsConf.MAX_EXPONENT}, "
                                 f"got {fmt_value(self.exponent)}")
            object.__setattr__(self, 'exponent', exponent)

        for name in ("spacer", "thousands_separator", "unit", "template"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be a str or None, got {fmt_type(value)}")

        if self.long_forms is not None:
            if isinstance(self.long_forms, str) or not isinstance(self.long_forms, Sequence):
                raise TypeError(f"long_forms must be a sequence of str, got {fmt_type(self.long_forms)}")
            object.__setattr__(self, 'long_forms', tuple(self.long_forms))

        if isinstance(self.custom_units, Mapping):
            object.__setattr__(self, 'custom_units', CustomUnitTable.from_config(self.custom_units))
        elif self.custom_units is not None and not isinstance(self.custom_units, CustomUnitTable):
            raise TypeError(f"custom_units must be a CustomUnitTable or mapping, got {fmt_type(self.custom_units)}")

    def merge(self, **overrides) -> "FormatSpec":
        """
        Create a new FormatSpec with the given fields replaced.

        Overrides equal to UNSET keep the current value, which lets callers forward
        optional arguments without deciding on defaults.

        Raises:
            TypeError: If an override names an unknown option.

        Examples:
            >>> FormatSpec(system="si").merge(decimals=1, unit=UNSET).system
            <UnitSystem.SI: 'si'>
        """
        names = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise TypeError(f"unknown format option(s): {', '.join(unknown)}")
        values = {name: getattr(self, name) for name in names}
        values.update({k: v for k, v in overrides.items() if v is not UNSET})
        return FormatSpec(**values)

    @property
    def max_fraction(self) -> int:
        """Decimal places of the string output."""
        if self.maximum_fraction_digits is not None:
            return max(self.maximum_fraction_digits, self.min_fraction)
        return max(self.decimals, self.min_fraction)

    @property
    def min_fraction(self) -> int:
        """Decimal places always shown in the string output."""
        if self.minimum_fraction_digits is not None:
            return self.minimum_fraction_digits
        if not self.pad:
            return 0
        return self.maximum_fraction_digits if self.maximum_fraction_digits is not None else self.decimals

    @property
    def spacing(self) -> str:
        if self.spacer is not None:
            return self.spacer
        if not self.space:
            return ""
        return DisplayConf.NBSP if self.non_breaking_space else DisplayConf.SPACE


# Methods --------------------------------------------------------------------------------------------------------------

def format_size(bytes: Any, spec: FormatSpec | None = None, **options) -> str | int | SizeArray | SizeObject:
    """
    Format a byte count as a human-readable size.

    Args:
        bytes: Byte count as int (any size, divided exactly), float, Decimal,
            Fraction or a numeric scalar such as numpy.int64. Must be finite.
        spec: Base FormatSpec, defaults to FormatSpec().
        **options: FormatSpec fields overriding the spec.

    Returns:
        str for output="string", SizeArray for "array", SizeObject for "object",
        int exponent for "exponent".

    Raises:
        TypeError: If bytes is not numeric (bool and str included) or an option has a wrong type.
        ValueError: If bytes is NaN or infinite, or an option value is invalid.

    Examples:
        >>> format_size(1536)
        '1.5 KiB'
        >>> format_size(1_000_000_000, system="si")
        '1 GB'
        >>> format_size(128, bits=True)
        '1 Kib'
        >>> format_size(1, long_form=True)
        '1 byte'
        >>> format_size(1536, output="array")
        SizeArray(value=1.5, unit='KiB')
        >>> format_size(1_048_576, template="{value}|{unit}|{exponent}")
        '1|MiB|2'
    """
    if spec is None:
        spec = DEFAULT_SPEC
    elif not isinstance(spec, FormatSpec):
        raise TypeError(f"spec must be a FormatSpec or None, got {fmt_type(spec)}")
    if options:
        spec = spec.merge(**options)

    number = _finite_number(bytes)
    value = to_decimal(number)
    exponent, scaled = _scale(abs(value), spec)
    if value < 0:
        scaled = -scaled
    if spec.output is FormatOutput.EXPONENT:
        return exponent

    if spec.output in (FormatOutput.ARRAY, FormatOutput.OBJECT):
        rounded = _unsigned_zero(decimal_round(scaled, spec.decimals, spec.rounding))
        unit = _short_unit(spec, exponent, rounded)
        if spec.output is FormatOutput.ARRAY:
            return SizeArray(decimal_to_float(rounded), unit)
        return SizeObject(bytes=decimal_to_float(value), value=decimal_to_float(rounded), unit=unit, exponent=exponent)

    rounded = _unsigned_zero(decimal_round(scaled, spec.max_fraction, spec.rounding))
    number_text = _render_number(rounded, spec)
    if spec.signed and rounded > 0:
        number_text = f"+{number_text}"

    if spec.template is not None:
        tokens = {
            "value": number_text,
            "unit": _short_unit(spec, exponent, rounded),
            "longUnit": _long_unit(spec, exponent, rounded),
            "bytes": _plain_number(number),
            "exponent": str(exponent),
        }
        result = DisplayConf.TEMPLATE_TOKEN.sub(lambda m: tokens.get(m.group(1), m.group(0)), spec.template)
    else:
        result = f"{number_text}{spec.spacing}{_short_unit(spec, exponent, rounded)}"

    if spec.fixed_width is not None and len(result) < spec.fixed_width:
        result = result.rjust(spec.fixed_width)
    return result


# Private Methods ------------------------------------------------------------------------------------------------------

def _as_enum(enum_cls, value, name: str):
    if isinstance(value, str):
        value = value.strip().lower()
    try:
        return enum_cls(value)
    except ValueError as e:
        choices = ", ".join(repr(m.value) for m in enum_cls)
        raise ValueError(f"{name} must be one of {choices}, got {fmt_value(value)}") from e


def _validate_whole(value, name: str) -> int:
    """Validate a non-negative whole number option, int-valued floats are accepted."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be an int, got {fmt_type(value)}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a non-negative finite number, got {fmt_value(value)}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be a whole number, got {fmt_value(value)}")
        value = int(value)
    return value


def _finite_number(value: Any) -> int | float:
    number = std_numeric(value)
    if number is None:
        raise TypeError(f"Expected a finite number, got {fmt_type(value)}")
    if isinstance(number, float) and not math.isfinite(number):
        raise ValueError(f"Expected a finite number, got {fmt_value(value)}")
    # -0.0 collapses to 0
    return number if number != 0 else 0


def _scale(magnitude: Decimal, spec: FormatSpec) -> tuple[int, Decimal]:
    """
    Select the tier and scale the magnitude into it.

    Returns:
        (exponent, value in that tier), value is non-negative.
    """
    table = spec.custom_units
    bits = spec.bits and table is None
    forced = spec.unit is not None or spec.exponent is not None

    if table is not None:
        base, max_exponent = table.base, table.max_exponent
    else:
        base, max_exponent = system_base(spec.system), UnitsConf.MAX_EXPONENT

    if spec.unit is not None:
        if table is not None:
            exponent = table.lookup(spec.unit)
            if exponent is None:
                raise ValueError(f"unit is not defined in the custom unit table: {fmt_value(spec.unit)}")
        else:
            resolved = resolve_unit(spec.unit, iec=spec.system is not UnitSystem.SI)
            base, exponent = resolved.base, resolved.exponent
            bits = bits or resolved.is_bit
    elif spec.exponent is not None:
        exponent = clamp_exponent(spec.exponent, max_exponent)
    else:
        exponent = resolve_exponent(magnitude, base, max_exponent)

    scaled = decimal_divide(magnitude, decimal_power(base, exponent))
    if bits:
        scaled = decimal_multiply(scaled, Decimal(8))
        # 128 bytes are "1 Kib", not "1024 b"
        if not forced and scaled >= base and exponent < max_exponent:
            scaled = decimal_divide(scaled, Decimal(base))
            exponent += 1
    return exponent, scaled


def _unsigned_zero(rounded: Decimal) -> Decimal:
    # A value rounded to zero carries no sign
    if rounded.is_zero():
        return Decimal(0).quantize(rounded)
    return rounded


def _short_unit(spec: FormatSpec, exponent: int, value: Decimal) -> str:
    if spec.unit is not None:
        return spec.unit
    if spec.long_form:
        return _long_unit(spec, exponent, value)
    if spec.custom_units is not None:
        return spec.custom_units.symbol(exponent)
    return unit_symbols(spec.system, spec.bits)[exponent]


def _long_unit(spec: FormatSpec, exponent: int, value: Decimal) -> str:
    table = spec.custom_units
    if table is not None and sequence_get(spec.long_forms, exponent) is None:
        return table.long_name(exponent, value)
    return long_unit_name(spec.system, exponent, bits=spec.bits, value=value, custom_forms=spec.long_forms)


def _render_number(value: Decimal, spec: FormatSpec) -> str:
    """Render a rounded value with the locale renderer, or plain when no locale resolves."""
    if spec.locale:
        renderer = get_renderer(spec.locale, spec.min_fraction, spec.max_fraction)
        if renderer is not None:
            return renderer.render(value)
    return _render_plain(value, spec)


def _render_plain(value: Decimal, spec: FormatSpec) -> str:
    text = f"{value:.{spec.max_fraction}f}"
    if not (spec.pad or spec.min_fraction >= spec.max_fraction) and "." in text:
        text = text.rstrip("0").rstrip(".")
        if spec.min_fraction:
            integer, _, fraction = text.partition(".")
            text = f"{integer}.{fraction.ljust(spec.min_fraction, '0')}"
    if spec.thousands_separator:
        integer, dot, fraction = text.partition(".")
        integer = DisplayConf.THOUSANDS_PATTERN.sub(spec.thousands_separator, integer)
        text = f"{integer}{dot}{fraction}"
    return text


def _plain_number(number: int | float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


# Defaults -------------------------------------------------------------------------------------------------------------

# Built after the private helpers, FormatSpec validation uses them
DEFAULT_SPEC = FormatSpec()
