"""
Decimal arithmetic for byte-size conversions.

All scaling between bytes and unit tiers goes through decimal.Decimal with a
dedicated high-precision context instead of float arithmetic. Powers of the unit
bases are exact and memoized, rounding modes are applied on decimal digits, and
division by zero yields a NaN sentinel instead of raising.

Input values from Python stdlib and third-party libraries (NumPy scalars,
Fraction, Decimal) are normalized with std_numeric() before conversion.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import operator
from decimal import (
    Context, Decimal, InvalidOperation, localcontext,
    ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_DOWN, ROUND_HALF_UP,
)
from enum import StrEnum, unique
from typing import Literal, Protocol, runtime_checkable

# Local ----------------------------------------------------------------------------------------------------------------
from .tools import fmt_type, fmt_value


# @formatter:off

class NumericConf:
    """
    Decimal engine constants.

    Attributes:
        PRECISION: Significant digits of the engine context. 1024**8 has 25 digits,
            so 80 keeps every product and quotient of the engine exact or correctly rounded.
        MAX_EXPONENT: Highest unit tier (yotta/yobi).
        CACHED_BASES: Bases whose powers are memoized.
        NAN: The "not-a-number" sentinel returned by decimal_divide() on zero divisor.
    """
    PRECISION = 80
    MAX_EXPONENT = 8
    CACHED_BASES = (1000, 1024)
    NAN = Decimal("NaN")

# @formatter:on


@runtime_checkable
class SupportsFloat(Protocol):
    """Protocol for duck-typed numeric conversion."""

    def __float__(self) -> float: ...


@unique
class RoundingMethod(StrEnum):
    """
    Rounding modes of the decimal engine.

    Attributes:
        ROUND (str) : Ties away from zero for positives, toward zero for negatives (-1.5 → -1)
        FLOOR (str) : Toward negative infinity
        CEIL (str)  : Toward positive infinity
        TRUNC (str) : Toward zero
    """
    ROUND = "round"
    FLOOR = "floor"
    CEIL = "ceil"
    TRUNC = "trunc"


_CONTEXT = Context(prec=NumericConf.PRECISION)

_POWERS: dict[tuple[int, int], Decimal] = {}

_ROUNDING_MODES = {
    RoundingMethod.FLOOR: ROUND_FLOOR,
    RoundingMethod.CEIL: ROUND_CEILING,
    RoundingMethod.TRUNC: ROUND_DOWN,
}


# Methods --------------------------------------------------------------------------------------------------------------

def std_numeric(
        value,
        *,
        on_error: Literal["raise", "nan", "none"] = "raise",
        allow_bool: bool = False
) -> int | float | None:
    """
    Convert numeric types to standard Python int, float, or None.

    Parameters
    ----------
    value : various
        Python int/float/None, Decimal, Fraction, or third-party scalars implementing
        __index__, .item() or __float__ (NumPy, PyTorch and similar).

    on_error : {"raise", "nan", "none"}, default "raise"
        How to handle unsupported types (str, list, dict...):

        - "raise": Raise TypeError
        - "nan": Return float('nan')
        - "none": Return None

        Numeric edge cases (inf, nan) are always preserved regardless of this setting.

    allow_bool : bool, default False
        If True, convert bool to int. If False, treat bool as a type error.

    Returns
    -------
    int
        Python int, types implementing __index__, integer-valued Decimal/Fraction.
    float
        Floats, including inf and nan, and everything converted through __float__.
    None
        For None input or type errors when on_error="none".

    Examples
    --------
    >>> std_numeric(Decimal('42.0'))
    42
    >>> std_numeric("1 KiB", on_error="nan")
    nan
    """
    if value is None:
        return None

    if isinstance(value, bool):
        if allow_bool:
            return int(value)
        return _on_error(on_error, f"boolean values not supported, got {value}")

    # Python int is arbitrary precision, never overflows
    if isinstance(value, (int, float)):
        return value

    if isinstance(value, (str, bytes, bytearray)):
        return _on_error(on_error, f"unsupported numeric type: {fmt_type(value)}")

    if hasattr(value, '__index__'):
        try:
            return operator.index(value)
        except (TypeError, ValueError) as e:
            return _on_error(on_error, f"cannot convert {fmt_type(value)} to int via __index__: {e}")

    # Array scalars
    if hasattr(value, 'item') and callable(value.item):
        try:
            result = value.item()
        except (TypeError, ValueError, AttributeError):
            result = None
        if isinstance(result, bool):
            return std_numeric(result, on_error=on_error, allow_bool=allow_bool)
        if isinstance(result, (int, float)):
            return result

    # Integer-valued Decimal/Fraction keep arbitrary precision
    if type(value).__name__ in ('Decimal', 'Fraction') and hasattr(value, '__int__'):
        try:
            as_int = int(value)
            if value == type(value)(as_int):
                return as_int
        except (TypeError, ValueError, OverflowError):
            pass

    if isinstance(value, SupportsFloat):
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            return _on_error(on_error, f"cannot convert {fmt_type(value)} to float: {e}")

    return _on_error(
        on_error,
        f"unsupported numeric type: {fmt_type(value)}. "
        f"Expected int, float or types implementing __index__, __float__ or .item()"
    )


def to_decimal(value: int | float | Decimal | str) -> Decimal:
    """
    Convert a number or decimal text to Decimal.

    Floats are converted through their shortest repr, so 0.1 becomes Decimal('0.1')
    rather than its exact binary expansion. Non-finite floats map to Decimal NaN/Infinity.

    Raises:
        TypeError: If value is a bool or an unsupported type.
        ValueError: If value is a string that is not a decimal number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"boolean values not supported, got {value}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"not a decimal number: {fmt_value(value)}") from e
    raise TypeError(f"expected int, float, Decimal or str, got {fmt_type(value)}")


def decimal_power(base: int, exponent: int) -> Decimal:
    """
    Return base**exponent as an exact Decimal.

    Powers of 1000 and 1024 with exponent in [0, 8] are built on first use and memoized.

    Examples:
        >>> decimal_power(1024, 2)
        Decimal('1048576')
    """
    key = (base, exponent)
    power = _POWERS.get(key)
    if power is None:
        power = _CONTEXT.power(Decimal(base), exponent)
        if base in NumericConf.CACHED_BASES and 0 <= exponent <= NumericConf.MAX_EXPONENT:
            _POWERS[key] = power
    return power


def decimal_powers(base: int) -> tuple[Decimal, ...]:
    """All powers of base for exponents 0..MAX_EXPONENT, lowest first."""
    return tuple(decimal_power(base, e) for e in range(NumericConf.MAX_EXPONENT + 1))


def decimal_multiply(a: Decimal, b: Decimal) -> Decimal:
    return _CONTEXT.multiply(a, b)


def decimal_divide(a: Decimal, b: Decimal) -> Decimal:
    """
    Divide a by b in the engine context.

    Returns:
        The quotient, or NumericConf.NAN when b is zero.
    """
    if b.is_zero():
        return NumericConf.NAN
    return _CONTEXT.divide(a, b)


def decimal_round(value: Decimal, decimals: int = 0, method: RoundingMethod | str = RoundingMethod.ROUND) -> Decimal:
    """
    Round value to a number of decimal places with the given rounding method.

    The ROUND method resolves ties upward for non-negative values and toward zero
    for negative values, i.e. ties always go toward positive infinity.

    Args:
        value: Decimal to round; NaN and Infinity are returned unchanged.
        decimals: Non-negative number of decimal places.
        method: One of RoundingMethod values.

    Examples:
        >>> decimal_round(Decimal("1.005"), 2)
        Decimal('1.01')
        >>> decimal_round(Decimal("-2.5"))
        Decimal('-2')
        >>> decimal_round(Decimal("1.5"), method="floor")
        Decimal('1')
    """
    method = RoundingMethod(method)
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {fmt_value(decimals)}")
    if not value.is_finite():
        return value

    if method is RoundingMethod.ROUND:
        mode = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    else:
        mode = _ROUNDING_MODES[method]

    quantum = Decimal(1).scaleb(-decimals)
    with localcontext(_CONTEXT) as ctx:
        # quantize() needs room for every integer digit plus the requested fraction
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        return value.quantize(quantum, rounding=mode)


def decimal_round_integer(value: Decimal, method: RoundingMethod | str = RoundingMethod.ROUND) -> Decimal:
    return decimal_round(value, 0, method)


def decimal_to_float(value: Decimal) -> float:
    """
    Narrow Decimal to float.

    Values beyond the float range become +/-inf, NaN stays NaN, negative zero becomes 0.0.
    """
    if value.is_nan():
        return math.nan
    result = float(value)
    return 0.0 if result == 0 else result


# Private Methods ------------------------------------------------------------------------------------------------------

def _on_error(on_error: str, message: str) -> float | None:
    if on_error == "raise":
        raise TypeError(message)
    if on_error == "nan":
        return math.nan
    return None
