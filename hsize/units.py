#
# HSize Unit Tables
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import StrEnum, unique
from collections.abc import Iterable, Mapping, Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import BiDirectionalMap
from .tools import fmt_type, fmt_value, sequence_get


# @formatter:off

class UnitsConf:
    """
    Unit table constants.

    Attributes:
        MAX_EXPONENT: Highest exponent tier, 8 = yotta/yobi.
        DECIMAL_BASE: Base of SI and French tiers.
        BINARY_BASE: Base of IEC and JEDEC tiers.
        PREFIXES: Lowercase prefix letters, index = exponent.
    """
    MAX_EXPONENT = 8
    DECIMAL_BASE = 1000
    BINARY_BASE = 1024
    PREFIXES = ("", "k", "m", "g", "t", "p", "e", "z", "y")


@unique
class UnitSystem(StrEnum):
    """
    Display conventions for byte sizes.

    Attributes:
        SI (str)     : Decimal, base 1000 - kB, MB, GB
        IEC (str)    : Binary, base 1024 with "i" marker - KiB, MiB, GiB
        JEDEC (str)  : Legacy binary, base 1024 with SI-like symbols - KB, MB, GB
        FRENCH (str) : Decimal octets, base 1000 - ko, Mo, Go
    """
    SI = "si"
    IEC = "iec"
    JEDEC = "jedec"
    FRENCH = "french"


PREFIX_EXPONENTS = BiDirectionalMap({prefix: exp for exp, prefix in enumerate(UnitsConf.PREFIXES)})

UNITS: dict[UnitSystem, dict[str, tuple[str, ...]]] = {
    UnitSystem.IEC: {
        "bytes": ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"),
        "bits":  ("b", "Kib", "Mib", "Gib", "Tib", "Pib", "Eib", "Zib", "Yib"),
    },
    UnitSystem.JEDEC: {
        "bytes": ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"),
        "bits":  ("b", "Kb", "Mb", "Gb", "Tb", "Pb", "Eb", "Zb", "Yb"),
    },
    UnitSystem.SI: {
        "bytes": ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"),
        "bits":  ("b", "kb", "Mb", "Gb", "Tb", "Pb", "Eb", "Zb", "Yb"),
    },
    UnitSystem.FRENCH: {
        "bytes": ("o", "ko", "Mo", "Go", "To", "Po", "Eo", "Zo", "Yo"),
        # Octets have no bit counterpart, SI bit symbols are used instead
        "bits":  ("b", "kb", "Mb", "Gb", "Tb", "Pb", "Eb", "Zb", "Yb"),
    },
}

_DECIMAL_LONG_BYTES = ("bytes", "kilobytes", "megabytes", "gigabytes", "terabytes",
                       "petabytes", "exabytes", "zettabytes", "yottabytes")
_DECIMAL_LONG_BITS = ("bits", "kilobits", "megabits", "gigabits", "terabits",
                      "petabits", "exabits", "zettabits", "yottabits")

LONG_FORMS: dict[UnitSystem, dict[str, tuple[str, ...]]] = {
    UnitSystem.IEC: {
        "bytes": ("bytes", "kibibytes", "mebibytes", "gibibytes", "tebibytes",
                  "pebibytes", "exbibytes", "zebibytes", "yobibytes"),
        "bits":  ("bits", "kibibits", "mebibits", "gibibits", "tebibits",
                  "pebibits", "exbibits", "zebibits", "yobibits"),
    },
    UnitSystem.JEDEC: {"bytes": _DECIMAL_LONG_BYTES, "bits": _DECIMAL_LONG_BITS},
    UnitSystem.SI: {"bytes": _DECIMAL_LONG_BYTES, "bits": _DECIMAL_LONG_BITS},
    UnitSystem.FRENCH: {
        "bytes": ("octets", "kilooctets", "megaoctets", "gigaoctets", "teraoctets",
                  "petaoctets", "exaoctets", "zettaoctets", "yottaoctets"),
        "bits":  _DECIMAL_LONG_BITS,
    },
}

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UnitInfo:
    """
    A unit tier: the unit equals base**exponent bytes, or bits when is_bit is set.
    """
    base: int
    exponent: int
    is_bit: bool = False


@dataclass(frozen=True)
class CustomUnit:
    """
    One tier of a custom unit table.

    Attributes:
        symbol: Short symbol, e.g. "bl".
        name: Singular long name, e.g. "block".
        name_plural: Plural long name, e.g. "blocks". Defaults to name + "s".
    """
    symbol: str
    name: str
    name_plural: str | None = None

    def __post_init__(self):
        for attr in ("symbol", "name"):
            value = getattr(self, attr)
            if not isinstance(value, str):
                raise TypeError(f"custom unit {attr} must be a str, got {fmt_type(value)}")
            if not value.strip():
                raise ValueError(f"custom unit {attr} must be a non-empty string")
        if self.name_plural is None:
            object.__setattr__(self, 'name_plural', f"{self.name}s")
        elif not isinstance(self.name_plural, str):
            raise TypeError(f"custom unit name_plural must be a str, got {fmt_type(self.name_plural)}")


@dataclass(frozen=True)
class CustomUnitTable:
    """
    User-defined unit tiers sharing a single base.

    Tier n represents base**n bytes. The number of tiers bounds the highest exponent:
    values beyond the last tier are displayed in the last tier, never extrapolated.

    Units may be given as CustomUnit instances, mappings with "symbol", "name" and
    "name_plural" (or "nameP") keys, or (symbol, name, name_plural) tuples.

    Examples:
        >>> table = CustomUnitTable(1024, [("ch", "chunk", "chunks"), ("bl", "block", "blocks")])
        >>> table.max_exponent
        1
        >>> table.lookup("Blocks")
        1
    """
    base: int
    units: tuple[CustomUnit, ...]

    _index: dict[str, int] = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.base, bool) or not isinstance(self.base, int):
            raise TypeError(f"custom unit base must be an int, got {fmt_type(self.base)}")
        if self.base < 2:
            raise ValueError(f"custom unit base must be >= 2, got {fmt_value(self.base)}")
        if isinstance(self.units, (str, bytes)) or not isinstance(self.units, Iterable):
            raise TypeError(f"custom units must be a sequence, got {fmt_type(self.units)}")

        units = tuple(_as_custom_unit(u) for u in self.units)
        if not units:
            raise ValueError("custom unit table requires at least one unit")
        if len(units) > UnitsConf.MAX_EXPONENT + 1:
            raise ValueError(f"custom unit table supports at most {UnitsConf.MAX_EXPONENT + 1} units, "
                             f"got {len(units)}")
        object.__setattr__(self, 'units', units)

        index: dict[str, int] = {}
        for exponent, unit in enumerate(units):
            for key in (unit.symbol, unit.name, unit.name_plural):
                # Earlier tiers win on duplicate names
                index.setdefault(key.strip().lower(), exponent)
        object.__setattr__(self, '_index', index)

    @classmethod
    def from_config(cls, config: Mapping) -> "CustomUnitTable":
        """Build from a {"base": int, "units": [...]} mapping."""
        if not isinstance(config, Mapping):
            raise TypeError(f"custom units config must be a mapping, got {fmt_type(config)}")
        return cls(base=config.get("base"), units=config.get("units"))

    @property
    def max_exponent(self) -> int:
        return len(self.units) - 1

    def symbol(self, exponent: int) -> str:
        return self.units[self.clamp(exponent)].symbol

    def long_name(self, exponent: int, value: float | None = None) -> str:
        """Singular name when |value| equals 1, plural otherwise."""
        unit = self.units[self.clamp(exponent)]
        return unit.name if value is not None and abs(value) == 1 else unit.name_plural

    def lookup(self, token: str) -> int | None:
        """Exponent of a symbol or a singular/plural name, case-insensitive. None if unknown."""
        return self._index.get(token.strip().lower())

    def clamp(self, exponent: int) -> int:
        return max(0, min(self.max_exponent, exponent))


# Methods --------------------------------------------------------------------------------------------------------------

def system_base(system: UnitSystem | str) -> int:
    """Base of a unit system: 1000 for SI and French, 1024 for IEC and JEDEC."""
    # French is decimal like SI: "1 ko" is 1000 octets, the same value parse_size() reads back
    system = UnitSystem(system)
    if system in (UnitSystem.SI, UnitSystem.FRENCH):
        return UnitsConf.DECIMAL_BASE
    return UnitsConf.BINARY_BASE


def unit_symbols(system: UnitSystem | str, bits: bool = False) -> tuple[str, ...]:
    """
    Display symbols of a unit system indexed by exponent.

    Examples:
        >>> unit_symbols("si")[1]
        'kB'
        >>> unit_symbols("iec", bits=True)[2]
        'Mib'
    """
    return UNITS[UnitSystem(system)]["bits" if bits else "bytes"]


def long_forms(system: UnitSystem | str, bits: bool = False) -> tuple[str, ...]:
    """Plural long names of a unit system indexed by exponent."""
    return LONG_FORMS[UnitSystem(system)]["bits" if bits else "bytes"]


def long_unit_name(
        system: UnitSystem | str,
        exponent: int,
        *,
        bits: bool = False,
        value: float | None = None,
        custom_forms: Sequence[str] | None = None
) -> str:
    """
    Long unit name for an exponent tier, lowercased.

    The trailing "s" is dropped when |value| is exactly 1, so 1 gives "kibibyte" and
    0 gives "kibibytes". Custom forms override the built-in names per exponent;
    exponents missing in custom_forms fall back to the built-in names.

    Examples:
        >>> long_unit_name("iec", 1, value=1)
        'kibibyte'
        >>> long_unit_name("french", 2, value=3)
        'megaoctets'
    """
    name = sequence_get(custom_forms, exponent) or long_forms(system, bits)[exponent]
    name = name.lower()
    if value is not None and abs(value) == 1 and name.endswith("s"):
        name = name[:-1]
    return name


def _as_custom_unit(unit) -> CustomUnit:
    if isinstance(unit, CustomUnit):
        return unit
    if isinstance(unit, Mapping):
        plural = unit.get("name_plural", unit.get("nameP"))
        return CustomUnit(symbol=unit.get("symbol"), name=unit.get("name"), name_plural=plural)
    if isinstance(unit, (tuple, list)) and len(unit) in (2, 3):
        return CustomUnit(*unit)
    raise TypeError(f"custom unit must be a CustomUnit, mapping or (symbol, name[, plural]) tuple, "
                    f"got {fmt_value(unit)}")


def _build_unit_map() -> dict[str, UnitInfo]:
    """
    Lowercase unit token -> UnitInfo for every recognized symbol and long name.

    Lowercase "kb" style symbols resolve to base 1000, "kib" style to base 1024.
    Uppercase JEDEC symbols are resolved before this map is consulted.
    """
    unit_map: dict[str, UnitInfo] = {}

    for token in ("b", "byte", "bytes", "o", "octet", "octets"):
        unit_map[token] = UnitInfo(1, 0)
    for token in ("bit", "bits"):
        unit_map[token] = UnitInfo(1, 0, is_bit=True)

    decimal_names = [name[:-len("bytes")] for name in _DECIMAL_LONG_BYTES]
    binary_names = [name[:-len("bytes")] for name in LONG_FORMS[UnitSystem.IEC]["bytes"]]

    for exponent in range(1, UnitsConf.MAX_EXPONENT + 1):
        prefix = UnitsConf.PREFIXES[exponent]
        decimal = UnitInfo(UnitsConf.DECIMAL_BASE, exponent)
        binary = UnitInfo(UnitsConf.BINARY_BASE, exponent)

        unit_map[f"{prefix}b"] = decimal
        unit_map[f"{prefix}o"] = decimal
        unit_map[f"{prefix}ib"] = binary
        for suffix in ("byte", "bytes"):
            unit_map[f"{decimal_names[exponent]}{suffix}"] = decimal
            unit_map[f"{binary_names[exponent]}{suffix}"] = binary
        for suffix in ("octet", "octets"):
            unit_map[f"{decimal_names[exponent]}{suffix}"] = decimal
        for suffix in ("bit", "bits"):
            unit_map[f"{decimal_names[exponent]}{suffix}"] = UnitInfo(UnitsConf.DECIMAL_BASE, exponent, is_bit=True)
            unit_map[f"{binary_names[exponent]}{suffix}"] = UnitInfo(UnitsConf.BINARY_BASE, exponent, is_bit=True)

    return unit_map


UNIT_MAP: dict[str, UnitInfo] = _build_unit_map()


# Module Sanity Checks -------------------------------------------------------------------------------------------------

for _system in UnitSystem:
    for _table in (UNITS, LONG_FORMS):
        for _kind in ("bytes", "bits"):
            if len(_table[_system][_kind]) != UnitsConf.MAX_EXPONENT + 1:
                raise AssertionError(
                    f"Configuration Error: {_system} {_kind} table must define exactly "
                    f"{UnitsConf.MAX_EXPONENT + 1} tiers."
                )
