"""
Locale-aware number rendering and parsing backed by Babel.

Renderers are immutable (locale, fraction digits, grouping) bundles kept in a bounded
process-wide LRU cache. Unknown or malformed locales never raise: callers receive None
and fall back to plain rendering.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

# Third-party ----------------------------------------------------------------------------------------------------------
from babel import Locale, UnknownLocaleError, default_locale
from babel.numbers import NumberPattern, get_decimal_symbol, get_group_symbol, parse_pattern

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import LRUCache


class L10nConf:
    """
    Attributes:
        CACHE_SIZE: Maximum number of cached renderers.
        FALLBACK_LOCALE: Used for locale=True when the process has no locale configured.
    """
    CACHE_SIZE = 100
    FALLBACK_LOCALE = "en_US"


LocaleSpec = str | bool | Sequence[str] | None

_RENDERERS: LRUCache[str, "NumberRenderer"] = LRUCache(maxsize=L10nConf.CACHE_SIZE)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberRenderer:
    """
    Renders decimals for one locale with fixed fraction digit bounds.

    Examples:
        >>> renderer = NumberRenderer(Locale.parse("de_DE"), min_fraction=0, max_fraction=2)
        >>> renderer.render(Decimal("1234.5"))
        '1.234,5'
    """
    locale: Locale
    min_fraction: int = 0
    max_fraction: int = 2
    grouping: bool = True

    pattern: NumberPattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        integer = "#,##0" if self.grouping else "0"
        max_fraction = max(self.max_fraction, self.min_fraction)
        fraction = "0" * self.min_fraction + "#" * (max_fraction - self.min_fraction)
        object.__setattr__(self, 'pattern', parse_pattern(f"{integer}.{fraction}" if fraction else integer))

    @property
    def decimal_symbol(self) -> str:
        return get_decimal_symbol(self.locale)

    @property
    def group_symbol(self) -> str:
        return get_group_symbol(self.locale)

    def render(self, value: Decimal | float) -> str:
        return self.pattern.apply(value, self.locale)


# Methods --------------------------------------------------------------------------------------------------------------

def resolve_locale(locale: LocaleSpec) -> Locale | None:
    """
    Resolve a locale option to a Babel Locale.

    Args:
        locale: A BCP-47 ("de-DE") or POSIX ("de_DE") identifier, a sequence of them
            tried in order, True for the process default locale, or None/False.

    Returns:
        The first locale Babel knows, or None.
    """
    if locale is None or locale is False:
        return None
    if locale is True:
        candidates = [default_locale("LC_NUMERIC") or "", L10nConf.FALLBACK_LOCALE]
    elif isinstance(locale, str):
        candidates = [locale]
    elif isinstance(locale, Sequence):
        candidates = list(locale)
    else:
        return None

    for candidate in candidates:
        if not isinstance(candidate, str) or not candidate.strip():
            continue
        try:
            return Locale.parse(candidate.strip().replace("-", "_"))
        except (ValueError, TypeError, UnknownLocaleError):
            continue
    return None


def get_renderer(
        locale: LocaleSpec,
        min_fraction: int = 0,
        max_fraction: int = 2,
        grouping: bool = True
) -> NumberRenderer | None:
    """
    Return a cached renderer for the locale option, or None if no locale resolves.
    """
    key = f"{_locale_key(locale)}|{min_fraction}|{max_fraction}|{int(grouping)}"
    renderer = _RENDERERS.get(key)
    if renderer is None:
        resolved = resolve_locale(locale)
        if resolved is None:
            return None
        renderer = NumberRenderer(resolved, min_fraction=min_fraction, max_fraction=max_fraction, grouping=grouping)
        _RENDERERS.put(key, renderer)
    return renderer


def clear_renderer_cache() -> None:
    _RENDERERS.clear()


def parse_locale_number(text: str, locale: LocaleSpec = None) -> float:
    """
    Parse a number written with locale separators.

    Without a locale (or with locale=True) the first comma is read as a decimal point.
    With a locale, its group symbol is removed and its decimal symbol becomes a point.
    Unparseable text gives nan.

    Examples:
        >>> parse_locale_number("1,5")
        1.5
        >>> parse_locale_number("1.234,5", "de-DE")
        1234.5
    """
    if not isinstance(text, str):
        return math.nan
    normalized = text.strip()

    renderer = None if (not locale or locale is True) else get_renderer(locale)
    if renderer is None:
        normalized = normalized.replace(",", ".", 1)
    else:
        if renderer.group_symbol:
            normalized = normalized.replace(renderer.group_symbol, "")
        if renderer.decimal_symbol != ".":
            normalized = normalized.replace(renderer.decimal_symbol, ".", 1)

    try:
        return float(normalized)
    except ValueError:
        return math.nan


# Private Methods ------------------------------------------------------------------------------------------------------

def _locale_key(locale: LocaleSpec) -> str:
    if locale is True:
        return "default"
    if isinstance(locale, str):
        return locale
    if isinstance(locale, Sequence):
        return ",".join(str(item) for item in locale)
    return repr(locale)
