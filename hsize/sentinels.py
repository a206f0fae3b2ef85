"""
Marker for options that were not passed.

FormatSpec and ParseSpec give None a meaning of its own (``unit=None`` selects the
unit automatically), so merging overrides into a spec object needs a separate value
that says "keep the current field".

Example:
    >>> FormatSpec(system="si").merge(decimals=1, unit=UNSET).unit is None
    True
"""

from typing import Final


# Sentinel Type --------------------------------------------------------------------------------------------------------

class UnsetType:
    """
    Type of UNSET, instantiating it always returns the same object.

    UNSET is falsy, equal only to itself and keeps its identity through copy and pickle.
    """
    __slots__ = ()

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self):
        return '<UNSET>'

    def __bool__(self):
        return False

    def __eq__(self, other):
        return other is self

    __hash__ = object.__hash__

    def __reduce__(self):
        return type(self), ()


# Sentinel Object ------------------------------------------------------------------------------------------------------

UNSET: Final[UnsetType] = UnsetType()
"""Option not passed. Compare with `is`."""
