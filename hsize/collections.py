"""
HSize Collections
"""

# Standard library -----------------------------------------------------------------------------------------------------
import threading
from collections import OrderedDict
from collections.abc import Iterable, Iterator, Mapping
from typing import Generic, Hashable, TypeVar

# Local ----------------------------------------------------------------------------------------------------------------
from .tools import fmt_type, fmt_value

# Classes --------------------------------------------------------------------------------------------------------------

K = TypeVar("K")
V = TypeVar("V")


class BiDirectionalMap(Mapping[K, V]):
    """
    Immutable one-to-one mapping that can also be read from value to key.

    Reads from key to value follow the Mapping protocol, `in` tests keys.
    Duplicate keys or values are rejected on construction, so the inverse is exact.

    Examples:
        >>> exponents = BiDirectionalMap({"k": 1, "m": 2})
        >>> exponents["m"], exponents.get_key(1)
        (2, 'k')
    """

    def __init__(self, pairs: Mapping[K, V] | Iterable[tuple[K, V]] = ()) -> None:
        items = list(pairs.items() if isinstance(pairs, Mapping) else pairs)
        self._by_key: dict[K, V] = {}
        self._by_value: dict[V, K] = {}
        for key, value in items:
            if key in self._by_key:
                raise ValueError(f"duplicate key {fmt_value(key)}")
            if value in self._by_value:
                raise ValueError(f"duplicate value {fmt_value(value)} for keys "
                                 f"{fmt_value(self._by_value[value])} and {fmt_value(key)}")
            self._by_key[key] = value
            self._by_value[value] = key

    def __getitem__(self, key: K) -> V:
        return self._by_key[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._by_key)

    def __len__(self) -> int:
        return len(self._by_key)

    def get_key(self, value: V, default: K | None = None) -> K | None:
        return self._by_value.get(value, default)

    def has_value(self, value: V) -> bool:
        return value in self._by_value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._by_key!r})"


class LRUCache(Generic[K, V]):
    """
    Thread-safe bounded cache with least-recently-used eviction.

    Every read or write happens under a single lock, so insertion and eviction are
    atomic per key. Values are expected to be immutable: two threads missing the same
    key at once may both build a value, and the last insert wins.

    Args:
        maxsize: Maximum number of entries kept, must be a positive int.

    Examples:
        >>> cache = LRUCache(maxsize=2)
        >>> cache.put("a", 1)
        >>> cache.get("a")
        1
        >>> len(cache)
        1
    """

    def __init__(self, maxsize: int = 100) -> None:
        if isinstance(maxsize, bool) or not isinstance(maxsize, int):
            raise TypeError(f"maxsize must be an int, got {fmt_type(maxsize)}")
        if maxsize <= 0:
            raise ValueError(f"maxsize must be positive, got {fmt_value(maxsize)}")
        self._maxsize = maxsize
        self._data: OrderedDict[Hashable, V] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return cached value and mark it as most recently used."""
        with self._lock:
            if key not in self._data:
                return default
            self._data.move_to_end(key)
            return self._data[key]

    def put(self, key: K, value: V) -> None:
        """Insert or replace value, evicting the oldest entries above maxsize."""
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self._maxsize:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"LRUCache(maxsize={self._maxsize}, size={len(self)})"
