#
# HSize - Collection Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import threading

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hsize.collections import BiDirectionalMap, LRUCache


# Tests ----------------------------------------------------------------------------------------------------------------

class TestBiDirectionalMap:

    @pytest.fixture
    def populated_map(self):
        """Fixture providing a pre-populated BiDirectionalMap instance."""
        return BiDirectionalMap({
            "k": 1,
            "m": 2,
            "g": 3,
        })

    def test_lookup(self, populated_map):
        assert populated_map["g"] == 3
        assert populated_map.get("k") == 1
        assert populated_map.get("x", 0) == 0
        assert populated_map.get_key(2) == "m"
        assert populated_map.get_key(99) is None

    def test_value_uniqueness(self):
        with pytest.raises(ValueError, match="duplicate value <int: 1> for keys"):
            BiDirectionalMap([("k", 1), ("K", 1)])

    def test_key_uniqueness(self):
        with pytest.raises(ValueError, match="duplicate key <str: 'k'>"):
            BiDirectionalMap([("k", 1), ("k", 2)])

    def test_contains(self, populated_map):
        assert "k" in populated_map
        assert 1 not in populated_map
        assert populated_map.has_value(1)
        assert not populated_map.has_value("k")

    def test_keys_values_items(self, populated_map):
        assert list(populated_map.keys()) == ["k", "m", "g"]
        assert list(populated_map.values()) == [1, 2, 3]
        assert set(populated_map.items()) == {("k", 1), ("m", 2), ("g", 3)}
        assert len(populated_map) == 3

    def test_equality_with_mapping(self, populated_map):
        assert populated_map == {"k": 1, "m": 2, "g": 3}

    def test_empty(self):
        assert len(BiDirectionalMap()) == 0


class TestLRUCache:

    def test_get_put(self):
        cache = LRUCache(maxsize=2)
        cache.put("a", 1)
        assert cache.get("a") == 1
        assert cache.get("missing") is None
        assert cache.get("missing", 0) == 0
        assert "a" in cache

    def test_evicts_least_recently_used(self):
        cache = LRUCache(maxsize=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert len(cache) == 2

    def test_replace_keeps_size(self):
        cache = LRUCache(maxsize=2)
        cache.put("a", 1)
        cache.put("a", 2)
        assert cache.get("a") == 2
        assert len(cache) == 1

    def test_clear(self):
        cache = LRUCache()
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0
        assert cache.maxsize == 100

    @pytest.mark.parametrize(
        "maxsize, exc",
        [
            pytest.param(0, ValueError, id="zero"),
            pytest.param(-1, ValueError, id="negative"),
            pytest.param(True, TypeError, id="bool"),
            pytest.param(2.0, TypeError, id="float"),
        ],
    )
    def test_invalid_maxsize(self, maxsize, exc):
        with pytest.raises(exc, match="maxsize"):
            LRUCache(maxsize=maxsize)

    def test_concurrent_puts_respect_bound(self):
        cache = LRUCache(maxsize=10)

        def worker(offset):
            for i in range(200):
                cache.put(offset + i, i)
                cache.get(offset + i // 2)

        threads = [threading.Thread(target=worker, args=(n * 1000,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 10

    def test_repr(self):
        cache = LRUCache(maxsize=3)
        cache.put("a", 1)
        assert repr(cache) == "LRUCache(maxsize=3, size=1)"
