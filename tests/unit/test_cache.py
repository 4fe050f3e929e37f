"""Tests for query caching functionality"""

from unittest.mock import patch

from pattern_catalog_mcp.core import cache as core_cache
from pattern_catalog_mcp.core import config
from pattern_catalog_mcp.core.cache import QueryCache, get_query_cache, init_query_cache

VERSION = "v1"
FILTERS = ["category=behavioral"]


class TestQueryCache:
    """Test QueryCache class functionality"""

    def test_cache_initialization(self):
        """Test cache is initialized with correct parameters"""
        cache = QueryCache(max_size=50, ttl_seconds=120)
        assert cache.max_size == 50
        assert cache.ttl_seconds == 120
        assert len(cache.cache) == 0
        assert cache.hits == 0
        assert cache.misses == 0

    def test_cache_put_and_get(self):
        """Test storing and retrieving results from cache"""
        cache = QueryCache(max_size=10, ttl_seconds=300)

        results = [{"entry_id": "observer", "score": 7}]
        cache.put(VERSION, "event handling", FILTERS, results, limit=5)

        retrieved = cache.get(VERSION, "event handling", FILTERS, limit=5)
        assert retrieved == results
        assert cache.hits == 1
        assert cache.misses == 0

    def test_cache_miss(self):
        """Test cache miss returns None and updates stats"""
        cache = QueryCache(max_size=10, ttl_seconds=300)

        assert cache.get(VERSION, "event handling", FILTERS) is None
        assert cache.hits == 0
        assert cache.misses == 1

    def test_catalog_version_is_part_of_the_key(self):
        """Results computed for an older catalog are never returned"""
        cache = QueryCache(max_size=10, ttl_seconds=300)
        cache.put(VERSION, "event", [], ["observer"])

        assert cache.get("v2", "event", [], None) is None
        assert cache.get(VERSION, "event", [], None) == ["observer"]

    def test_limit_and_filters_are_part_of_the_key(self):
        cache = QueryCache(max_size=10, ttl_seconds=300)
        cache.put(VERSION, "event", FILTERS, ["observer"], limit=1)

        assert cache.get(VERSION, "event", FILTERS, limit=2) is None
        assert cache.get(VERSION, "event", [], limit=1) is None

    def test_filter_order_does_not_matter(self):
        cache = QueryCache(max_size=10, ttl_seconds=300)
        cache.put(VERSION, "event", ["language=python", "category=behavioral"], ["observer"])

        assert cache.get(VERSION, "event", ["category=behavioral", "language=python"]) == ["observer"]

    def test_cache_ttl_expiration(self):
        """Test cache entries expire after TTL"""
        cache = QueryCache(max_size=10, ttl_seconds=60)

        with patch("pattern_catalog_mcp.core.cache.time.time", return_value=1000.0):
            cache.put(VERSION, "event", [], ["observer"])
            assert cache.get(VERSION, "event", []) == ["observer"]

        with patch("pattern_catalog_mcp.core.cache.time.time", return_value=1061.0):
            assert cache.get(VERSION, "event", []) is None

        assert len(cache.cache) == 0
        assert cache.misses == 1

    def test_cache_lru_eviction(self):
        """Test least recently used entries are evicted when cache is full"""
        cache = QueryCache(max_size=2, ttl_seconds=300)

        cache.put(VERSION, "first", [], [1])
        cache.put(VERSION, "second", [], [2])
        cache.get(VERSION, "first", [])
        cache.put(VERSION, "third", [], [3])

        assert cache.get(VERSION, "first", []) == [1]
        assert cache.get(VERSION, "second", []) is None
        assert cache.get(VERSION, "third", []) == [3]
        assert len(cache.cache) == 2

    def test_overwrite_does_not_evict(self):
        cache = QueryCache(max_size=2, ttl_seconds=300)
        cache.put(VERSION, "first", [], [1])
        cache.put(VERSION, "second", [], [2])
        cache.put(VERSION, "first", [], [10])

        assert cache.get(VERSION, "first", []) == [10]
        assert cache.get(VERSION, "second", []) == [2]

    def test_cache_clear(self):
        """Test clearing cache removes all entries and resets stats"""
        cache = QueryCache(max_size=10, ttl_seconds=300)
        cache.put(VERSION, "event", [], ["observer"])
        cache.get(VERSION, "event", [])
        cache.get(VERSION, "missing", [])

        cache.clear()

        assert len(cache.cache) == 0
        assert cache.hits == 0
        assert cache.misses == 0

    def test_cache_stats(self):
        """Test cache statistics are calculated correctly"""
        cache = QueryCache(max_size=10, ttl_seconds=300)
        cache.put(VERSION, "event", [], ["observer"])
        cache.get(VERSION, "event", [])
        cache.get(VERSION, "event", [])
        cache.get(VERSION, "missing", [])

        stats = cache.get_stats()
        assert stats["size"] == 1
        assert stats["max_size"] == 10
        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.667
        assert stats["ttl_seconds"] == 300

    def test_empty_cache_stats(self):
        assert QueryCache().get_stats()["hit_rate"] == 0


class TestGlobalCache:
    """Test the module-level cache accessors"""

    def test_init_installs_cache(self, monkeypatch):
        monkeypatch.setattr(core_cache, "_query_cache", None)
        monkeypatch.setattr(config, "CACHE_ENABLED", True)

        init_query_cache(max_size=5, ttl_seconds=30)

        cache = get_query_cache()
        assert cache is not None
        assert cache.max_size == 5
        assert cache.ttl_seconds == 30

    def test_disabled_cache_is_hidden(self, query_cache, monkeypatch):
        assert get_query_cache() is query_cache
        monkeypatch.setattr(config, "CACHE_ENABLED", False)
        assert get_query_cache() is None
