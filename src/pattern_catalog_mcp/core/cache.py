"""Query result caching for the pattern catalog server."""
import hashlib
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

from pattern_catalog_mcp.constants import CacheDefaults


class QueryCache:
    """Simple LRU cache with TTL for ranked query results.

    Keys include the catalog version, so a refreshed catalog never serves
    results computed against the previous snapshot.
    """

    def __init__(self, max_size: int = CacheDefaults.DEFAULT_CACHE_SIZE, ttl_seconds: int = CacheDefaults.TTL_SECONDS) -> None:
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries to cache
            ttl_seconds: Time-to-live for cache entries in seconds
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.cache: OrderedDict[str, Tuple[Any, float]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def _make_key(self, catalog_version: str, need_text: str, filter_parts: List[str], limit: Optional[int]) -> str:
        """Create a cache key from query parameters.

        Args:
            catalog_version: Version hash of the catalog being queried
            need_text: Free-text need
            filter_parts: Stable string form of the query filters
            limit: Result limit

        Returns:
            Hash-based cache key
        """
        key_parts = [catalog_version, need_text, str(limit)] + sorted(filter_parts)
        key_str = "|".join(key_parts)
        return hashlib.sha256(key_str.encode()).hexdigest()[:CacheDefaults.CACHE_KEY_LENGTH]

    def get(self, catalog_version: str, need_text: str, filter_parts: List[str], limit: Optional[int] = None) -> Optional[Any]:
        """Get a cached result if available and not expired.

        Returns:
            Cached result if found and valid, None otherwise
        """
        key = self._make_key(catalog_version, need_text, filter_parts, limit)

        if key not in self.cache:
            self.misses += 1
            return None

        result, timestamp = self.cache[key]

        if time.time() - timestamp > self.ttl_seconds:
            del self.cache[key]
            self.misses += 1
            return None

        self.cache.move_to_end(key)
        self.hits += 1
        return result

    def put(self, catalog_version: str, need_text: str, filter_parts: List[str], result: Any, limit: Optional[int] = None) -> None:
        """Store a result in the cache."""
        key = self._make_key(catalog_version, need_text, filter_parts, limit)

        if len(self.cache) >= self.max_size and key not in self.cache:
            self.cache.popitem(last=False)

        self.cache[key] = (result, time.time())
        self.cache.move_to_end(key)

    def clear(self) -> None:
        """Clear all cache entries."""
        self.cache.clear()
        self.hits = 0
        self.misses = 0

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        total = self.hits + self.misses
        hit_rate = self.hits / total if total > 0 else 0
        return {
            "size": len(self.cache),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(hit_rate, 3),
            "ttl_seconds": self.ttl_seconds,
        }


# Global cache instance (initialized after config is parsed)
_query_cache: Optional[QueryCache] = None


def get_query_cache() -> Optional[QueryCache]:
    """Get the global query cache instance if caching is enabled."""
    from pattern_catalog_mcp.core.config import CACHE_ENABLED
    return _query_cache if CACHE_ENABLED else None


def init_query_cache(max_size: int, ttl_seconds: int) -> None:
    """Initialize the global query cache.

    Args:
        max_size: Maximum number of entries to cache
        ttl_seconds: Time-to-live for cache entries in seconds
    """
    global _query_cache
    _query_cache = QueryCache(max_size=max_size, ttl_seconds=ttl_seconds)
