"""
Caching infrastructure for QuranLife.

Thematic collections are cached per theme with a time-based expiry; the
cache is injectable so tests can drive the clock instead of waiting.

Usage:
    from quranlife.cache import TTLCache, make_cache_key

    cache = TTLCache(maxsize=64, ttl_seconds=300)
    cache.set(make_cache_key("thematic", "patience"), collection)
    result = cache.get(make_cache_key("thematic", "patience"))

Invalidation is time-only in normal operation; ``invalidate``/``clear`` exist
for tests and administrative tooling.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Generic, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

T = TypeVar("T")

# =============================================================================
# Cache Protocol
# =============================================================================


@runtime_checkable
class CacheBackend(Protocol[T]):
    """Protocol defining the interface for cache backends.

    All cache implementations should conform to this protocol to ensure
    consistent behavior across the codebase.
    """

    def get(self, key: str) -> T | None:
        """Get a value from cache if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        ...

    def set(self, key: str, value: T) -> None:
        """Store a value in cache.

        Args:
            key: Cache key
            value: Value to store
        """
        ...

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific key.

        Returns:
            True if key was found and removed
        """
        ...

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries cleared
        """
        ...

    @property
    def stats(self) -> dict[str, Any]:
        """Get cache statistics (size, maxsize, ttl_seconds, hits, misses, hit_rate)."""
        ...


# =============================================================================
# In-memory implementation
# =============================================================================


class TTLCache(Generic[T]):
    """In-memory LRU cache with TTL expiry (thread-safe).

    Entries are stored with the time they were written; a read after
    ``ttl_seconds`` have elapsed is a miss and drops the entry. Concurrent
    writers for the same key are last-writer-wins.
    """

    def __init__(
        self,
        maxsize: int = 128,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, T]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                logger.debug("Cache entry expired: %s", key)
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted LRU entry: %s", evicted)

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    @property
    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "maxsize": self.maxsize,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total else 0.0,
            }


# =============================================================================
# Cache Key Utilities
# =============================================================================


def make_cache_key(*parts: str, separator: str = ":", max_length: int = 250) -> str:
    """Generate a collision-safe cache key from multiple parts.

    Args:
        *parts: Components of the cache key (e.g., "thematic", theme)
        separator: Character to join parts (default ":")
        max_length: Maximum key length before the key is hashed

    Returns:
        A safe cache key string

    Example:
        >>> make_cache_key("thematic", "patience")
        'thematic:patience'
    """
    clean_parts = [str(p).strip() for p in parts if p is not None and str(p).strip()]

    if not clean_parts:
        raise ValueError("At least one non-empty cache key part is required")

    clean_parts = [p.replace(" ", "_").replace("\n", "_") for p in clean_parts]

    key = separator.join(clean_parts)

    if len(key) > max_length:
        prefix = clean_parts[0][:50]
        content_hash = hashlib.sha256(key.encode()).hexdigest()[:32]
        key = f"{prefix}{separator}hash_{content_hash}"

    return key


__all__ = [
    "CacheBackend",
    "TTLCache",
    "make_cache_key",
]
