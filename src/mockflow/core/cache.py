"""Generic LRU cache with optional TTL and statistics.

Used by the project store to keep recently loaded documents in memory.
"""

import time
from typing import Generic, TypeVar, Any
from collections import OrderedDict
from dataclasses import dataclass

T = TypeVar("T")


@dataclass
class Stats:
    """Cache statistics."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate (0.0 to 1.0)."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hit_rate,
        }


class LRUCache(Generic[T]):
    """
    Least-recently-used cache keyed by entity id.

    Examples:
        >>> cache = LRUCache[str](max_size=2)
        >>> cache.set("prj_1", "doc")
        >>> cache.get("prj_1")
        'doc'
    """

    def __init__(self, max_size: int = 100, ttl_seconds: int | None = None):
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds

        self._entries: OrderedDict[str, tuple[T, float]] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    def _is_expired(self, timestamp: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return time.monotonic() - timestamp >= self.ttl_seconds

    def get(self, key: str) -> T | None:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        value, timestamp = entry
        if self._is_expired(timestamp):
            del self._entries[key]
            self._stats.size = len(self._entries)
            self._stats.misses += 1
            return None

        self._entries.move_to_end(key)
        self._stats.hits += 1
        return value

    def set(self, key: str, value: T) -> None:
        """Insert or refresh an entry, evicting the least recently used."""
        self._entries.pop(key, None)
        self._entries[key] = (value, time.monotonic())

        if len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
            self._stats.evictions += 1

        self._stats.size = len(self._entries)

    def delete(self, key: str) -> bool:
        """Remove an entry; True if it existed."""
        if key in self._entries:
            del self._entries[key]
            self._stats.size = len(self._entries)
            return True
        return False

    def clear(self) -> None:
        """Clear entire cache."""
        self._entries.clear()
        self._stats.size = 0

    @property
    def stats(self) -> Stats:
        """Get cache statistics."""
        return self._stats

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Check if key exists (doesn't update LRU order)."""
        return key in self._entries


__all__ = ["LRUCache", "Stats"]
