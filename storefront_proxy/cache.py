"""In-process TTL cache for read-only Storefront API responses."""

import json
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and its expiry, in clock milliseconds."""
    data: Any
    expires_at: float


class ResponseCache:
    """
    Simple TTL-based cache keyed by (query, variables).

    Expiry is checked lazily on read; there is no background sweep. Reads
    and writes never suspend, so the cache is safe to share between tasks
    on a single event loop. Multi-threaded hosts must wrap it in a lock.
    """

    def __init__(
        self,
        default_ttl_ms: int = 60_000,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            default_ttl_ms: TTL applied when ``set`` is called without one
            max_entries: Optional capacity; the oldest entry is evicted first
            clock: Returns a monotonic time in seconds
        """
        self.default_ttl_ms = default_ttl_ms
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def _now_ms(self) -> float:
        return self._clock() * 1000

    @staticmethod
    def generate_key(query: str, variables: Optional[dict] = None) -> str:
        """Build a deterministic key from the query text and its variables."""
        return f"{query}:{json.dumps(variables or {}, sort_keys=True, separators=(',', ':'))}"

    def get(self, key: str) -> Optional[Any]:
        """Get cached value if not expired; expired entries are dropped."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._now_ms() >= entry.expires_at:
            del self._entries[key]
            return None

        return entry.data

    def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> None:
        """Insert or overwrite a value."""
        effective_ttl = ttl_ms if ttl_ms is not None else self.default_ttl_ms
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(data=value, expires_at=self._now_ms() + effective_ttl)

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, key: str) -> None:
        """Invalidate specific cache key."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cached values."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
