"""In-memory cache with per-entry time-to-live.

Used for the page revalidation window: the whole match list for a scope is
recomputed at most once per TTL. There is no invalidation hook besides
``clear()``; entries simply expire.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


def make_cache_key(*parts: Any) -> str:
    """Build a cache key from the non-null parts, joined with ':'."""
    return ":".join(str(part) for part in parts if part is not None)


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """Thread-safe dict of values that expire ``ttl`` seconds after being set."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[key] = CacheEntry(value, self._clock() + ttl_seconds)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            now = self._clock()
            live = sum(1 for entry in self._entries.values() if entry.expires_at > now)
            return {"hits": self._hits, "misses": self._misses, "size": live}

    def __len__(self) -> int:
        return self.stats()["size"]


# Process-wide cache shared by every MatchService that is not given its own
page_cache = TTLCache()
