"""Lightweight in-memory TTL cache for read-mostly queries.

Used for group lookups, unfiltered bookmark listings and places searches,
where identical requests within a short window should not hit the database
or the upstream API again.

Each server process owns its own instance (created in ``create_app`` and
stored on ``app.state.cache``). With several uvicorn workers a write
invalidation in one worker is invisible to the others until the entry
expires there too.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Default TTL in milliseconds
DEFAULT_TTL_MS = 30_000

# How often the background sweep runs, in seconds
DEFAULT_CLEANUP_INTERVAL = 300

KEY_DELIMITER = ":"


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    ttl_ms: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl_ms


class TTLCache:
    """Thread-safe key/value store with per-entry expiry.

    ``clock`` returns the current time in milliseconds; tests inject a fake
    one to step over expiry boundaries deterministically.
    """

    def __init__(self, clock: Callable[[], float] = _monotonic_ms) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any | None:
        """Return the cached value if present and not expired, else None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_ms: float = DEFAULT_TTL_MS) -> None:
        """Store a value, replacing any existing entry for ``key``."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl_ms=ttl_ms)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Evict every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    async def get_or_set(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[Any]],
        ttl_ms: float = DEFAULT_TTL_MS,
    ) -> Any:
        """Return the live cached value, or await ``fetcher`` and cache its result.

        Exceptions from ``fetcher`` propagate and leave the cache untouched.
        Concurrent misses on the same key each call ``fetcher``; the last
        one to finish wins the slot.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = await fetcher()
        self.set(key, value, ttl_ms)
        return value


def generate_cache_key(prefix: str, *params: str | int | float | bool | None) -> str:
    """Build ``prefix:p1:p2...`` skipping params that are None."""
    return f"{prefix}{KEY_DELIMITER}" + KEY_DELIMITER.join(
        str(p) for p in params if p is not None
    )


async def run_periodic_cleanup(
    cache: TTLCache,
    interval_seconds: float = DEFAULT_CLEANUP_INTERVAL,
) -> None:
    """Sweep expired entries every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = cache.cleanup()
        if removed:
            logger.debug("Cache sweep evicted %d expired entries", removed)
