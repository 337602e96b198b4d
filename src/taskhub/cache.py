"""In-process key/value cache with per-entry expiry.

Used by the API layer as a read-through passthrough for single-entity
lookups. Entries expire after the configured TTL; there is no invalidation
protocol beyond explicit ``set``/``delete`` on writes and TTL expiry.

Designed for single-threaded asyncio usage (the FastAPI event loop).
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

KEY_PREFIX = "taskhub"


@dataclass
class CacheStats:
    """Cache statistics for the status endpoint."""

    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int


class TTLCache:
    """Key/value cache where every entry lives for ``ttl_seconds``.

    When more than ``max_size`` entries are stored, the oldest is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")

        self._ttl = ttl_seconds
        self._max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @staticmethod
    def generate_key(*parts: object) -> str:
        """Build a namespaced key, e.g. ``taskhub:task:3:user:1``."""
        return ":".join([KEY_PREFIX, *(str(part) for part in parts)])

    def get(self, key: str) -> Any | None:
        """Get a live value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            self._misses += 1
            return None

        self._hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        """Store a value for ``ttl_seconds``."""
        self._entries[key] = (self._clock() + self._ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_size:
            evicted, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted cache entry {evicted}")

    def delete(self, key: str) -> None:
        """Drop a key if present."""
        self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``. Returns how many were dropped."""
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def ping(self) -> bool:
        """Round-trip a probe value, as the status endpoint does."""
        key = self.generate_key("test", "status")
        self.set(key, True)
        alive = self.get(key) is True
        self.delete(key)
        return alive

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            max_size=self._max_size,
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
        )


async def read_through(
    cache: TTLCache | None, key: str, loader: Callable[[], Awaitable[Any]]
) -> Any:
    """Return the cached value for ``key``, loading and storing it on a miss.

    With no cache configured this is just ``await loader()``.
    """
    if cache is None:
        return await loader()

    value = cache.get(key)
    if value is None:
        value = await loader()
        cache.set(key, value)
    return value
