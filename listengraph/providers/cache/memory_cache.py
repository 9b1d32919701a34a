"""Process-local ICacheProvider on top of ``cachetools.TTLCache``.

Every entry shares the cache-wide TTL; genre tags are stable enough that
per-key expiry is not needed.  Hit and miss counters are kept so the
effectiveness of the genre cache can be logged.
"""

from __future__ import annotations

from typing import Any

import structlog
from cachetools import TTLCache

from listengraph.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """TTL + LRU-bounded in-memory cache.

    Parameters
    ----------
    max_size:
        Entry limit; the least recently used key is evicted beyond it.
    ttl:
        Seconds an entry stays readable after it was written.
    """

    def __init__(self, max_size: int = 1000, ttl: int = 3600) -> None:
        self._entries: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl)
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def stats(self) -> dict[str, int]:
        return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}

    async def get(self, key: str) -> Any | None:
        try:
            value = self._entries[key]
        except KeyError:
            self._misses += 1
            return None
        self._hits += 1
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        # TTLCache has a single TTL, so a per-call ttl is ignored.
        self._entries[key] = value

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self._entries

    async def clear(self) -> None:
        dropped = len(self._entries)
        self._entries.clear()
        logger.debug("cache_cleared", dropped=dropped, **self.stats)
