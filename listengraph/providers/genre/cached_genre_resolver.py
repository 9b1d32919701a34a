"""Caching decorator for any IGenreResolver.

Genre tags change rarely, while graph builds repeat the same lookups for
every request.  Results (including empty misses) are stored in an
ICacheProvider under ``genres:<artist_id>``.
"""

from __future__ import annotations

import asyncio

import structlog

from listengraph.interfaces.cache_provider import ICacheProvider
from listengraph.interfaces.genre_resolver import IGenreResolver
from listengraph.utils.errors import GenreResolutionError

logger = structlog.get_logger(logger_name=__name__)

_KEY_PREFIX = "genres:"


class CachedGenreResolver(IGenreResolver):
    """Wraps *inner* and memoises its answers in *cache*.

    Failures of *inner* are never cached.  Transport failures (``OSError``
    and timeouts) are raised as :class:`GenreResolutionError`; anything
    else propagates unchanged.
    """

    def __init__(self, inner: IGenreResolver, cache: ICacheProvider) -> None:
        self._inner = inner
        self._cache = cache

    async def genres_for(
        self,
        artist_id: str,
        artist_name: str | None = None,
    ) -> list[str]:
        key = f"{_KEY_PREFIX}{artist_id}"
        cached = await self._cache.get(key)
        if cached is not None:
            return list(cached)

        try:
            genres = await self._inner.genres_for(artist_id, artist_name)
        except (OSError, asyncio.TimeoutError) as exc:
            provider = self._inner.get_provider_name()
            logger.warning(
                "genre_lookup_failed",
                artist_id=artist_id,
                provider=provider,
                error=str(exc),
            )
            raise GenreResolutionError(
                f"Genre lookup for {artist_id!r} failed: {exc}",
                provider_name=provider,
            ) from exc
        # Stored as a tuple so an empty miss is still a non-None cache value.
        await self._cache.set(key, tuple(genres))
        return list(genres)

    @property
    def cache_stats(self) -> dict[str, int] | None:
        """Hit/miss counters of the backing cache, when it keeps any."""
        return getattr(self._cache, "stats", None)

    def get_provider_name(self) -> str:
        return f"cached:{self._inner.get_provider_name()}"
