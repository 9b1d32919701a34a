from typing import Any

from listengraph.config.loader import genre_table
from listengraph.interfaces.genre_resolver import IGenreResolver
from listengraph.providers.cache.memory_cache import MemoryCacheProvider
from listengraph.providers.genre.cached_genre_resolver import CachedGenreResolver
from listengraph.providers.genre.static_genre_resolver import StaticGenreResolver


def build_genre_resolver(config: dict[str, Any]) -> IGenreResolver:
    """Static table resolver from *config*, wrapped in a TTL cache when enabled."""
    resolver: IGenreResolver = StaticGenreResolver(genre_table(config))
    genres_cfg = config.get("genres", {})
    if genres_cfg.get("cache_enabled", True):
        cache = MemoryCacheProvider(
            max_size=genres_cfg.get("cache_max_size", 5000),
            ttl=genres_cfg.get("cache_ttl", 3600),
        )
        resolver = CachedGenreResolver(resolver, cache)
    return resolver


__all__ = ["CachedGenreResolver", "StaticGenreResolver", "build_genre_resolver"]
