"""Static genre resolver backed by an injected artist → genres table.

The table normally comes from the ``genres.artists`` section of
``config/config.yaml``.  Keys may be artist ids or display names; both are
matched case-insensitively.  Values may be a single genre string or a
list of genres (primary first).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

import structlog

from listengraph.interfaces.genre_resolver import IGenreResolver

logger = structlog.get_logger(logger_name=__name__)


def _normalize_key(value: str) -> str:
    return " ".join(value.split()).casefold()


def _as_genre_list(value: str | Sequence[str] | None) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = [value]
    tags: list[str] = []
    for tag in value:
        tag = str(tag).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


class StaticGenreResolver(IGenreResolver):
    """Lookup-table genre resolver.

    The table is copied into a read-only mapping at construction so the
    resolver can be shared across requests.
    """

    def __init__(self, table: Mapping[str, str | Sequence[str]] | None = None) -> None:
        normalized: dict[str, tuple[str, ...]] = {}
        for key, value in (table or {}).items():
            genres = _as_genre_list(value)
            if genres:
                normalized[_normalize_key(str(key))] = genres
        self._table = MappingProxyType(normalized)

    def __len__(self) -> int:
        return len(self._table)

    async def genres_for(
        self,
        artist_id: str,
        artist_name: str | None = None,
    ) -> list[str]:
        for candidate in (artist_id, artist_name):
            if not candidate:
                continue
            genres = self._table.get(_normalize_key(candidate))
            if genres:
                return list(genres)
        logger.debug("genre_lookup_miss", artist_id=artist_id, artist_name=artist_name)
        return []

    def get_provider_name(self) -> str:
        return "static-genres"
