"""Abstract base class for artist genre lookups.

The graph core asks a resolver for the genre tags of each selected artist.
The resolver is injected, so a static table can be swapped for a
metadata-API-backed lookup without touching the graph algorithm.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: StaticGenreResolver, CachedGenreResolver
# (listengraph/providers/genre/).
class IGenreResolver(ABC):
    """Contract for genre resolvers.

    A miss is not an error: unknown artists resolve to an empty list.
    Backend failures may raise; the graph core does not catch them.
    """

    @abstractmethod
    async def genres_for(
        self,
        artist_id: str,
        artist_name: str | None = None,
    ) -> list[str]:
        """Return the genre tags for an artist, primary genre first.

        Parameters
        ----------
        artist_id:
            Stable artist identifier from the event source.
        artist_name:
            Display name, for resolvers keyed by name.

        Returns
        -------
        list[str]
            Ordered, de-duplicated tags; empty when nothing is known.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logging, e.g. ``"static-genres"``."""
