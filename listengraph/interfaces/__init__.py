"""Public interface definitions for every external collaborator.

The graph core reaches listening history and genre metadata exclusively
through the abstract base classes defined here.  Concrete adapters live in
``listengraph/providers/`` and are wired together in ``listengraph/main.py``
(or by the CLI for one-shot runs).

    Interface             →  Concrete implementations
    ─────────────────────────────────────────────────────────────
    IListenEventSource    →  SQLiteListenSource, InMemoryListenSource
    IGenreResolver        →  StaticGenreResolver, CachedGenreResolver
    ICacheProvider        →  MemoryCacheProvider
"""

from listengraph.interfaces.cache_provider import ICacheProvider
from listengraph.interfaces.genre_resolver import IGenreResolver
from listengraph.interfaces.listen_source import IListenEventSource

__all__ = [
    "ICacheProvider",
    "IGenreResolver",
    "IListenEventSource",
]
