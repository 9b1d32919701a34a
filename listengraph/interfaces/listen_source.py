"""Abstract base class for listening-history event sources.

An event source turns an :class:`EventQuery` into the user's listen
events.  Implementations may read SQLite, PostgreSQL, a Last.fm export or
an in-memory list; the graph core only sees this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from listengraph.models.listening import EventQuery, ListenEvent


# Concrete implementations: SQLiteListenSource, InMemoryListenSource
# (listengraph/providers/listens/).
class IListenEventSource(ABC):
    """Contract for listen event sources.

    Reads must be safe to run concurrently: each graph build issues its own
    independent fetch and nothing in the core writes back.
    """

    @abstractmethod
    async def fetch_listen_events(self, query: EventQuery) -> list[ListenEvent]:
        """Return every listen matching *query*.

        Parameters
        ----------
        query:
            User and inclusive date bounds.  ``None`` fields are unbounded.

        Returns
        -------
        list[ListenEvent]
            Matching events, in any order.  The graph core sorts by
            ``played_at`` itself before the proximity scan.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logging, e.g. ``"sqlite-listens"``."""
