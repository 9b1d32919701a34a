"""In-memory listen event source.

Holds ``(user_id, ListenEvent)`` pairs in a list.  Used by tests and by
callers that already have listening history loaded (e.g. from a parsed
export file).
"""

from __future__ import annotations

from collections.abc import Iterable

from listengraph.interfaces.listen_source import IListenEventSource
from listengraph.models.listening import EventQuery, ListenEvent


class InMemoryListenSource(IListenEventSource):
    """List-backed IListenEventSource.

    Events added without a user id match every ``user_id`` filter only
    when the query leaves ``user_id`` unset.
    """

    def __init__(self, events: Iterable[ListenEvent] = (), user_id: str | None = None) -> None:
        self._rows: list[tuple[str | None, ListenEvent]] = [(user_id, e) for e in events]

    def add(self, events: Iterable[ListenEvent], user_id: str | None = None) -> int:
        before = len(self._rows)
        self._rows.extend((user_id, e) for e in events)
        return len(self._rows) - before

    async def fetch_listen_events(self, query: EventQuery) -> list[ListenEvent]:
        matched: list[ListenEvent] = []
        for user_id, event in self._rows:
            if query.user_id is not None and user_id != query.user_id:
                continue
            if query.start_date is not None and event.played_at < query.start_date:
                continue
            if query.end_date is not None and event.played_at > query.end_date:
                continue
            matched.append(event)
        return matched

    def get_provider_name(self) -> str:
        return "memory-listens"
