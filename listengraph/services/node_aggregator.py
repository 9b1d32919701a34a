"""Node aggregation: listen events → filtered, ranked artist nodes.

Three steps, kept separate so the service can resolve genres for the
selected artists only:

    1. aggregate_artists  — one pass over the events, counting plays
    2. select_artists     — min_play_count filter, rank, max_artists cap
    3. build_nodes        — merge resolved genres, pick the primary genre

Ranking is by play count descending.  Ties keep first-seen order in the
input, so the same events always produce the same node list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from listengraph.models.listening import ListenEvent
from listengraph.models.network import (
    DEFAULT_MIN_PLAY_COUNT,
    UNKNOWN_GENRE,
    ArtistAggregate,
    Node,
)


def aggregate_artists(events: Iterable[ListenEvent]) -> list[ArtistAggregate]:
    """Group *events* by artist and count plays.

    Returns aggregates in first-seen order.  Display name, image and
    external id come from the first event that carries them; track-level
    genre tags are collected in the order they are encountered.
    """
    registry: dict[str, ArtistAggregate] = {}

    for event in events:
        agg = registry.get(event.artist_id)
        if agg is None:
            agg = ArtistAggregate(
                artist_id=event.artist_id,
                display_name=event.artist_name or event.artist_id,
                first_seen=len(registry),
            )
            registry[event.artist_id] = agg
        elif event.artist_name and agg.display_name == agg.artist_id:
            agg.display_name = event.artist_name

        agg.play_count += 1
        agg.add_genre(event.genre)
        if agg.image_url is None and event.image_url:
            agg.image_url = event.image_url
        if agg.external_id is None and event.external_id:
            agg.external_id = event.external_id

    return list(registry.values())


def select_artists(
    aggregates: Sequence[ArtistAggregate],
    min_play_count: int = DEFAULT_MIN_PLAY_COUNT,
    max_artists: int | None = None,
) -> list[ArtistAggregate]:
    """Drop artists below *min_play_count*, rank, and keep the top *max_artists*."""
    kept = [a for a in aggregates if a.play_count >= min_play_count]
    # sorted() is stable; first_seen makes the tie-break explicit anyway.
    kept.sort(key=lambda a: (-a.play_count, a.first_seen))
    if max_artists is not None:
        kept = kept[:max_artists]
    return kept


def merge_genres(*sources: Iterable[str]) -> list[str]:
    """Concatenate genre lists, dropping blanks, duplicates and the sentinel."""
    merged: list[str] = []
    for source in sources:
        for genre in source:
            tag = genre.strip() if genre else ""
            if tag and tag != UNKNOWN_GENRE and tag not in merged:
                merged.append(tag)
    return merged


def build_nodes(
    selected: Sequence[ArtistAggregate],
    resolved_genres: Mapping[str, Sequence[str]] | None = None,
) -> list[Node]:
    """Create one :class:`Node` per selected artist, preserving rank order.

    Event-level genre tags come first, followed by any tags from
    *resolved_genres* (keyed by artist id).  An artist with no tags at all
    gets the ``"Unknown"`` primary genre and ``genres=None``.
    """
    resolved_genres = resolved_genres or {}
    nodes: list[Node] = []
    for agg in selected:
        genres = merge_genres(agg.genres, resolved_genres.get(agg.artist_id, ()))
        nodes.append(
            Node(
                id=agg.artist_id,
                name=agg.display_name,
                genre=genres[0] if genres else UNKNOWN_GENRE,
                genres=genres or None,
                play_count=agg.play_count,
                image_url=agg.image_url,
                external_id=agg.external_id,
            )
        )
    return nodes


def aggregate_nodes(
    events: Iterable[ListenEvent],
    resolved_genres: Mapping[str, Sequence[str]] | None = None,
    min_play_count: int = DEFAULT_MIN_PLAY_COUNT,
    max_artists: int | None = None,
) -> list[Node]:
    """Convenience wrapper running all three steps with pre-resolved genres."""
    selected = select_artists(
        aggregate_artists(events),
        min_play_count=min_play_count,
        max_artists=max_artists,
    )
    return build_nodes(selected, resolved_genres)
