"""Temporal proximity edges: artists played close together in time.

Two listens co-occur when they are at most ``window`` apart.  Every
co-occurring pair of listens by *different* artists adds one to that
artist pair's score.

The scan is a two-pointer sliding window over the time-sorted events::

    events:   e0   e1   e2   e3   e4 ...
                    ^left          ^right

For each ``right`` the ``left`` pointer only moves forward, dropping
events more than ``window`` older than ``events[right]``.  Everything in
``[left, right)`` is inside the window and pairs with ``events[right]``.
Because timestamps are sorted, ``left`` never moves back and the whole
pass touches each event as a window boundary at most twice.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Collection, Iterable
from datetime import timedelta

from listengraph.models.listening import ListenEvent
from listengraph.models.network import Edge, EdgeKind, PairKey, edge_key
from listengraph.utils.errors import ConfigurationError


def proximity_window(minutes: float) -> timedelta:
    """Convert a window in minutes to a ``timedelta``.

    Non-positive and non-finite values raise :class:`ConfigurationError`.
    A window too large for ``timedelta`` becomes ``timedelta.max``, under
    which every pair of listens co-occurs.
    """
    if not math.isfinite(minutes) or minutes <= 0:
        msg = f"proximity_window_minutes must be a positive finite number, got {minutes}"
        raise ConfigurationError(msg)
    try:
        return timedelta(minutes=minutes)
    except OverflowError:
        return timedelta.max


def count_cooccurrences(
    events: Iterable[ListenEvent],
    node_ids: Collection[str],
    window: timedelta,
) -> Counter[PairKey]:
    """Count windowed co-occurrences per canonical artist pair.

    Events for artists outside *node_ids* are discarded before the scan,
    so they neither produce edges nor occupy window slots.
    """
    timeline = sorted(
        (e for e in events if e.artist_id in node_ids),
        key=lambda e: e.played_at,
    )
    counts: Counter[PairKey] = Counter()

    left = 0
    for right, current in enumerate(timeline):
        while current.played_at - timeline[left].played_at > window:
            left += 1
        for i in range(left, right):
            other = timeline[i].artist_id
            if other != current.artist_id:
                counts[edge_key(other, current.artist_id)] += 1

    return counts


def build_proximity_edges(
    events: Iterable[ListenEvent],
    node_ids: Collection[str],
    window_minutes: float,
) -> list[Edge]:
    """Emit one ``proximity`` edge per artist pair that co-occurred.

    ``weight`` and ``proximity_score`` both equal the co-occurrence count.
    Empty or single-event input yields no edges.
    """
    window = proximity_window(window_minutes)
    counts = count_cooccurrences(events, set(node_ids), window)
    return [
        Edge(
            source=source,
            target=target,
            weight=count,
            kind=EdgeKind.PROXIMITY,
            proximity_score=count,
        )
        for (source, target), count in counts.items()
    ]
