"""listengraph domain models.

    - listening.py  — listen events and the typed event query
    - network.py    — graph nodes, edges, metadata and build parameters
"""

from __future__ import annotations

from listengraph.models.listening import EventQuery, ListenEvent
from listengraph.models.network import (
    UNKNOWN_GENRE,
    ArtistAggregate,
    DateRange,
    Edge,
    EdgeKind,
    Graph,
    GraphMetadata,
    NetworkParams,
    Node,
    PairKey,
    edge_key,
)

__all__ = [
    "UNKNOWN_GENRE",
    "ArtistAggregate",
    "DateRange",
    "Edge",
    "EdgeKind",
    "EventQuery",
    "Graph",
    "GraphMetadata",
    "ListenEvent",
    "NetworkParams",
    "Node",
    "PairKey",
    "edge_key",
]
