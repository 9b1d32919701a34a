"""Graph assembly: pair the final nodes and edges with summary metadata."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from listengraph.models.network import (
    DateRange,
    Edge,
    EdgeKind,
    Graph,
    GraphMetadata,
    Node,
)
from listengraph.utils.errors import GraphBuildError


def assemble_graph(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> Graph:
    """Build the final :class:`Graph`.

    ``date_range`` is set only when both *start_date* and *end_date* are
    given.  Every edge endpoint must be one of *nodes*.
    """
    node_ids = {n.id for n in nodes}
    dangling = [e.key for e in edges if e.source not in node_ids or e.target not in node_ids]
    if dangling:
        msg = f"{len(dangling)} edge(s) reference artists outside the node set: {dangling[:3]}"
        raise GraphBuildError(msg)

    date_range = None
    if start_date is not None and end_date is not None:
        date_range = DateRange(start=start_date, end=end_date)

    return Graph(
        nodes=list(nodes),
        edges=list(edges),
        metadata=GraphMetadata(
            total_artists=len(nodes),
            total_connections=len(edges),
            date_range=date_range,
        ),
    )


def graph_summary(graph: Graph, top_n: int = 5) -> dict[str, Any]:
    """Headline statistics for a graph, used by the CLI text report."""
    kinds = Counter(e.kind for e in graph.edges)
    degree: Counter[str] = Counter()
    for edge in graph.edges:
        degree[edge.source] += 1
        degree[edge.target] += 1

    names = {n.id: n.name for n in graph.nodes}
    return {
        "total_artists": graph.metadata.total_artists,
        "total_connections": graph.metadata.total_connections,
        "edge_kinds": {kind.value: kinds.get(kind, 0) for kind in EdgeKind},
        "top_artists": [(n.name, n.play_count) for n in graph.nodes[:top_n]],
        "most_connected": [
            (names[artist_id], count)
            for artist_id, count in sorted(degree.items(), key=lambda kv: (-kv[1], kv[0]))[:top_n]
        ],
    }
