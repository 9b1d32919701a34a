"""Genre affinity edges: link artists that share at least one genre tag."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

from listengraph.models.network import UNKNOWN_GENRE, Edge, EdgeKind, Node, edge_key

# Each shared genre counts twice a single proximity co-occurrence.
GENRE_WEIGHT_MULTIPLIER = 2


def shared_genres(first: Node, second: Node) -> list[str]:
    """Genres present on both nodes, in *first*'s order.

    The ``"Unknown"`` sentinel never matches, so two artists with no
    genre information are not linked.
    """
    other = set(second.genres or ())
    return [g for g in first.genres or () if g != UNKNOWN_GENRE and g in other]


def build_genre_edges(nodes: Sequence[Node]) -> list[Edge]:
    """Emit one ``genre`` edge per node pair with a non-empty genre overlap.

    O(n²) in the number of nodes; ``max_artists`` is what keeps n small.
    """
    edges: list[Edge] = []
    for first, second in combinations(nodes, 2):
        if first.id == second.id:
            continue
        shared = shared_genres(first, second)
        if not shared:
            continue
        source, target = edge_key(first.id, second.id)
        edges.append(
            Edge(
                source=source,
                target=target,
                weight=len(shared) * GENRE_WEIGHT_MULTIPLIER,
                kind=EdgeKind.GENRE,
                shared_genres=shared,
            )
        )
    return edges
