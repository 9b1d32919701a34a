"""Edge merging: fold genre and proximity edges into one edge per artist pair.

Edges are keyed by their canonical :data:`PairKey`, so ``(A, B)`` and
``(B, A)`` land on the same entry.  Combining two edges for the same pair
sums their weights and unions their kinds (genre + proximity = both).
Every edge, whichever list it came from, goes through the same
``_combine`` step, which makes the fold commutative: merging proximity
edges first yields exactly the same result as merging genre edges first.
"""

from __future__ import annotations

from collections.abc import Iterable

from listengraph.models.network import DEFAULT_MIN_EDGE_WEIGHT, Edge, PairKey


def _union(first: list[str] | None, second: list[str] | None) -> list[str] | None:
    if first is None:
        return second
    if second is None:
        return first
    return first + [g for g in second if g not in first]


def _sum_scores(first: int | None, second: int | None) -> int | None:
    if first is None:
        return second
    if second is None:
        return first
    return first + second


def _combine(existing: Edge, incoming: Edge) -> Edge:
    return existing.model_copy(
        update={
            "weight": existing.weight + incoming.weight,
            "kind": existing.kind.combine(incoming.kind),
            "shared_genres": _union(existing.shared_genres, incoming.shared_genres),
            "proximity_score": _sum_scores(existing.proximity_score, incoming.proximity_score),
        }
    )


def merge_edges(
    *edge_lists: Iterable[Edge],
    min_edge_weight: float = DEFAULT_MIN_EDGE_WEIGHT,
) -> list[Edge]:
    """Merge any number of edge lists and drop edges below *min_edge_weight*.

    Returned edges carry their endpoints in canonical order and are sorted
    by weight (heaviest first), then by pair key, for stable output.
    """
    registry: dict[PairKey, Edge] = {}

    for edges in edge_lists:
        for edge in edges:
            key = edge.key
            canonical = edge
            if (edge.source, edge.target) != key:
                canonical = edge.model_copy(update={"source": key[0], "target": key[1]})

            existing = registry.get(key)
            registry[key] = canonical if existing is None else _combine(existing, canonical)

    merged = [e for e in registry.values() if e.weight >= min_edge_weight]
    merged.sort(key=lambda e: (-e.weight, e.key))
    return merged
