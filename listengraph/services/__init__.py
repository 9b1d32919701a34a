"""Graph-building services.

- node_aggregator        — listen events → ranked artist nodes
- genre_edges            — shared-genre affinity edges
- proximity_edges        — sliding-window listening proximity edges
- edge_merger            — one edge per artist pair, kinds unioned
- graph_assembler        — nodes + edges + metadata
- artist_network_service — the public entry point wiring the above
"""

from listengraph.services.artist_network_service import ArtistNetworkService, validate_params
from listengraph.services.edge_merger import merge_edges
from listengraph.services.genre_edges import GENRE_WEIGHT_MULTIPLIER, build_genre_edges
from listengraph.services.graph_assembler import assemble_graph, graph_summary
from listengraph.services.node_aggregator import (
    aggregate_artists,
    aggregate_nodes,
    build_nodes,
    select_artists,
)
from listengraph.services.proximity_edges import build_proximity_edges, count_cooccurrences

__all__ = [
    "GENRE_WEIGHT_MULTIPLIER",
    "ArtistNetworkService",
    "aggregate_artists",
    "aggregate_nodes",
    "assemble_graph",
    "build_genre_edges",
    "build_nodes",
    "build_proximity_edges",
    "count_cooccurrences",
    "graph_summary",
    "merge_edges",
    "select_artists",
    "validate_params",
]
