"""Artist network service: listening history → artist relationship graph.

Pipeline for a single build::

    events ─► node aggregator ─► nodes ─┬─► genre edges ─────┐
                                        └─► proximity edges ─┴─► merger ─► assembler ─► Graph

Architecture:
    - Depends on IListenEventSource (listening history) and IGenreResolver
      (genre tags), both injected via the constructor.
    - The two collaborator calls complete before the graph algorithm
      starts; everything after them is plain synchronous computation.
    - Intermediate state lives in local variables of one call, so a single
      service instance can serve concurrent requests.

Errors raised by the collaborators propagate to the caller unchanged.
Invalid parameters raise ConfigurationError before any data is fetched.
"""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Sequence

import structlog

from listengraph.interfaces.genre_resolver import IGenreResolver
from listengraph.interfaces.listen_source import IListenEventSource
from listengraph.models.listening import EventQuery
from listengraph.models.network import ArtistAggregate, Graph, NetworkParams
from listengraph.services.edge_merger import merge_edges
from listengraph.services.genre_edges import build_genre_edges
from listengraph.services.graph_assembler import assemble_graph
from listengraph.services.node_aggregator import aggregate_artists, build_nodes, select_artists
from listengraph.services.proximity_edges import build_proximity_edges
from listengraph.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def validate_params(params: NetworkParams) -> None:
    """Raise :class:`ConfigurationError` for out-of-range parameters."""
    window = params.proximity_window_minutes
    if not math.isfinite(window) or window <= 0:
        msg = f"proximity_window_minutes must be a positive finite number, got {window}"
        raise ConfigurationError(msg)
    if params.max_artists is not None and params.max_artists <= 0:
        msg = f"max_artists must be a positive integer, got {params.max_artists}"
        raise ConfigurationError(msg)
    if params.min_play_count < 0:
        msg = f"min_play_count must be non-negative, got {params.min_play_count}"
        raise ConfigurationError(msg)
    if math.isnan(params.min_edge_weight) or params.min_edge_weight < 0:
        msg = f"min_edge_weight must be non-negative, got {params.min_edge_weight}"
        raise ConfigurationError(msg)
    if (
        params.start_date is not None
        and params.end_date is not None
        and params.start_date > params.end_date
    ):
        msg = (
            f"start_date {params.start_date.isoformat()} is after "
            f"end_date {params.end_date.isoformat()}"
        )
        raise ConfigurationError(msg)


class ArtistNetworkService:
    """Builds artist network graphs from an injected event source and genre resolver."""

    def __init__(
        self,
        listen_source: IListenEventSource,
        genre_resolver: IGenreResolver,
    ) -> None:
        self._listen_source = listen_source
        self._genre_resolver = genre_resolver

    async def build_artist_network_graph(self, params: NetworkParams | None = None) -> Graph:
        """Build the artist network for *params* (defaults when ``None``).

        Steps:
            1. Validate parameters.
            2. Fetch the user's listens for the date range.
            3. Aggregate plays per artist, filter and rank.
            4. Resolve genres for the selected artists only.
            5. Build genre and proximity edges over the closed node set.
            6. Merge edges and drop those under min_edge_weight.
            7. Assemble nodes, edges and metadata.
        """
        params = params or NetworkParams()
        validate_params(params)
        started = time.perf_counter()

        query = EventQuery(
            user_id=params.user_id,
            start_date=params.start_date,
            end_date=params.end_date,
        )
        events = await self._listen_source.fetch_listen_events(query)

        selected = select_artists(
            aggregate_artists(events),
            min_play_count=params.min_play_count,
            max_artists=params.max_artists,
        )
        resolved = await self._resolve_genres(selected)
        nodes = build_nodes(selected, resolved)
        node_ids = {n.id for n in nodes}

        genre_edges = build_genre_edges(nodes)
        proximity_edges = build_proximity_edges(
            events,
            node_ids,
            params.proximity_window_minutes,
        )
        edges = merge_edges(
            genre_edges,
            proximity_edges,
            min_edge_weight=params.min_edge_weight,
        )

        graph = assemble_graph(nodes, edges, params.start_date, params.end_date)

        logger.info(
            "artist_network_built",
            user_id=params.user_id,
            listen_source=self._listen_source.get_provider_name(),
            genre_resolver=self._genre_resolver.get_provider_name(),
            events=len(events),
            artists=len(nodes),
            genre_edges=len(genre_edges),
            proximity_edges=len(proximity_edges),
            connections=len(edges),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return graph

    async def _resolve_genres(
        self,
        selected: Sequence[ArtistAggregate],
    ) -> dict[str, list[str]]:
        """Look up genres for every selected artist concurrently."""
        results = await asyncio.gather(
            *(
                self._genre_resolver.genres_for(agg.artist_id, agg.display_name)
                for agg in selected
            )
        )
        return {agg.artist_id: list(genres) for agg, genres in zip(selected, results)}
