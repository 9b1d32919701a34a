"""End-to-end invariant checks over generated listening histories.

Each seed produces a random but reproducible history that runs through the
full pipeline: in-memory source, cached static resolver, service.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from listengraph.models.listening import ListenEvent
from listengraph.models.network import Graph, NetworkParams
from listengraph.providers.cache.memory_cache import MemoryCacheProvider
from listengraph.providers.genre.cached_genre_resolver import CachedGenreResolver
from listengraph.providers.genre.static_genre_resolver import StaticGenreResolver
from listengraph.providers.listens.memory_listen_source import InMemoryListenSource
from listengraph.services.artist_network_service import ArtistNetworkService
from listengraph.services.edge_merger import merge_edges
from listengraph.services.genre_edges import build_genre_edges
from listengraph.services.node_aggregator import aggregate_nodes
from listengraph.services.proximity_edges import build_proximity_edges

SEEDS = [1, 7, 42, 1999, 31337]
ARTISTS = [f"artist-{i:02d}" for i in range(12)]
GENRES = ["Pop", "Rock", "Jazz", "Techno", "Folk"]
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _history(seed: int, size: int = 150) -> list[ListenEvent]:
    rng = random.Random(seed)
    events = []
    for _ in range(size):
        artist = rng.choice(ARTISTS)
        events.append(
            ListenEvent(
                artist_id=artist,
                artist_name=artist.upper(),
                played_at=T0 + timedelta(minutes=rng.randint(0, 60 * 24 * 3)),
            )
        )
    return events


def _genre_table(seed: int) -> dict[str, list[str]]:
    rng = random.Random(seed * 31)
    # Some artists deliberately have no genre at all.
    return {a: rng.sample(GENRES, rng.randint(0, 2)) for a in ARTISTS}


def _service(seed: int) -> ArtistNetworkService:
    resolver = CachedGenreResolver(
        StaticGenreResolver(_genre_table(seed)), MemoryCacheProvider()
    )
    return ArtistNetworkService(InMemoryListenSource(_history(seed)), resolver)


def _assert_well_formed(graph: Graph) -> None:
    node_ids = {n.id for n in graph.nodes}
    keys = [e.key for e in graph.edges]

    assert len(keys) == len(set(keys))
    for edge in graph.edges:
        assert edge.source != edge.target
        assert edge.source in node_ids
        assert edge.target in node_ids
        assert edge.source < edge.target
    assert graph.metadata.total_artists == len(graph.nodes)
    assert graph.metadata.total_connections == len(graph.edges)


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", SEEDS)
async def test_graph_is_well_formed(seed: int) -> None:
    graph = await _service(seed).build_artist_network_graph(
        NetworkParams(max_artists=8, proximity_window_minutes=45)
    )
    _assert_well_formed(graph)
    assert len(graph.nodes) <= 8


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", SEEDS)
async def test_min_play_count_is_monotone(seed: int) -> None:
    service = _service(seed)
    sizes = []
    for threshold in range(0, 25, 3):
        graph = await service.build_artist_network_graph(NetworkParams(min_play_count=threshold))
        _assert_well_formed(graph)
        sizes.append(len(graph.nodes))

    assert sizes == sorted(sizes, reverse=True)


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", SEEDS)
async def test_builds_are_idempotent(seed: int) -> None:
    service = _service(seed)
    params = NetworkParams(min_play_count=2, proximity_window_minutes=20)

    first = await service.build_artist_network_graph(params)
    second = await service.build_artist_network_graph(params)

    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", SEEDS)
async def test_merge_order_does_not_matter(seed: int) -> None:
    events = _history(seed)
    resolver = StaticGenreResolver(_genre_table(seed))
    resolved = {a: await resolver.genres_for(a) for a in ARTISTS}
    nodes = aggregate_nodes(events, resolved, min_play_count=3)
    node_ids = {n.id for n in nodes}

    genre = build_genre_edges(nodes)
    proximity = build_proximity_edges(events, node_ids, 30)

    assert merge_edges(genre, proximity) == merge_edges(proximity, genre)
    assert merge_edges(genre, proximity) == merge_edges(
        list(reversed(proximity)), list(reversed(genre))
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("seed", SEEDS)
async def test_shuffled_history_gives_same_edges(seed: int) -> None:
    events = _history(seed)
    shuffled = list(events)
    random.Random(seed + 1).shuffle(shuffled)
    node_ids = set(ARTISTS)

    ordered = merge_edges(build_proximity_edges(events, node_ids, 30))
    scrambled = merge_edges(build_proximity_edges(shuffled, node_ids, 30))

    assert ordered == scrambled
