"""Shared pytest fixtures for the listengraph test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from listengraph.models.listening import ListenEvent
from listengraph.providers.genre.static_genre_resolver import StaticGenreResolver
from listengraph.providers.listens.memory_listen_source import InMemoryListenSource
from listengraph.services.artist_network_service import ArtistNetworkService

BASE_TIME = datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc)


def make_listen(artist_id: str, minute: float = 0, **fields: Any) -> ListenEvent:
    """A listen of *artist_id* at ``BASE_TIME + minute``.

    ``artist_name`` defaults to the id so nodes get a readable name.
    """
    fields.setdefault("artist_name", artist_id)
    return ListenEvent(
        artist_id=artist_id,
        played_at=BASE_TIME + timedelta(minutes=minute),
        **fields,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def listen() -> Callable[..., ListenEvent]:
    """Factory fixture wrapping :func:`make_listen`."""
    return make_listen


@pytest.fixture
def genre_table() -> dict[str, Any]:
    return {
        "A": "Pop",
        "B": ["Pop", "Dance"],
        "C": "Jazz",
        "D": ["Dance", "Pop"],
    }


@pytest.fixture
def genre_resolver(genre_table: dict[str, Any]) -> StaticGenreResolver:
    return StaticGenreResolver(genre_table)


@pytest.fixture
def make_service(
    genre_resolver: StaticGenreResolver,
) -> Callable[..., ArtistNetworkService]:
    """Build an ArtistNetworkService over an in-memory listen source."""

    def _factory(events: list[ListenEvent], user_id: str | None = None, resolver=None):  # noqa: ANN001, ANN202
        return ArtistNetworkService(
            listen_source=InMemoryListenSource(events, user_id=user_id),
            genre_resolver=resolver or genre_resolver,
        )

    return _factory


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal configuration dict for testing."""
    return {
        "app": {"name": "listengraph", "host": "127.0.0.1", "port": 8000},
        "storage": {"listens_db_path": "data/test.db"},
        "genres": {
            "cache_enabled": True,
            "cache_max_size": 100,
            "cache_ttl": 60,
            "artists": {"Daft Punk": "Electronic", "Dua Lipa": "Pop"},
        },
        "network": {
            "min_play_count": 1,
            "max_artists": None,
            "proximity_window_minutes": 30,
            "min_edge_weight": 1,
        },
    }
