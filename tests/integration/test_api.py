"""Integration tests for FastAPI API endpoints using TestClient."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from listengraph import __version__
from listengraph.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    status_for,
)
from listengraph.api.routes import router as api_router
from listengraph.models.listening import ListenEvent
from listengraph.providers.genre.static_genre_resolver import StaticGenreResolver
from listengraph.providers.listens.memory_listen_source import InMemoryListenSource
from listengraph.services.artist_network_service import ArtistNetworkService
from listengraph.utils.errors import (
    ConfigurationError,
    GenreResolutionError,
    GraphBuildError,
    ListenSourceError,
)

T0 = datetime(2024, 3, 1, 20, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _listen(artist: str, minutes: float, day: int = 0) -> ListenEvent:
    return ListenEvent(
        artist_id=artist.lower().replace(" ", "-"),
        artist_name=artist,
        played_at=T0 + timedelta(days=day, minutes=minutes),
    )


def _sample_source() -> InMemoryListenSource:
    source = InMemoryListenSource()
    source.add(
        [
            _listen("Dua Lipa", 0),
            _listen("Taylor Swift", 5),
            _listen("Dua Lipa", 8),
            _listen("Kendrick Lamar", 240),
            _listen("Dua Lipa", 0, day=10),
        ],
        user_id="alice",
    )
    source.add([_listen("Bon Iver", 0)], user_id="bob")
    return source


def _build_app(service, defaults: dict | None = None) -> FastAPI:  # noqa: ANN001
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)
    app.state.network_service = service
    app.state.network_defaults = defaults or {}
    app.state.provider_names = {
        "listen_source": "memory-listens",
        "genre_resolver": "static-genres",
    }
    return app


@pytest.fixture
def client() -> TestClient:
    service = ArtistNetworkService(
        listen_source=_sample_source(),
        genre_resolver=StaticGenreResolver(
            {"Dua Lipa": "Pop", "Taylor Swift": "Pop", "Kendrick Lamar": "Hip-Hop"}
        ),
    )
    return TestClient(_build_app(service))


# ---------------------------------------------------------------------------
# GET /api/v1/network
# ---------------------------------------------------------------------------


class TestNetworkEndpoint:
    def test_graph_for_user(self, client: TestClient) -> None:
        resp = client.get("/api/v1/network", params={"userId": "alice"})
        assert resp.status_code == 200

        body = resp.json()
        assert body["metadata"]["total_artists"] == 3
        assert body["nodes"][0]["id"] == "dua-lipa"
        assert body["nodes"][0]["play_count"] == 3
        assert body["nodes"][0]["genre"] == "Pop"

        edges = {(e["source"], e["target"]): e for e in body["edges"]}
        pair = edges[("dua-lipa", "taylor-swift")]
        assert pair["kind"] == "both"
        assert pair["shared_genres"] == ["Pop"]
        assert pair["proximity_score"] == 2
        assert pair["weight"] == 4
        assert "date_range" not in body["metadata"]

    def test_date_range_filters_and_is_reported(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/network",
            params={"userId": "alice", "startDate": "2024-03-05", "endDate": "2024-03-31"},
        )
        body = resp.json()

        assert resp.status_code == 200
        assert [n["id"] for n in body["nodes"]] == ["dua-lipa"]
        assert body["edges"] == []
        assert body["metadata"]["date_range"]["start"].startswith("2024-03-05")

    def test_numeric_params(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/network",
            params={
                "userId": "alice",
                "minPlayCount": "2",
                "proximityWindowMinutes": "1",
                "minEdgeWeight": "0",
            },
        )
        body = resp.json()
        assert [n["id"] for n in body["nodes"]] == ["dua-lipa"]
        assert body["metadata"]["total_connections"] == 0

    def test_max_artists(self, client: TestClient) -> None:
        body = client.get("/api/v1/network", params={"userId": "alice", "maxArtists": "1"}).json()
        assert body["metadata"]["total_artists"] == 1

    def test_min_edge_weight_drops_edges(self, client: TestClient) -> None:
        body = client.get(
            "/api/v1/network", params={"userId": "alice", "minEdgeWeight": "5"}
        ).json()
        assert body["edges"] == []
        assert body["metadata"]["total_connections"] == 0

    def test_unknown_user_yields_empty_graph(self, client: TestClient) -> None:
        body = client.get("/api/v1/network", params={"userId": "nobody"}).json()
        assert body == {
            "nodes": [],
            "edges": [],
            "metadata": {"total_artists": 0, "total_connections": 0},
        }

    @pytest.mark.parametrize(
        ("params", "fragment"),
        [
            ({"startDate": "not-a-date"}, "startDate"),
            ({"endDate": "31/12/2024"}, "endDate"),
            ({"minPlayCount": "-1"}, "minPlayCount"),
            ({"minPlayCount": "abc"}, "minPlayCount"),
            ({"maxArtists": "0"}, "maxArtists"),
            ({"proximityWindowMinutes": "0"}, "proximityWindowMinutes"),
            ({"proximityWindowMinutes": "nan"}, "proximityWindowMinutes"),
            ({"proximityWindowMinutes": "inf"}, "proximityWindowMinutes"),
            ({"proximityWindowMinutes": "-inf"}, "proximityWindowMinutes"),
            ({"minEdgeWeight": "inf"}, "minEdgeWeight"),
            ({"minEdgeWeight": "-2"}, "minEdgeWeight"),
        ],
    )
    def test_invalid_params_return_400(
        self, client: TestClient, params: dict, fragment: str
    ) -> None:
        resp = client.get("/api/v1/network", params=params)

        assert resp.status_code == 400
        error = resp.json()["detail"]
        assert error["error"] == "ValidationError"
        assert fragment in error["detail"]

    def test_start_after_end_returns_400(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/network",
            params={"startDate": "2024-04-01", "endDate": "2024-03-01"},
        )
        assert resp.status_code == 400
        assert "after" in resp.json()["detail"]["detail"]

    def test_oversized_window_links_every_listen(self, client: TestClient) -> None:
        resp = client.get(
            "/api/v1/network",
            params={"userId": "alice", "proximityWindowMinutes": "1e20"},
        )
        assert resp.status_code == 200

        edges = {(e["source"], e["target"]): e for e in resp.json()["edges"]}
        assert edges[("dua-lipa", "kendrick-lamar")]["proximity_score"] == 3

    def test_configured_defaults_apply(self) -> None:
        real = ArtistNetworkService(InMemoryListenSource(), StaticGenreResolver())
        service = MagicMock()
        service.build_artist_network_graph = AsyncMock(wraps=real.build_artist_network_graph)
        client = TestClient(_build_app(service, {"max_artists": 7, "min_edge_weight": 3}))

        resp = client.get("/api/v1/network", params={"minEdgeWeight": "1"})

        assert resp.status_code == 200
        params = service.build_artist_network_graph.await_args.args[0]
        assert params.max_artists == 7
        assert params.min_edge_weight == 1
        assert params.proximity_window_minutes == 30

    def test_listen_source_failure_returns_503(self) -> None:
        source = MagicMock()
        source.fetch_listen_events = AsyncMock(
            side_effect=ListenSourceError("database is locked", provider_name="sqlite-listens")
        )
        source.get_provider_name.return_value = "sqlite-listens"
        service = ArtistNetworkService(source, StaticGenreResolver())
        client = TestClient(_build_app(service))

        resp = client.get("/api/v1/network")

        assert resp.status_code == 503
        assert resp.json() == {"error": "ListenSourceError", "detail": "database is locked"}


# ---------------------------------------------------------------------------
# GET /api/v1/health
# ---------------------------------------------------------------------------


def test_health(client: TestClient) -> None:
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == __version__
    assert body["providers"]["listen_source"] == "memory-listens"


def test_request_id_is_echoed(client: TestClient) -> None:
    resp = client.get("/api/v1/health", headers={"x-request-id": "req-123"})
    assert resp.headers["x-request-id"] == "req-123"


def test_request_id_is_generated(client: TestClient) -> None:
    resp = client.get("/api/v1/health")
    assert len(resp.headers["x-request-id"]) == 12


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (ConfigurationError("bad"), 400),
        (ListenSourceError("down"), 503),
        (GenreResolutionError("down"), 503),
        (GraphBuildError("oops"), 500),
    ],
)
def test_status_for(error, status: int) -> None:  # noqa: ANN001
    assert status_for(error) == status
