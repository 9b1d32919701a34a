"""FastAPI routes for the listengraph API.

    Endpoint            Method  Description
    ─────────────────────────────────────────────────────────────
    /api/v1/network     GET     Artist network graph for a user/date range
    /api/v1/health      GET     Health check + wired providers

Services are read from ``app.state`` (populated in ``main.py``) through
``Depends`` helpers and ``Annotated`` aliases.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from listengraph import __version__
from listengraph.api.schemas import ErrorResponse, HealthResponse
from listengraph.models.network import (
    DEFAULT_MIN_EDGE_WEIGHT,
    DEFAULT_MIN_PLAY_COUNT,
    DEFAULT_PROXIMITY_WINDOW_MINUTES,
    NetworkParams,
)
from listengraph.services.artist_network_service import ArtistNetworkService
from listengraph.utils.errors import ConfigurationError
from listengraph.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


def _get_network_service(request: Request) -> ArtistNetworkService:
    return request.app.state.network_service


def _get_network_defaults(request: Request) -> dict[str, Any]:
    return getattr(request.app.state, "network_defaults", {})


NetworkServiceDep = Annotated[ArtistNetworkService, Depends(_get_network_service)]
NetworkDefaultsDep = Annotated[dict[str, Any], Depends(_get_network_defaults)]


# ---------------------------------------------------------------------------
# Query-string parsing
# ---------------------------------------------------------------------------


def _bad_request(message: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=ErrorResponse(error="ValidationError", detail=message).model_dump(),
    )


def _parse_date(name: str, raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise _bad_request(f"Invalid {name} format. Use ISO 8601 format (YYYY-MM-DD)") from exc


def _parse_int(name: str, raw: str | None, minimum: int, hint: str) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise _bad_request(f"Invalid {name}. {hint}") from exc
    if value < minimum:
        raise _bad_request(f"Invalid {name}. {hint}")
    return value


def _parse_float(name: str, raw: str | None, hint: str, *, positive: bool = False) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise _bad_request(f"Invalid {name}. {hint}") from exc
    if not math.isfinite(value) or value < 0 or (positive and value == 0):
        raise _bad_request(f"Invalid {name}. {hint}")
    return value


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get(
    "/network",
    responses={400: {"model": ErrorResponse}},
)
async def get_artist_network(
    service: NetworkServiceDep,
    defaults: NetworkDefaultsDep,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    start_date: Annotated[str | None, Query(alias="startDate")] = None,
    end_date: Annotated[str | None, Query(alias="endDate")] = None,
    min_play_count: Annotated[str | None, Query(alias="minPlayCount")] = None,
    max_artists: Annotated[str | None, Query(alias="maxArtists")] = None,
    proximity_window_minutes: Annotated[str | None, Query(alias="proximityWindowMinutes")] = None,
    min_edge_weight: Annotated[str | None, Query(alias="minEdgeWeight")] = None,
) -> dict[str, Any]:
    """Build the artist network graph for the given filters.

    Omitted parameters fall back to the configured network defaults.
    Returns the graph with absent optional fields left out.
    """
    params = NetworkParams(
        user_id=user_id or None,
        start_date=_parse_date("startDate", start_date),
        end_date=_parse_date("endDate", end_date),
        min_play_count=_first_set(
            _parse_int(
                "minPlayCount", min_play_count, 0, "Must be a non-negative integer"
            ),
            defaults.get("min_play_count"),
            DEFAULT_MIN_PLAY_COUNT,
        ),
        max_artists=_first_set(
            _parse_int("maxArtists", max_artists, 1, "Must be a positive integer"),
            defaults.get("max_artists"),
        ),
        proximity_window_minutes=_first_set(
            _parse_float(
                "proximityWindowMinutes",
                proximity_window_minutes,
                "Must be a positive number",
                positive=True,
            ),
            defaults.get("proximity_window_minutes"),
            DEFAULT_PROXIMITY_WINDOW_MINUTES,
        ),
        min_edge_weight=_first_set(
            _parse_float("minEdgeWeight", min_edge_weight, "Must be a non-negative number"),
            defaults.get("min_edge_weight"),
            DEFAULT_MIN_EDGE_WEIGHT,
        ),
    )

    try:
        graph = await service.build_artist_network_graph(params)
    except ConfigurationError as exc:
        raise _bad_request(exc.message) from exc

    return graph.to_payload()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Liveness check listing the collaborators the service was wired with."""
    providers = getattr(request.app.state, "provider_names", {})
    return HealthResponse(version=__version__, providers=providers)
