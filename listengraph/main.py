"""listengraph HTTP service.

Run with ``python -m listengraph.main`` or ``uvicorn listengraph.main:app``.
Settings come from the environment / ``.env``; the genre table and network
defaults come from ``config/config.yaml``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from listengraph import __version__
from listengraph.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from listengraph.api.routes import router as api_router
from listengraph.config.loader import load_config
from listengraph.config.settings import Settings
from listengraph.providers.genre import CachedGenreResolver, build_genre_resolver
from listengraph.providers.listens.sqlite_listen_source import SQLiteListenSource
from listengraph.services.artist_network_service import ArtistNetworkService
from listengraph.utils.logging import configure_logging, get_logger

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Wire the listen store, genre resolver and network service.

    Returns the components keyed by the ``app.state`` attribute they are
    stored under.
    """
    listen_source = SQLiteListenSource(db_path=app_settings.listens_db_path)
    genre_resolver = build_genre_resolver(app_config)
    return {
        "listen_source": listen_source,
        "genre_resolver": genre_resolver,
        "network_service": ArtistNetworkService(
            listen_source=listen_source,
            genre_resolver=genre_resolver,
        ),
        "network_defaults": dict(app_config.get("network") or {}),
        "provider_names": {
            "listen_source": listen_source.get_provider_name(),
            "genre_resolver": genre_resolver.get_provider_name(),
        },
    }


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    components = _build_all(settings, load_config(settings=settings))
    for key, value in components.items():
        setattr(application.state, key, value)

    await components["listen_source"].initialize()
    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        listens_db=settings.listens_db_path,
        **components["provider_names"],
    )

    yield

    resolver = components["genre_resolver"]
    cache_stats = resolver.cache_stats if isinstance(resolver, CachedGenreResolver) else None
    _logger.info("app_shutdown", genre_cache=cache_stats)


def create_app() -> FastAPI:
    """FastAPI application with middleware and the v1 router."""
    application = FastAPI(
        title="listengraph API",
        version=__version__,
        description=(
            "Artist relationship graphs built from listening history: "
            "shared-genre affinity and listening-time proximity."
        ),
        lifespan=_lifespan,
    )
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, settings.cors_origins)
    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "listengraph.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
