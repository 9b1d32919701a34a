"""Utility modules for listengraph.

- **errors** -- Domain exception hierarchy rooted at ListenGraphError.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from listengraph.utils.errors import (
    ConfigurationError,
    GenreResolutionError,
    GraphBuildError,
    ListenGraphError,
    ListenSourceError,
)
from listengraph.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "GenreResolutionError",
    "GraphBuildError",
    "ListenGraphError",
    "ListenSourceError",
    "configure_logging",
    "get_logger",
]
