"""Artist network graph models.

The graph is the output of a pure computation over one user's listening
history:

    - Node   = one artist that survived the play-count filters
    - Edge   = a weighted relation between two artists, tagged with the
               signal(s) that produced it (shared genre, listening
               proximity, or both)
    - Graph  = nodes + edges + summary metadata

All public models are frozen.  ``ArtistAggregate`` is the one mutable
structure: it accumulates play counts during a single aggregation pass and
is discarded once nodes are built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from listengraph.models.listening import ensure_utc

UNKNOWN_GENRE = "Unknown"

DEFAULT_MIN_PLAY_COUNT = 1
DEFAULT_PROXIMITY_WINDOW_MINUTES = 30
DEFAULT_MIN_EDGE_WEIGHT = 1.0

# Canonical unordered artist pair: the two ids in sorted order.
PairKey = tuple[str, str]


def edge_key(a: str, b: str) -> PairKey:
    """Return the canonical key for the unordered pair ``{a, b}``."""
    return (a, b) if a <= b else (b, a)


class EdgeKind(str, Enum):  # noqa: UP042
    """Which relation signal(s) produced an edge."""

    GENRE = "genre"
    PROXIMITY = "proximity"
    BOTH = "both"

    def combine(self, other: EdgeKind) -> EdgeKind:
        """Union of two signal kinds; symmetric."""
        if self is other:
            return self
        return EdgeKind.BOTH


# ---------------------------------------------------------------------------
# Aggregation accumulator
# ---------------------------------------------------------------------------
@dataclass
class ArtistAggregate:
    """Per-artist accumulator filled while scanning listen events."""

    artist_id: str
    display_name: str
    first_seen: int
    play_count: int = 0
    genres: list[str] = field(default_factory=list)
    image_url: str | None = None
    external_id: str | None = None

    def add_genre(self, genre: str | None) -> None:
        if genre and genre != UNKNOWN_GENRE and genre not in self.genres:
            self.genres.append(genre)


# ---------------------------------------------------------------------------
# Graph output
# ---------------------------------------------------------------------------
class Node(BaseModel):
    """One artist in the network graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    # Primary genre, or the "Unknown" sentinel when nothing is known.
    genre: str = UNKNOWN_GENRE
    # Every known tag, primary first; None when the artist has none.
    genres: list[str] | None = None
    play_count: int = Field(ge=0)
    image_url: str | None = None
    external_id: str | None = None


class Edge(BaseModel):
    """A weighted relation between two distinct artists."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    weight: int | float = Field(ge=0)
    kind: EdgeKind
    # Set when the genre signal contributed.
    shared_genres: list[str] | None = None
    # Co-occurrence count, set when the proximity signal contributed.
    proximity_score: int | None = None

    @field_validator("target")
    @classmethod
    def _no_self_loop(cls, value: str, info: ValidationInfo) -> str:
        if value == info.data.get("source"):
            msg = f"Edge endpoints must differ, got self-loop on {value!r}"
            raise ValueError(msg)
        return value

    @property
    def key(self) -> PairKey:
        return edge_key(self.source, self.target)


class DateRange(BaseModel):
    """Inclusive listening window the graph was computed over."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class GraphMetadata(BaseModel):
    """Summary counts for a graph."""

    model_config = ConfigDict(frozen=True)

    total_artists: int = 0
    total_connections: int = 0
    # Only present when both a start and end date were supplied.
    date_range: DateRange | None = None


class Graph(BaseModel):
    """The artist network: nodes, edges and metadata."""

    model_config = ConfigDict(frozen=True)

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    metadata: GraphMetadata = Field(default_factory=GraphMetadata)

    def to_payload(self) -> dict:
        """JSON-ready dict with absent optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Build parameters
# ---------------------------------------------------------------------------
class NetworkParams(BaseModel):
    """Configuration bundle for a single graph build.

    Range checks happen in the service so that bad values surface as
    ``ConfigurationError`` rather than a pydantic ``ValidationError``.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    min_play_count: int = DEFAULT_MIN_PLAY_COUNT
    max_artists: int | None = None
    proximity_window_minutes: float = DEFAULT_PROXIMITY_WINDOW_MINUTES
    min_edge_weight: float = DEFAULT_MIN_EDGE_WEIGHT

    @field_validator("start_date", "end_date")
    @classmethod
    def _bounds_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)
