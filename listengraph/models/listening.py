"""Listening-history models consumed by the artist network core.

``ListenEvent`` is the read-only row supplied by an event source: one play
of one track by one artist at one instant.  ``EventQuery`` is the typed
filter the core hands to the event source; translating it into SQL (or any
other query language) is the source's job, never the core's.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes so aware and naive values compare safely."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class ListenEvent(BaseModel):
    """A single play of an artist at a point in time.

    Only ``artist_id`` and ``played_at`` are required.  The remaining
    fields are denormalised artist/track attributes an event source may
    join in so node metadata does not need a second lookup.
    """

    model_config = ConfigDict(frozen=True)

    artist_id: str = Field(min_length=1)
    played_at: datetime
    artist_name: str | None = None
    track_name: str | None = None
    # Track-level genre tag, when the source stores one.
    genre: str | None = None
    image_url: str | None = None
    # MusicBrainz id or any other external catalogue id.
    external_id: str | None = None

    @field_validator("played_at")
    @classmethod
    def _played_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class EventQuery(BaseModel):
    """Typed filter for fetching one user's listens.

    Both date bounds are inclusive.  ``None`` means unbounded.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _bounds_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)
