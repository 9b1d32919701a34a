"""SQLite-backed listen event source.

Persists listening history to a local SQLite database (default
``data/listens.db``) using ``aiosqlite`` for async I/O.  Timestamps are
stored as fixed-width UTC ISO-8601 strings so lexical comparison in SQL
matches chronological order.

This is the only place an :class:`EventQuery` is turned into SQL.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from listengraph.interfaces.listen_source import IListenEventSource
from listengraph.models.listening import EventQuery, ListenEvent, ensure_utc
from listengraph.utils.errors import ListenSourceError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/listens.db")
_PROVIDER_NAME = "sqlite-listens"
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS listens (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id      TEXT    NOT NULL,
    artist_id    TEXT    NOT NULL,
    artist_name  TEXT,
    track_name   TEXT,
    genre        TEXT,
    image_url    TEXT,
    external_id  TEXT,
    played_at    TEXT    NOT NULL,
    created_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    # Re-importing the same export must not double-count plays.
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_listens_unique "
    "ON listens(user_id, artist_id, COALESCE(track_name, ''), played_at);",
    "CREATE INDEX IF NOT EXISTS idx_listens_user_played ON listens(user_id, played_at);",
    "CREATE INDEX IF NOT EXISTS idx_listens_played ON listens(played_at);",
]

_INSERT_SQL = """\
INSERT OR IGNORE INTO listens
    (user_id, artist_id, artist_name, track_name, genre, image_url, external_id, played_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?);
"""

_SELECT_COLUMNS = (
    "artist_id, artist_name, track_name, genre, image_url, external_id, played_at"
)


def format_timestamp(value: datetime) -> str:
    """Render *value* in the fixed-width UTC format used by the ``listens`` table."""
    return ensure_utc(value).astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def build_where_clause(query: EventQuery) -> tuple[str, list[Any]]:
    """Translate *query* into an SQL ``WHERE`` fragment and its parameters.

    Both date bounds are inclusive.  An empty query yields ``("", [])``.
    """
    clauses: list[str] = []
    params: list[Any] = []
    if query.user_id is not None:
        clauses.append("user_id = ?")
        params.append(query.user_id)
    if query.start_date is not None:
        clauses.append("played_at >= ?")
        params.append(format_timestamp(query.start_date))
    if query.end_date is not None:
        clauses.append("played_at <= ?")
        params.append(format_timestamp(query.end_date))
    if not clauses:
        return "", params
    return "WHERE " + " AND ".join(clauses), params


class SQLiteListenSource(IListenEventSource):
    """SQLite listening-history store and event source."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def initialize(self) -> None:
        """Create the listens table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("listens_db_initialized", path=str(self._db_path))

    async def add_listens(self, user_id: str, events: Iterable[ListenEvent]) -> int:
        """Insert *events* for *user_id*; exact duplicates are skipped.

        Returns the number of rows actually inserted.
        """
        rows = [
            (
                user_id,
                e.artist_id,
                e.artist_name,
                e.track_name,
                e.genre,
                e.image_url,
                e.external_id,
                format_timestamp(e.played_at),
            )
            for e in events
        ]
        if not rows:
            return 0

        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.executemany(_INSERT_SQL, rows)
            inserted = cursor.rowcount
            await db.commit()

        logger.info(
            "listens_added",
            user_id=user_id,
            submitted=len(rows),
            inserted=inserted,
        )
        return inserted

    async def count_listens(self, user_id: str | None = None) -> int:
        where, params = build_where_clause(EventQuery(user_id=user_id))
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(f"SELECT COUNT(*) FROM listens {where}", params)
            row = await cursor.fetchone()
        return int(row[0]) if row else 0

    async def list_users(self) -> list[dict[str, Any]]:
        """Return per-user listen counts and first/last play timestamps."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT user_id, COUNT(*) AS listens, "
                "COUNT(DISTINCT artist_id) AS artists, "
                "MIN(played_at) AS first_played, MAX(played_at) AS last_played "
                "FROM listens GROUP BY user_id ORDER BY user_id"
            )
            rows = await cursor.fetchall()
        return [dict(r) for r in rows]

    async def fetch_listen_events(self, query: EventQuery) -> list[ListenEvent]:
        where, params = build_where_clause(query)
        sql = f"SELECT {_SELECT_COLUMNS} FROM listens {where} ORDER BY played_at ASC, id ASC"
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise ListenSourceError(str(exc), provider_name=_PROVIDER_NAME) from exc

        events = [
            ListenEvent(
                artist_id=row["artist_id"],
                artist_name=row["artist_name"],
                track_name=row["track_name"],
                genre=row["genre"],
                image_url=row["image_url"],
                external_id=row["external_id"],
                played_at=parse_timestamp(row["played_at"]),
            )
            for row in rows
        ]
        logger.debug("listens_fetched", user_id=query.user_id, count=len(events))
        return events

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME
