"""Standalone CLI for managing the SQLite listen store.

Usage::

    python -m listengraph.cli.listens import --csv scrobbles.csv --user alice
    python -m listengraph.cli.listens stats
    python -m listengraph.cli.listens stats --user alice

CSV columns (header row required):
    artist_name  (required unless artist_id is present)
    played_at    (required; ISO-8601 or Unix epoch seconds)
    artist_id, track_name, genre, image_url, external_id  (optional)

Rows without an artist or a parseable timestamp are skipped and counted.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import sys
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from listengraph.config.settings import Settings
from listengraph.models.listening import ListenEvent
from listengraph.providers.listens.sqlite_listen_source import SQLiteListenSource
from listengraph.utils.logging import configure_logging, get_logger


def parse_played_at(raw: str) -> datetime:
    """Parse an ISO-8601 string or Unix epoch seconds into an aware datetime."""
    raw = raw.strip()
    if raw.isdigit():
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)
    value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _clean(row: dict[str, str | None], column: str) -> str | None:
    value = (row.get(column) or "").strip()
    return value or None


def read_listens_csv(path: Path) -> tuple[list[ListenEvent], int]:
    """Read listen events from a CSV export.

    Returns the parsed events and the number of skipped rows.  Artists
    without an explicit ``artist_id`` are identified by their name.
    """
    events: list[ListenEvent] = []
    skipped = 0
    with open(path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            artist_name = _clean(row, "artist_name")
            artist_id = _clean(row, "artist_id") or artist_name
            played_raw = _clean(row, "played_at")
            if not artist_id or not played_raw:
                skipped += 1
                continue
            try:
                events.append(
                    ListenEvent(
                        artist_id=artist_id,
                        artist_name=artist_name,
                        played_at=parse_played_at(played_raw),
                        track_name=_clean(row, "track_name"),
                        genre=_clean(row, "genre"),
                        image_url=_clean(row, "image_url"),
                        external_id=_clean(row, "external_id"),
                    )
                )
            except (ValueError, OverflowError, ValidationError):
                skipped += 1
    return events, skipped


async def _handle_import(args: argparse.Namespace, store: SQLiteListenSource) -> int:
    csv_path = Path(args.csv)
    if not csv_path.exists():
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
        return 1

    events, skipped = read_listens_csv(csv_path)
    await store.initialize()
    inserted = await store.add_listens(args.user, events)

    print(f"Imported listens for user '{args.user}' from {csv_path.name}")
    print(f"  Rows parsed:     {len(events)}")
    print(f"  Rows skipped:    {skipped}")
    print(f"  Listens added:   {inserted}")
    print(f"  Duplicates:      {len(events) - inserted}")
    return 0


async def _handle_stats(args: argparse.Namespace, store: SQLiteListenSource) -> int:
    if not store.db_path.exists():
        print(f"Error: Listen store not found: {store.db_path}", file=sys.stderr)
        return 1

    users = await store.list_users()
    if args.user:
        users = [u for u in users if u["user_id"] == args.user]
    if not users:
        print("No listens stored.")
        return 0

    print(f"Listen store: {store.db_path}")
    for user in users:
        print(f"\n  {user['user_id']}")
        print(f"    Listens:  {user['listens']}")
        print(f"    Artists:  {user['artists']}")
        print(f"    From:     {user['first_played']}")
        print(f"    To:       {user['last_played']}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m listengraph.cli.listens",
        description="Manage the listengraph SQLite listen store.",
    )
    parser.add_argument("--db", default=None, help="Listen store path (default: LISTENS_DB_PATH)")
    subparsers = parser.add_subparsers(dest="command", help="Listen store commands")

    import_parser = subparsers.add_parser("import", help="Import listens from a CSV file")
    import_parser.add_argument("--csv", required=True, help="Path to the CSV export")
    import_parser.add_argument("--user", required=True, help="User id to file the listens under")

    stats_parser = subparsers.add_parser("stats", help="Show per-user listen statistics")
    stats_parser.add_argument("--user", default=None, help="Only show this user")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the listen store tool."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level="WARNING", stream=sys.stderr)
    get_logger(__name__).debug("cli_start", command=args.command)

    store = SQLiteListenSource(db_path=args.db or app_settings.listens_db_path)

    if args.command == "import":
        exit_code = asyncio.run(_handle_import(args, store))
    elif args.command == "stats":
        exit_code = asyncio.run(_handle_stats(args, store))
    else:
        parser.print_help()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
