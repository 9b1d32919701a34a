"""Standalone CLI for building an artist network graph from the listen store.

Usage::

    python -m listengraph.cli.network --user alice
    python -m listengraph.cli.network --user alice --start 2024-01-01 --end 2024-02-01
    python -m listengraph.cli.network --max-artists 25 --window 15 --json
    python -m listengraph.cli.network --json -o graph.json

Reads listens from the SQLite store, resolves genres from the static table
in ``config/config.yaml``, and prints a text summary or the graph JSON.
Defaults for the numeric knobs come from the ``network`` config section.

The ``--quiet`` flag (implied by ``--json``) keeps log output at WARNING+
on stderr so stdout carries only the report.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from listengraph.config.loader import load_config
from listengraph.config.settings import Settings
from listengraph.models.network import (
    DEFAULT_MIN_EDGE_WEIGHT,
    DEFAULT_MIN_PLAY_COUNT,
    DEFAULT_PROXIMITY_WINDOW_MINUTES,
    Graph,
    NetworkParams,
)
from listengraph.providers.genre import build_genre_resolver
from listengraph.providers.listens.sqlite_listen_source import SQLiteListenSource
from listengraph.services.artist_network_service import ArtistNetworkService
from listengraph.services.graph_assembler import graph_summary
from listengraph.utils.errors import ConfigurationError, ListenGraphError
from listengraph.utils.logging import configure_logging


def _iso_datetime(raw: str) -> datetime:
    """argparse type for ISO-8601 dates; naive values are taken as UTC."""
    try:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 date: {raw!r}") from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text_output(graph: Graph, params: NetworkParams) -> str:
    summary = graph_summary(graph)
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append("  listengraph — Artist Network")
    lines.append(sep)
    lines.append("")

    if params.user_id:
        lines.append(f"User:      {params.user_id}")
    if graph.metadata.date_range:
        dr = graph.metadata.date_range
        lines.append(f"Range:     {dr.start.isoformat()} .. {dr.end.isoformat()}")
    lines.append(f"Artists:   {summary['total_artists']}")
    lines.append(f"Edges:     {summary['total_connections']}")
    kinds = summary["edge_kinds"]
    lines.append(
        f"           genre={kinds['genre']}  proximity={kinds['proximity']}  both={kinds['both']}"
    )
    lines.append("")

    if summary["top_artists"]:
        lines.append("TOP ARTISTS (by plays)")
        lines.append("-" * 40)
        for name, plays in summary["top_artists"]:
            lines.append(f"  {plays:>6}  {name}")
        lines.append("")

    if summary["most_connected"]:
        lines.append("MOST CONNECTED")
        lines.append("-" * 40)
        for name, degree in summary["most_connected"]:
            lines.append(f"  {degree:>6}  {name}")
        lines.append("")

    if graph.edges:
        lines.append("STRONGEST EDGES")
        lines.append("-" * 40)
        names = {n.id: n.name for n in graph.nodes}
        for edge in graph.edges[:10]:
            detail = f"[{edge.kind.value}]"
            if edge.shared_genres:
                detail += f" genres: {', '.join(edge.shared_genres)}"
            lines.append(
                f"  {edge.weight:>6g}  {names[edge.source]} — {names[edge.target]}  {detail}"
            )
        lines.append("")

    lines.append(sep)
    return "\n".join(lines)


def _format_json_output(graph: Graph) -> str:
    return json.dumps(graph.to_payload(), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def _build_params(args: argparse.Namespace, defaults: dict[str, Any]) -> NetworkParams:
    """Merge CLI flags over the ``network`` config defaults."""

    def pick(flag: Any, key: str, fallback: Any) -> Any:
        if flag is not None:
            return flag
        value = defaults.get(key)
        return fallback if value is None else value

    return NetworkParams(
        user_id=args.user,
        start_date=args.start,
        end_date=args.end,
        min_play_count=pick(args.min_play_count, "min_play_count", DEFAULT_MIN_PLAY_COUNT),
        max_artists=pick(args.max_artists, "max_artists", None),
        proximity_window_minutes=pick(
            args.window, "proximity_window_minutes", DEFAULT_PROXIMITY_WINDOW_MINUTES
        ),
        min_edge_weight=pick(args.min_edge_weight, "min_edge_weight", DEFAULT_MIN_EDGE_WEIGHT),
    )


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    try:
        app_config = load_config(path=args.config, settings=app_settings)
        genre_resolver = build_genre_resolver(app_config)
    except ConfigurationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 2

    db_path = Path(args.db or app_settings.listens_db_path)
    if not db_path.exists():
        print(f"Error: Listen store not found: {db_path}", file=sys.stderr)
        return 1

    service = ArtistNetworkService(
        listen_source=SQLiteListenSource(db_path=db_path),
        genre_resolver=genre_resolver,
    )
    params = _build_params(args, app_config.get("network", {}))

    start = time.monotonic()
    try:
        graph = await service.build_artist_network_graph(params)
    except ConfigurationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 2
    except ListenGraphError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    elapsed = time.monotonic() - start

    output = _format_json_output(graph) if args.json_output else _format_text_output(graph, params)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        if not args.json_output:
            print(f"Report written to {args.output}", file=sys.stderr)
    else:
        print(output)

    if not args.json_output:
        print(f"\nBuilt in {elapsed:.2f}s", file=sys.stderr)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m listengraph.cli.network",
        description="Build an artist network graph from stored listening history.",
    )
    parser.add_argument("--db", default=None, help="Listen store path (default: LISTENS_DB_PATH)")
    parser.add_argument("--config", default=None, help="YAML config path (default: CONFIG_PATH)")
    parser.add_argument("--user", default=None, help="Only use listens from this user")
    parser.add_argument("--start", type=_iso_datetime, default=None, help="Inclusive start date")
    parser.add_argument("--end", type=_iso_datetime, default=None, help="Inclusive end date")
    parser.add_argument(
        "--min-play-count", type=int, default=None, help="Drop artists with fewer plays"
    )
    parser.add_argument(
        "--max-artists", type=int, default=None, help="Keep only the N most-played artists"
    )
    parser.add_argument(
        "--window", type=float, default=None, help="Proximity window in minutes"
    )
    parser.add_argument(
        "--min-edge-weight", type=float, default=None, help="Drop edges lighter than this"
    )
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output the graph as JSON"
    )
    parser.add_argument("-o", "--output", default=None, help="Write output to a file")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress log output (implied by --json)"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the network builder."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    app_settings = Settings()
    quiet = args.quiet or args.json_output
    configure_logging(
        log_level="WARNING" if quiet else app_settings.log_level,
        stream=sys.stderr,
    )

    exit_code = asyncio.run(_run(args, app_settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
