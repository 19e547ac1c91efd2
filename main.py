"""CLI entrypoint for loading and inspecting media feeds."""

from __future__ import annotations

import argparse
import json
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from aggregator import load_feed
from config import get_settings
from models import FeedRequest, FeedResult
from processing import PRESETS, normalize_collections, preset_query, suggest_collections
from storage import get_listing_cache
from utils import setup_logger


console = Console()


def _print_feed(result: FeedResult, limit: int) -> None:
    table = Table(title="Media Feed", show_header=True)
    table.add_column("Score", justify="right", style="green")
    table.add_column("Kind", style="magenta")
    table.add_column("Collection", style="cyan")
    table.add_column("Title")
    table.add_column("URL", overflow="fold")

    for item in result.items[:limit]:
        table.add_row(str(item.score), item.kind.value, f"r/{item.collection}", item.title, item.url)

    console.print(table)
    if result.provenance_summary:
        console.print(f"[dim]{result.provenance_summary}[/dim]")
    if result.diagnostic:
        style = "yellow" if result.items else "red"
        console.print(f"[{style}]{result.diagnostic}[/{style}]")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="SubSwipe media feed CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    feed = sub.add_parser("feed", help="load and rank media from collections")
    feed.add_argument("--collections", default="", help="comma-separated list, e.g. 'pics, r/funny'")
    feed.add_argument("--preset", choices=sorted(PRESETS), help="use a preset collection list")
    feed.add_argument("--full-quality", action="store_true", help="disable data saver")
    feed.add_argument("--no-fallback", action="store_true", help="skip alternate proxy endpoints")
    feed.add_argument("--limit", type=int, default=50, help="rows to print")
    feed.add_argument("--json", action="store_true", help="print the feed as JSON")

    suggest = sub.add_parser("suggest", help="autocomplete the last collection token")
    suggest.add_argument("--query", required=True)

    sub.add_parser("presets", help="list preset collection lists")

    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logger(level=settings.general.log_level, log_file=settings.general.log_file)

    if args.command == "feed":
        query = preset_query(args.preset) if args.preset else args.collections
        identifiers = normalize_collections(query)
        if not identifiers:
            parser.error("no collections given")
        feed_settings = settings
        if args.no_fallback:
            # local copy; the cached global settings stay untouched
            listing = settings.listing.model_copy(update={"fallback_enabled": False})
            feed_settings = settings.model_copy(update={"listing": listing})

        result = load_feed(
            FeedRequest(identifiers=identifiers, data_saver=not args.full_quality),
            show_progress=not args.json,
            settings=feed_settings,
            cache=get_listing_cache(),
        )
        if args.json:
            print(json.dumps(result.model_dump(mode="json", exclude={"outcomes"}), ensure_ascii=False))
        else:
            _print_feed(result, args.limit)
        return 1 if result.diagnostic and not result.items else 0

    if args.command == "suggest":
        print(json.dumps({"suggestions": suggest_collections(args.query)}, ensure_ascii=False))
        return 0

    if args.command == "presets":
        print(json.dumps({name: preset_query(name) for name in sorted(PRESETS)}, ensure_ascii=False))
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
