"""CLI for matching stored bands against the music catalog.

Usage::

    # Match every band that has no catalog data yet
    python -m src.cli.match_catalog

    # Re-match all bands, refreshing stale popularity and genres
    python -m src.cli.match_catalog --force

    # One band only (case-insensitive)
    python -m src.cli.match_catalog --band="Architects"

    # First 50 bands without catalog data
    python -m src.cli.match_catalog --limit=50

Requires SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from src.cli.sync import _build_lineup_store, non_negative_int
from src.config.settings import Settings
from src.providers.catalog.spotify_provider import SpotifyCatalogProvider
from src.services.enrichment_matcher import EnrichmentMatcher
from src.utils.errors import LineupSyncError
from src.utils.logging import configure_logging


async def _handle_match(args: argparse.Namespace, settings: Settings) -> int:
    store = await _build_lineup_store(settings)

    async with httpx.AsyncClient(timeout=settings.scrape_timeout) as client:
        catalog = SpotifyCatalogProvider(settings=settings, http_client=client)
        matcher = EnrichmentMatcher(
            catalog,
            store,
            delay=settings.enrichment_delay,
            search_limit=settings.enrichment_search_limit,
        )
        stats = await matcher.run(force=args.force, band_name=args.band, limit=args.limit)

    print()
    print("Catalog Match Summary")
    print("=" * 40)
    print(f"{'Matched':<24} {stats.matched:>12,}")
    print(f"{'Not found':<24} {stats.not_found:>12,}")
    print(f"{'Errors':<24} {stats.errors:>12,}")
    print(f"{'Rate-limit retries':<24} {stats.rate_limited:>12,}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the catalog matcher CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.match_catalog",
        description="Match stored bands against Spotify and write back catalog metadata.",
    )
    parser.add_argument(
        "--limit", type=non_negative_int, default=None, help="Max bands to look up"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-match every band, including those already matched",
    )
    parser.add_argument("--band", default=None, help="Match a single band by name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the catalog matcher."""
    args = _build_parser().parse_args(argv)

    settings = Settings()
    configure_logging(log_level="DEBUG" if args.verbose else settings.log_level)

    if not settings.has_catalog_credentials():
        print(
            "Error: SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be set.",
            file=sys.stderr,
        )
        sys.exit(1)

    try:
        exit_code = asyncio.run(_handle_match(args, settings))
    except LineupSyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
