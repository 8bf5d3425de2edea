"""CLI for running the lineup sync pipeline.

Usage::

    # Scrape, reconcile and enrich every configured festival
    python -m src.cli.sync

    # One festival, first 20 detail pages only, no catalog lookups
    python -m src.cli.sync --festival=novarock --limit=20 --skip-spotify

    # Re-reconcile from the stored snapshots without touching the sites
    python -m src.cli.sync --skip-scrape --skip-spotify

    # Machine-readable run summary
    python -m src.cli.sync --json

Exit code is 1 when the run cannot start (unknown festival, missing
catalog credentials, another run holding the lock) or when every selected
source failed.  Per-record failures only show up in the summary.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx

from src.config.loader import load_config
from src.config.settings import Settings
from src.config.site_profiles import ALL_FESTIVALS, build_registry
from src.models.site_profile import SiteProfile
from src.models.sync import SyncOptions, SyncSummary
from src.pipeline.orchestrator import LineupSyncPipeline
from src.providers.catalog.spotify_provider import SpotifyCatalogProvider
from src.providers.page.httpx_page_fetcher import HttpxPageFetcher, build_scrape_client
from src.providers.snapshot.json_snapshot_store import JSONSnapshotStore
from src.providers.storage.sqlite_lineup_store import SQLiteLineupStore
from src.services.detail_extractor import DetailExtractor
from src.services.enrichment_matcher import EnrichmentMatcher
from src.services.link_collector import LinkCollector
from src.services.reconciler import LineupReconciler
from src.services.snapshot_service import SnapshotService
from src.utils.errors import LineupSyncError
from src.utils.logging import configure_logging
from src.utils.run_lock import run_lock

_LOCK_FILENAME = ".sync.lock"


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


async def _build_lineup_store(settings: Settings) -> SQLiteLineupStore:
    """Open (and create if needed) the lineup database."""
    store = SQLiteLineupStore(db_path=settings.lineup_db_path)
    await store.initialize()
    return store


def _build_pipeline(
    settings: Settings,
    registry: dict[str, SiteProfile],
    store: SQLiteLineupStore,
    scrape_client: httpx.AsyncClient,
    api_client: httpx.AsyncClient,
) -> LineupSyncPipeline:
    fetcher = HttpxPageFetcher(http_client=scrape_client)
    catalog = SpotifyCatalogProvider(settings=settings, http_client=api_client)
    return LineupSyncPipeline(
        registry=registry,
        collector=LinkCollector(fetcher),
        extractor=DetailExtractor(
            fetcher,
            delay=settings.scrape_delay,
            low_yield_threshold=settings.low_yield_threshold,
            low_yield_min_records=settings.low_yield_min_records,
        ),
        snapshots=SnapshotService(JSONSnapshotStore(settings.snapshot_dir)),
        reconciler=LineupReconciler(store),
        enrichment=EnrichmentMatcher(
            catalog,
            store,
            delay=settings.enrichment_delay,
            search_limit=settings.enrichment_search_limit,
        ),
    )


def _options_from_args(args: argparse.Namespace) -> SyncOptions:
    return SyncOptions(
        festival=args.festival,
        skip_scrape=args.skip_scrape,
        skip_enrichment=args.skip_enrichment,
        scrape_limit=args.limit,
        enrichment_limit=args.spotify_limit,
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _summary_to_dict(summary: SyncSummary) -> dict:
    data = summary.model_dump(mode="json")
    data["scrape_totals"] = summary.scrape_totals.model_dump()
    data["reconcile_totals"] = summary.reconcile_totals.model_dump()
    data["failed_sources"] = summary.failed_sources
    return data


def _print_summary(summary: SyncSummary) -> None:
    print()
    print("Lineup Sync Summary")
    print("=" * 78)
    print(
        f"{'Source':<12} {'Links':>7} {'Details':>8} {'Failed':>7} "
        f"{'Inserted':>9} {'Updated':>8} {'Upserted':>9} {'Skipped':>8}"
    )
    print("-" * 78)

    for report in summary.sources:
        if report.error:
            print(f"{report.source:<12} FAILED: {report.error}")
            continue
        scrape = report.scrape
        links = f"{scrape.links_total:,}" if scrape else "-"
        details = f"{scrape.details_total:,}" if scrape else "-"
        failed = f"{scrape.failures:,}" if scrape else "-"
        rec = report.reconcile
        skipped = rec.skipped + (scrape.merge_skipped if scrape else 0)
        print(
            f"{report.source:<12} {links:>7} {details:>8} {failed:>7} "
            f"{rec.bands_inserted:>9,} {rec.bands_updated:>8,} "
            f"{rec.lineups_upserted:>9,} {skipped:>8,}"
        )
        if scrape and scrape.low_yield:
            print(f"{'':<12} WARNING: most records have no day, stage or time")

    totals = summary.reconcile_totals
    scrape_totals = summary.scrape_totals
    print("-" * 78)
    print(
        f"{'TOTAL':<12} {scrape_totals.links_total:>7,} {scrape_totals.details_total:>8,} "
        f"{scrape_totals.failures:>7,} {totals.bands_inserted:>9,} "
        f"{totals.bands_updated:>8,} {totals.lineups_upserted:>9,} "
        f"{totals.skipped + scrape_totals.merge_skipped:>8,}"
    )

    samples = [sample for report in summary.sources for sample in report.failure_samples]
    if samples:
        print()
        print("Scrape failures (sample):")
        for sample in samples:
            print(f"  {sample.reason}")

    print()
    if summary.enrichment is not None:
        stats = summary.enrichment
        print(
            f"Catalog: {stats.matched:,} matched, {stats.not_found:,} not found, "
            f"{stats.errors:,} errors, {stats.rate_limited:,} rate-limit retries"
        )
    elif summary.enrichment_error:
        print(f"Catalog: FAILED: {summary.enrichment_error}")
    else:
        print("Catalog: skipped")


# ---------------------------------------------------------------------------
# Command handler
# ---------------------------------------------------------------------------


async def _handle_sync(args: argparse.Namespace, settings: Settings) -> int:
    config = load_config(args.config, settings)
    registry = build_registry(config)
    options = _options_from_args(args)
    store = await _build_lineup_store(settings)

    async with build_scrape_client(
        timeout=settings.scrape_timeout, user_agent=settings.scrape_user_agent
    ) as scrape_client, httpx.AsyncClient(timeout=settings.scrape_timeout) as api_client:
        pipeline = _build_pipeline(settings, registry, store, scrape_client, api_client)
        summary = await pipeline.run(options)

    if args.json:
        print(json.dumps(_summary_to_dict(summary), indent=2))
    else:
        _print_summary(summary)

    return 1 if summary.all_sources_failed else 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def non_negative_int(value: str) -> int:
    """argparse ``type=`` for count limits; rejects negatives and non-integers."""
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the sync CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.sync",
        description="Scrape festival lineups, reconcile them into storage and enrich bands.",
    )
    parser.add_argument(
        "--festival",
        default=ALL_FESTIVALS,
        help=f"Festival id to sync, or '{ALL_FESTIVALS}' (default: {ALL_FESTIVALS})",
    )
    parser.add_argument(
        "--skip-scrape",
        action="store_true",
        help="Reconcile from the stored snapshots without fetching pages",
    )
    parser.add_argument(
        "--skip-spotify",
        "--skip-enrichment",
        dest="skip_enrichment",
        action="store_true",
        help="Skip catalog enrichment",
    )
    parser.add_argument(
        "--limit",
        type=non_negative_int,
        default=None,
        help="Max detail pages to fetch per festival",
    )
    parser.add_argument(
        "--spotify-limit",
        type=non_negative_int,
        default=None,
        help="Max catalog lookups for the run",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit logs as JSON lines on stderr"
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="YAML config file (default: config/config.yaml)",
    )
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the lineup sync tool."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(
        log_level="DEBUG" if args.verbose else settings.log_level,
        json_output=args.json_logs,
    )

    try:
        with run_lock(Path(settings.snapshot_dir) / _LOCK_FILENAME):
            exit_code = asyncio.run(_handle_sync(args, settings))
    except LineupSyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
