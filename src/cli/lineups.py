"""CLI for maintaining stored lineups.

Usage::

    # Re-derive performance dates and day numbers, e.g. after a festival
    # start date was set
    python -m src.cli.lineups recompute-days --festival=novarock

    # Lineup counts per festival
    python -m src.cli.lineups status
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from src.cli.sync import _build_lineup_store
from src.config.loader import load_config
from src.config.settings import Settings
from src.config.site_profiles import ALL_FESTIVALS, build_registry, resolve_targets
from src.services.reconciler import LineupReconciler
from src.utils.errors import LineupSyncError
from src.utils.logging import configure_logging


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_recompute_days(args: argparse.Namespace, settings: Settings) -> int:
    """Recompute calendar fields for the selected festivals."""
    registry = build_registry(load_config(args.config, settings))
    targets = resolve_targets(registry, args.festival)
    reconciler = LineupReconciler(await _build_lineup_store(settings))

    print(f"{'Festival':<12} {'Updated':>9} {'Skipped':>9} {'Errors':>8}")
    print("-" * 41)
    failed = False
    for profile in targets:
        stats = await reconciler.recompute_days(profile.festival_id)
        failed = failed or stats.errors > 0
        print(f"{profile.id:<12} {stats.updated:>9,} {stats.skipped:>9,} {stats.errors:>8,}")

    return 1 if failed else 0


async def _handle_status(args: argparse.Namespace, settings: Settings) -> int:
    """Show lineup counts for the selected festivals."""
    registry = build_registry(load_config(args.config, settings))
    targets = resolve_targets(registry, args.festival)
    store = await _build_lineup_store(settings)

    print("Lineup Status")
    print("=" * 70)
    print(
        f"{'Festival':<12} {'Start':>10} {'Slots':>7} {'Dated':>7} "
        f"{'Staged':>7} {'Days':>5} {'Catalog':>8}"
    )
    print("-" * 70)
    for profile in targets:
        festival = await store.get_festival_by_id(profile.festival_id)
        if festival is None:
            print(f"{profile.id:<12} not synced yet")
            continue
        stats = await store.get_festival_stats(festival.id)
        start = festival.start_date.isoformat() if festival.start_date else "-"
        print(
            f"{profile.id:<12} {start:>10} {stats['lineup_slots']:>7,} "
            f"{stats['with_date']:>7,} {stats['with_stage']:>7,} "
            f"{stats['day_labels']:>5,} {stats['catalog_matched']:>8,}"
        )
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the lineup maintenance CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.lineups",
        description="Maintenance commands for stored festival lineups.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="YAML config file (default: config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Lineup commands")

    recompute_parser = subparsers.add_parser(
        "recompute-days",
        help="Re-derive performance dates and day numbers from stored day labels",
    )
    recompute_parser.add_argument("--festival", default=ALL_FESTIVALS)

    status_parser = subparsers.add_parser("status", help="Show lineup counts per festival")
    status_parser.add_argument("--festival", default=ALL_FESTIVALS)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the lineup maintenance tool."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = Settings()
    configure_logging(log_level=settings.log_level)

    handlers = {
        "recompute-days": _handle_recompute_days,
        "status": _handle_status,
    }
    try:
        exit_code = asyncio.run(handlers[args.command](args, settings))
    except LineupSyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
