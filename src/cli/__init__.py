# =============================================================================
# src/cli/__init__.py — CLI Module Overview
# =============================================================================
#
# Standalone command-line tools for the lineup sync pipeline.  Each submodule
# is self-contained and runs via `python -m src.cli.<module>`:
#
#   1. SYNC (sync.py)
#      Full pipeline: collect links, extract details, merge snapshots,
#      reconcile into the lineup store, enrich bands from the catalog.
#
#   2. CATALOG MATCHER (match_catalog.py)
#      Enrichment only, with --force / --band / --limit selection.
#
#   3. LINEUP MAINTENANCE (lineups.py)
#      recompute-days and status over the stored lineups.
#
# All CLI modules use argparse and wire their own providers; they run as
# one-shot batch jobs, not long-lived servers.
# =============================================================================

"""CLI tools for the lineup sync pipeline.

- ``python -m src.cli.sync`` — scrape, reconcile and enrich festival lineups.
- ``python -m src.cli.match_catalog`` — match stored bands against Spotify.
- ``python -m src.cli.lineups`` — recompute day numbers, show lineup status.
"""
