# =============================================================================
# src/cli/__main__.py — Package Entry Point
# =============================================================================
#
#     python -m src.cli [sync flags]
#
# Delegates to the sync CLI, the operation run by the scheduler.  Other
# tools run directly:
#     python -m src.cli.match_catalog --force
#     python -m src.cli.lineups status
# =============================================================================

"""Allow ``python -m src.cli`` execution."""

from src.cli.sync import main

main()
