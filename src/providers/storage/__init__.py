"""Relational lineup store implementations."""

from src.providers.storage.sqlite_lineup_store import SQLiteLineupStore

__all__ = ["SQLiteLineupStore"]
