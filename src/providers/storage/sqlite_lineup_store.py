"""SQLite-backed festival / band / lineup store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing ILineupStore).
#
# Database: ``data/lineups.db`` with three tables:
#   - festivals  keyed by the pre-assigned festival id from the site profile
#   - bands      unique by exact name; catalog_* columns owned by enrichment
#   - lineups    one row per (festival_id, band_id), upserted on conflict
#
# List-valued columns (source_urls, catalog_genres) are stored as JSON text.
# Every aiosqlite failure surfaces as StorageError so the orchestrator can
# fail the current source without touching the others.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from src.interfaces.lineup_store import ILineupStore
from src.models.storage import Band, Festival, LineupSlot
from src.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/lineups.db")

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_FESTIVALS_TABLE = """\
CREATE TABLE IF NOT EXISTS festivals (
    id          TEXT PRIMARY KEY,
    name        TEXT    NOT NULL,
    year        INTEGER NOT NULL,
    start_date  TEXT,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

_CREATE_BANDS_TABLE = """\
CREATE TABLE IF NOT EXISTS bands (
    id                  TEXT PRIMARY KEY,
    name                TEXT NOT NULL UNIQUE,
    country             TEXT,
    slug                TEXT,
    source_urls         TEXT NOT NULL DEFAULT '[]',
    catalog_id          TEXT,
    catalog_url         TEXT,
    catalog_image_url   TEXT,
    catalog_popularity  INTEGER,
    catalog_genres      TEXT NOT NULL DEFAULT '[]',
    updated_at          TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

_CREATE_LINEUPS_TABLE = """\
CREATE TABLE IF NOT EXISTS lineups (
    festival_id       TEXT NOT NULL REFERENCES festivals(id),
    band_id           TEXT NOT NULL REFERENCES bands(id),
    slug              TEXT,
    source_url        TEXT,
    day_label         TEXT,
    stage_label       TEXT,
    time_label        TEXT,
    performance_time  TEXT,
    performance_date  TEXT,
    day_number        INTEGER,
    updated_at        TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (festival_id, band_id)
);
"""

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_bands_name_nocase ON bands(name COLLATE NOCASE);",
    "CREATE INDEX IF NOT EXISTS idx_bands_catalog ON bands(catalog_id);",
    "CREATE INDEX IF NOT EXISTS idx_lineups_festival ON lineups(festival_id);",
]

# ── DML ───────────────────────────────────────────────────────────────

_SELECT_FESTIVAL = "SELECT id, name, year, start_date FROM festivals WHERE id = ?;"

_INSERT_FESTIVAL = """\
INSERT INTO festivals (id, name, year, start_date)
VALUES (?, ?, ?, ?);
"""

_BAND_COLUMNS = (
    "id, name, country, slug, source_urls, catalog_id, catalog_url, "
    "catalog_image_url, catalog_popularity, catalog_genres"
)

_SELECT_BAND_BY_NAME = f"SELECT {_BAND_COLUMNS} FROM bands WHERE name = ?;"

_INSERT_BAND = """\
INSERT INTO bands (id, name, country, slug, source_urls)
VALUES (?, ?, ?, ?, ?);
"""

_UPDATE_BAND = """\
UPDATE bands
SET source_urls = ?, country = ?, slug = ?, updated_at = datetime('now')
WHERE id = ?;
"""

_UPDATE_BAND_CATALOG = """\
UPDATE bands
SET catalog_id = ?, catalog_url = ?, catalog_image_url = ?,
    catalog_popularity = ?, catalog_genres = ?, updated_at = datetime('now')
WHERE id = ?;
"""

_UPSERT_LINEUP = """\
INSERT INTO lineups (
    festival_id, band_id, slug, source_url, day_label, stage_label,
    time_label, performance_time, performance_date, day_number
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(festival_id, band_id)
DO UPDATE SET slug = excluded.slug,
              source_url = excluded.source_url,
              day_label = excluded.day_label,
              stage_label = excluded.stage_label,
              time_label = excluded.time_label,
              performance_time = excluded.performance_time,
              performance_date = excluded.performance_date,
              day_number = excluded.day_number,
              updated_at = datetime('now');
"""

_SELECT_LINEUPS = """\
SELECT festival_id, band_id, slug, source_url, day_label, stage_label,
       time_label, performance_time, performance_date, day_number
FROM lineups
WHERE festival_id = ?
ORDER BY performance_date IS NULL, performance_date, performance_time, band_id;
"""

_UPDATE_LINEUP_CALENDAR = """\
UPDATE lineups
SET performance_date = ?, day_number = ?, updated_at = datetime('now')
WHERE festival_id = ? AND band_id = ?;
"""

_FESTIVAL_STATS = """\
SELECT COUNT(*),
       SUM(CASE WHEN l.performance_date IS NOT NULL THEN 1 ELSE 0 END),
       SUM(CASE WHEN l.stage_label IS NOT NULL AND l.stage_label != 'TBA' THEN 1 ELSE 0 END),
       SUM(CASE WHEN b.catalog_id IS NOT NULL THEN 1 ELSE 0 END),
       COUNT(DISTINCT l.day_label)
FROM lineups l
JOIN bands b ON b.id = l.band_id
WHERE l.festival_id = ?;
"""


def _row_to_festival(row: aiosqlite.Row) -> Festival:
    return Festival(
        id=row["id"],
        name=row["name"],
        year=row["year"],
        start_date=date.fromisoformat(row["start_date"]) if row["start_date"] else None,
    )


def _row_to_band(row: aiosqlite.Row) -> Band:
    return Band(
        id=row["id"],
        name=row["name"],
        country=row["country"],
        slug=row["slug"],
        source_urls=json.loads(row["source_urls"] or "[]"),
        catalog_id=row["catalog_id"],
        catalog_url=row["catalog_url"],
        catalog_image_url=row["catalog_image_url"],
        catalog_popularity=row["catalog_popularity"],
        catalog_genres=json.loads(row["catalog_genres"] or "[]"),
    )


def _row_to_slot(row: aiosqlite.Row) -> LineupSlot:
    return LineupSlot(
        festival_id=row["festival_id"],
        band_id=row["band_id"],
        slug=row["slug"],
        source_url=row["source_url"],
        day_label=row["day_label"],
        stage_label=row["stage_label"],
        time_label=row["time_label"],
        performance_time=row["performance_time"],
        performance_date=(
            date.fromisoformat(row["performance_date"]) if row["performance_date"] else None
        ),
        day_number=row["day_number"],
    )


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


class SQLiteLineupStore(ILineupStore):
    """SQLite implementation of :class:`ILineupStore`.

    Opens a short-lived connection per operation.
    """

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"SQLite operation failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def initialize(self) -> None:
        """Create the lineup tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_FESTIVALS_TABLE)
            await db.execute(_CREATE_BANDS_TABLE)
            await db.execute(_CREATE_LINEUPS_TABLE)
            for idx_sql in _CREATE_INDICES:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("lineup_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return "sqlite_lineups"

    # ── Festivals ──────────────────────────────────────────────────────

    async def get_festival_by_id(self, festival_id: str) -> Festival | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_FESTIVAL, (festival_id,))
            row = await cursor.fetchone()
        return _row_to_festival(row) if row else None

    async def insert_festival(self, festival: Festival) -> Festival:
        async with self._connect() as db:
            await db.execute(
                _INSERT_FESTIVAL,
                (festival.id, festival.name, festival.year, _iso(festival.start_date)),
            )
            await db.commit()
        logger.info("festival_inserted", festival_id=festival.id, name=festival.name)
        return festival

    # ── Bands ──────────────────────────────────────────────────────────

    async def get_band_by_name(self, name: str) -> Band | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_BAND_BY_NAME, (name,))
            row = await cursor.fetchone()
        return _row_to_band(row) if row else None

    async def insert_band(
        self,
        name: str,
        country: str | None,
        slug: str | None,
        source_urls: list[str],
    ) -> Band:
        band = Band(
            id=str(uuid.uuid4()),
            name=name,
            country=country,
            slug=slug,
            source_urls=list(source_urls),
        )
        async with self._connect() as db:
            await db.execute(
                _INSERT_BAND,
                (band.id, band.name, band.country, band.slug, json.dumps(band.source_urls)),
            )
            await db.commit()
        return band

    async def update_band(
        self,
        band_id: str,
        source_urls: list[str],
        country: str | None,
        slug: str | None,
    ) -> None:
        async with self._connect() as db:
            await db.execute(_UPDATE_BAND, (json.dumps(source_urls), country, slug, band_id))
            await db.commit()

    async def list_bands(
        self,
        *,
        missing_catalog_only: bool = True,
        name: str | None = None,
        limit: int | None = None,
    ) -> list[Band]:
        query = f"SELECT {_BAND_COLUMNS} FROM bands"
        params: list[Any] = []
        if name is not None:
            query += " WHERE name = ? COLLATE NOCASE"
            params.append(name)
        elif missing_catalog_only:
            query += " WHERE catalog_id IS NULL"
        query += " ORDER BY name"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        async with self._connect() as db:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        return [_row_to_band(row) for row in rows]

    async def update_band_catalog(
        self,
        band_id: str,
        catalog_id: str,
        catalog_url: str | None,
        image_url: str | None,
        popularity: int | None,
        genres: list[str],
    ) -> None:
        async with self._connect() as db:
            await db.execute(
                _UPDATE_BAND_CATALOG,
                (catalog_id, catalog_url, image_url, popularity, json.dumps(genres), band_id),
            )
            await db.commit()

    # ── Lineup slots ───────────────────────────────────────────────────

    async def upsert_lineup_slot(self, slot: LineupSlot) -> None:
        async with self._connect() as db:
            await db.execute(
                _UPSERT_LINEUP,
                (
                    slot.festival_id,
                    slot.band_id,
                    slot.slug,
                    slot.source_url,
                    slot.day_label,
                    slot.stage_label,
                    slot.time_label,
                    slot.performance_time,
                    _iso(slot.performance_date),
                    slot.day_number,
                ),
            )
            await db.commit()

    async def list_lineup_slots(self, festival_id: str) -> list[LineupSlot]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_LINEUPS, (festival_id,))
            rows = await cursor.fetchall()
        return [_row_to_slot(row) for row in rows]

    async def update_lineup_calendar(
        self,
        festival_id: str,
        band_id: str,
        performance_date: date | None,
        day_number: int | None,
    ) -> None:
        async with self._connect() as db:
            await db.execute(
                _UPDATE_LINEUP_CALENDAR,
                (_iso(performance_date), day_number, festival_id, band_id),
            )
            await db.commit()

    async def get_festival_stats(self, festival_id: str) -> dict[str, Any]:
        async with self._connect() as db:
            cursor = await db.execute(_FESTIVAL_STATS, (festival_id,))
            row = await cursor.fetchone()
        total, dated, staged, matched, day_labels = row if row else (0, 0, 0, 0, 0)
        return {
            "festival_id": festival_id,
            "lineup_slots": total or 0,
            "with_date": dated or 0,
            "with_stage": staged or 0,
            "catalog_matched": matched or 0,
            "day_labels": day_labels or 0,
        }
