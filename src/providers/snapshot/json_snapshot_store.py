"""JSON-file snapshot store.

Writes ``<source>-links.json`` and ``<source>-details.json`` under the
snapshot directory, in the same pretty-printed array format the scrape
checkpoints have always used.  Writes go to a temporary file that is then
renamed over the target, so an interrupted run never leaves a half-written
document behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from src.interfaces.snapshot_store import ISnapshotStore
from src.models.scrape import ArtistDetail
from src.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_SNAPSHOT_DIR = "data/scrape"


class JSONSnapshotStore(ISnapshotStore):
    """Snapshot store keeping two JSON documents per source on disk."""

    def __init__(self, snapshot_dir: str | Path = _DEFAULT_SNAPSHOT_DIR) -> None:
        self._dir = Path(snapshot_dir)

    # ------------------------------------------------------------------
    # ISnapshotStore implementation
    # ------------------------------------------------------------------

    async def load_links(self, source: str) -> list[str]:
        raw = self._read(self.links_path(source))
        return [str(link) for link in raw]

    async def save_links(self, source: str, links: list[str]) -> None:
        self._write(self.links_path(source), list(links))

    async def load_details(self, source: str) -> list[ArtistDetail]:
        path = self.details_path(source)
        raw = self._read(path)
        try:
            return [ArtistDetail.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise StorageError(
                message=f"Corrupt detail snapshot {path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def save_details(self, source: str, details: list[ArtistDetail]) -> None:
        data = [detail.model_dump(mode="json", exclude_none=True) for detail in details]
        self._write(self.details_path(source), data)

    def get_provider_name(self) -> str:
        return "json_snapshot"

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def links_path(self, source: str) -> Path:
        return self._dir / f"{source}-links.json"

    def details_path(self, source: str) -> Path:
        return self._dir / f"{source}-details.json"

    def _read(self, path: Path) -> list[Any]:
        """Return the JSON array at *path*; a missing file reads as ``[]``."""
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(
                message=f"Cannot read snapshot {path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if not isinstance(data, list):
            raise StorageError(
                message=f"Snapshot {path} is not a JSON array",
                provider_name=self.get_provider_name(),
            )
        return data

    def _write(self, path: Path, data: list[Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(
                message=f"Cannot write snapshot {path}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("snapshot_written", path=str(path), records=len(data))
