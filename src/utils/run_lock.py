"""Single-writer lock for the snapshot directory.

The merge store does read-merge-write on plain JSON files, so two
overlapping sync runs could each read the old snapshot and the second
write would drop the first run's records.  ``run_lock`` serializes runs by
exclusively creating a lock file; a second run fails fast instead of
waiting.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator
from pathlib import Path

import structlog

from src.utils.errors import PipelineError

logger = structlog.get_logger(logger_name=__name__)


@contextlib.contextmanager
def run_lock(path: str | Path) -> Iterator[Path]:
    """Hold an exclusive lock file at *path* for the duration of the block."""
    lock_path = Path(path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fd = os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError as exc:
        raise PipelineError(
            message=(
                f"Another sync run holds {lock_path}; "
                "remove the file if no run is active"
            ),
        ) from exc

    with os.fdopen(fd, "w") as handle:
        handle.write(str(os.getpid()))
    logger.debug("run_lock_acquired", path=str(lock_path))
    try:
        yield lock_path
    finally:
        with contextlib.suppress(FileNotFoundError):
            lock_path.unlink()
        logger.debug("run_lock_released", path=str(lock_path))
