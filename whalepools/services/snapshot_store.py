# services/snapshot_store.py
from __future__ import annotations

import os
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from whalepools.models.whale import SnapshotAdapter, WhalePool


class SnapshotCorruptError(Exception):
    """The persisted snapshot exists but cannot be parsed."""


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write to a sibling temp file, then swap it in; readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class SnapshotStore:
    """
    The whale-pool snapshot on disk: one JSON array of pools.

    ``write`` always stores the full list handed to it, replacing whatever was
    there before. ``read`` treats a missing file as an empty snapshot.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> list[WhalePool]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        try:
            return SnapshotAdapter.validate_json(raw)
        except ValidationError as exc:
            raise SnapshotCorruptError(f"Unreadable snapshot at {self.path}: {exc}") from exc

    def write(self, pools: list[WhalePool]) -> None:
        data = SnapshotAdapter.dump_json(pools, by_alias=True, indent=2)
        atomic_write_bytes(self.path, data)
        logger.debug("Wrote {} whale pools to {}", len(pools), self.path)
