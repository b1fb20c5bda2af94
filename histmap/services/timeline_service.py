"""Ordered snapshots of historical places and rivers, with navigation."""

import logging
from pathlib import Path
from typing import Any, Sequence, Union

import yaml

from ..models.snapshot import HistoricalDate, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "snapshots.yaml"


def load_snapshots(path: Union[str, Path]) -> list[Snapshot]:
    """Load snapshots from a YAML data feed.

    The document has a top-level ``snapshots`` list; each entry has a
    ``date``, an optional ``title``, a ``places`` list and a ``rivers`` list.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is malformed.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("snapshots"), list):
        raise ValueError(f"{path}: expected a top-level 'snapshots' list")

    snapshots = []
    for index, entry in enumerate(data["snapshots"]):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: snapshot {index} must be a mapping, got {entry!r}")
        snapshots.append(Snapshot(**entry))
    return snapshots


class SpatialTemporalDatabase:
    """Snapshots ordered by date, plus the index of the one being shown.

    Navigation is clamped: stepping past either end leaves the index where
    it is.
    """

    def __init__(self, snapshots: Sequence[Snapshot]):
        if not snapshots:
            raise ValueError("SpatialTemporalDatabase needs at least one snapshot")
        self._snapshots: tuple[Snapshot, ...] = tuple(sorted(snapshots, key=lambda s: s.date))
        self._index = 0

    @classmethod
    def from_yaml(cls, path: Union[str, Path] = DEFAULT_DATA_FILE) -> "SpatialTemporalDatabase":
        snapshots = load_snapshots(path)
        database = cls(snapshots)
        logger.info(
            "Loaded %d snapshots (%s to %s) from %s",
            len(database),
            database.snapshots[0].date,
            database.snapshots[-1].date,
            path,
        )
        return database

    @classmethod
    def from_records(cls, records: Sequence[dict[str, Any]]) -> "SpatialTemporalDatabase":
        """Build from ``(date, places, rivers)`` style mappings."""
        return cls([Snapshot(**record) for record in records])

    @property
    def snapshots(self) -> tuple[Snapshot, ...]:
        return self._snapshots

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    def previous(self) -> int:
        """Step back one snapshot; a no-op at the first one."""
        self._index = max(0, self._index - 1)
        return self._index

    def next(self) -> int:
        """Step forward one snapshot; a no-op at the last one."""
        self._index = min(len(self._snapshots) - 1, self._index + 1)
        return self._index

    def go_to(self, index: int) -> int:
        """Jump to *index*, clamped to the valid range."""
        self._index = min(len(self._snapshots) - 1, max(0, index))
        return self._index

    def current_snapshot(self) -> Snapshot:
        return self._snapshots[self._index]

    def current_date(self) -> HistoricalDate:
        return self.current_snapshot().date
