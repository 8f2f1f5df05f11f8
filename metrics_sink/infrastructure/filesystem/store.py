"""Snapshot store.

One file per flush under the raw directory, named by the snapshot's
millisecond timestamp. The store makes no promise about ordering; callers
that need chronological order sort by timestamp.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set

from pydantic import ValidationError

from metrics_sink.core.logger import get_logger
from metrics_sink.domain.errors import CorruptSnapshotError, StorageError
from metrics_sink.domain.models import MetricsSnapshot, SnapshotPayload

from .paths import write_atomic

logger = get_logger("metrics_sink.store")


@dataclass
class SnapshotReadResult:
    snapshots: List[MetricsSnapshot] = field(default_factory=list)
    failures: List[CorruptSnapshotError] = field(default_factory=list)


class SnapshotStore(ABC):
    """Key-value store of snapshots keyed by millisecond timestamp."""

    @abstractmethod
    def write(self, snapshot: MetricsSnapshot) -> None:
        """Persist ``snapshot``, replacing any snapshot with the same timestamp."""

    @abstractmethod
    def list_all(self) -> Set[int]:
        """Timestamps currently stored."""

    @abstractmethod
    def read_all(self) -> SnapshotReadResult:
        """Every stored snapshot; unreadable entries are reported, not raised."""

    @abstractmethod
    def delete(self, timestamp: int) -> bool:
        """Remove a snapshot. Returns False if it was already absent."""


class FileSnapshotStore(SnapshotStore):
    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, timestamp: int) -> Path:
        return self.directory / str(timestamp)

    def write(self, snapshot: MetricsSnapshot) -> None:
        path = self.path_for(snapshot.timestamp)
        try:
            write_atomic(path, snapshot.payload_json())
        except OSError as exc:
            raise StorageError(
                f"Cannot write snapshot {snapshot.timestamp}: {exc}", path
            ) from exc
        logger.info(
            "snapshot_written",
            extra={"timestamp_ms": snapshot.timestamp, "path": str(path)},
        )

    def list_all(self) -> Set[int]:
        try:
            names = os.listdir(self.directory)
        except OSError as exc:
            raise StorageError(
                f"Cannot list snapshots in {self.directory}: {exc}", self.directory
            ) from exc
        timestamps: Set[int] = set()
        for name in names:
            # Staged temp files, anything not named by a timestamp, and
            # non-canonical names like "0500" that path_for would never build
            if not (name.isascii() and name.isdigit()) or str(int(name)) != name:
                logger.debug("foreign_entry_skipped", extra={"entry": name})
                continue
            timestamps.add(int(name))
        return timestamps

    def read(self, timestamp: int) -> MetricsSnapshot:
        """Load one snapshot.

        Raises FileNotFoundError if it does not exist and CorruptSnapshotError
        if it exists but cannot be read or parsed.
        """
        path = self.path_for(timestamp)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as exc:
            raise CorruptSnapshotError(timestamp, path, str(exc)) from exc
        try:
            payload = SnapshotPayload.model_validate_json(raw)
        except ValidationError as exc:
            raise CorruptSnapshotError(
                timestamp, path, f"{exc.error_count()} validation error(s)"
            ) from exc
        return MetricsSnapshot.from_payload(timestamp, payload)

    def read_all(self) -> SnapshotReadResult:
        result = SnapshotReadResult()
        for timestamp in self.list_all():
            try:
                result.snapshots.append(self.read(timestamp))
            except FileNotFoundError:
                # Removed between listing and reading
                continue
            except CorruptSnapshotError as exc:
                result.failures.append(exc)
        return result

    def delete(self, timestamp: int) -> bool:
        path = self.path_for(timestamp)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("snapshot_already_absent", extra={"timestamp_ms": timestamp})
            return False
        except OSError as exc:
            raise StorageError(
                f"Cannot delete snapshot {timestamp}: {exc}", path
            ) from exc
        return True
