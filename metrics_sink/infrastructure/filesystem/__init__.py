"""Directory-per-kind storage: ``raw/`` snapshots and ``aggregate/`` output."""

from .aggregate_writer import AGGREGATE_FILES, AggregateWriter
from .paths import ensure_directory
from .store import FileSnapshotStore, SnapshotReadResult, SnapshotStore

__all__ = [
    "AGGREGATE_FILES",
    "AggregateWriter",
    "FileSnapshotStore",
    "SnapshotReadResult",
    "SnapshotStore",
    "ensure_directory",
]
