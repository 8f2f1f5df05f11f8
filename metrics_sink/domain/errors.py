from __future__ import annotations

from pathlib import Path


class MetricsSinkError(Exception):
    """Base class for sink failures."""


class StorageError(MetricsSinkError):
    """Directory or file could not be created, written, listed or deleted."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class CorruptSnapshotError(MetricsSinkError):
    """A persisted snapshot could not be read back or parsed."""

    def __init__(self, timestamp: int, path: Path, reason: str):
        super().__init__(f"Snapshot {timestamp} at {path} is unreadable: {reason}")
        self.timestamp = timestamp
        self.path = path
        self.reason = reason
