from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from metrics_sink.core.logger import get_logger
from metrics_sink.core.metrics import DELETE_FAILURES, SNAPSHOTS_DELETED
from metrics_sink.domain.errors import StorageError
from metrics_sink.infrastructure.filesystem.store import SnapshotStore

logger = get_logger("metrics_sink.sweeper")


@dataclass
class SweepResult:
    cutoff: int
    deleted: List[int] = field(default_factory=list)
    failures: Dict[int, StorageError] = field(default_factory=dict)


class RetentionSweeper:
    """Deletes snapshots that fell out of the retention window.

    A snapshot is expired when ``timestamp < now - retention``; one sitting
    exactly on the cutoff is kept. A failed delete is reported and the
    sweep moves on to the next expired entry.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store

    def sweep(self, now: int, retention_millis: int) -> SweepResult:
        if retention_millis < 0:
            raise ValueError(f"retention must be non-negative, got {retention_millis}")
        result = SweepResult(cutoff=now - retention_millis)
        logger.info(
            "sweep_started", extra={"now_ms": now, "cutoff_ms": result.cutoff}
        )

        for timestamp in self.store.list_all():
            if timestamp >= result.cutoff:
                continue
            try:
                self.store.delete(timestamp)
            except StorageError as exc:
                DELETE_FAILURES.inc()
                result.failures[timestamp] = exc
                logger.warning(
                    "snapshot_delete_failed",
                    extra={"timestamp_ms": timestamp, "error": str(exc)},
                )
                continue
            SNAPSHOTS_DELETED.inc()
            result.deleted.append(timestamp)
            logger.info("snapshot_expired", extra={"timestamp_ms": timestamp})

        logger.info(
            "sweep_completed",
            extra={
                "cutoff_ms": result.cutoff,
                "deleted": len(result.deleted),
                "failed": len(result.failures),
            },
        )
        return result
