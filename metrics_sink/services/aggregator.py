"""Cross-snapshot aggregation.

Each metric family has its own reduction:

- counters: summed per name
- timers: samples concatenated per name, then count/min/max/mean and
  population standard deviation computed over the whole concatenation
- gauges: every observed value kept, in snapshot order

The aggregate is always rebuilt from the snapshots currently in the store,
so its window is the retention window.
"""

from __future__ import annotations

import statistics
from operator import attrgetter
from typing import Dict, Iterable, List, Sequence

from metrics_sink.core.logger import get_logger
from metrics_sink.core.metrics import CORRUPT_SNAPSHOTS, RETAINED_SNAPSHOTS
from metrics_sink.domain.models import (
    AggregateRecord,
    MetricsSnapshot,
    Number,
    TimerAggregate,
    TimerStats,
)
from metrics_sink.infrastructure.filesystem.aggregate_writer import AggregateWriter
from metrics_sink.infrastructure.filesystem.store import SnapshotStore

logger = get_logger("metrics_sink.aggregator")


def reduce_counters(snapshots: Iterable[MetricsSnapshot]) -> Dict[str, Number]:
    totals: Dict[str, Number] = {}
    for snapshot in snapshots:
        for name, value in snapshot.counters.items():
            totals[name] = totals.get(name, 0) + value
    return totals


def timer_stats(samples: Sequence[Number]) -> TimerStats:
    return TimerStats(
        count=len(samples),
        min=min(samples),
        max=max(samples),
        mean=statistics.fmean(samples),
        stdev=statistics.pstdev(samples),
    )


def reduce_timers(snapshots: Iterable[MetricsSnapshot]) -> Dict[str, TimerAggregate]:
    samples: Dict[str, List[Number]] = {}
    for snapshot in snapshots:
        for name, values in snapshot.timers.items():
            samples.setdefault(name, []).extend(values)
    return {
        name: TimerAggregate(
            samples=values, stats=timer_stats(values) if values else None
        )
        for name, values in samples.items()
    }


def reduce_gauges(snapshots: Iterable[MetricsSnapshot]) -> Dict[str, List[Number]]:
    series: Dict[str, List[Number]] = {}
    for snapshot in snapshots:
        for name, value in snapshot.gauges.items():
            series.setdefault(name, []).append(value)
    return series


def reduce_snapshots(snapshots: Sequence[MetricsSnapshot]) -> AggregateRecord:
    return AggregateRecord(
        counters=reduce_counters(snapshots),
        timers=reduce_timers(snapshots),
        gauges=reduce_gauges(snapshots),
    )


class Aggregator:
    def __init__(self, store: SnapshotStore, writer: AggregateWriter):
        self.store = store
        self.writer = writer

    def aggregate(self) -> AggregateRecord:
        """Rebuild and persist the aggregate from every readable snapshot.

        Corrupt snapshots are logged and left out. Raises StorageError if the
        store cannot be listed or the aggregate cannot be written; in that
        case nothing is written.
        """
        result = self.store.read_all()
        for failure in result.failures:
            CORRUPT_SNAPSHOTS.inc()
            logger.warning(
                "snapshot_corrupt",
                extra={
                    "timestamp_ms": failure.timestamp,
                    "path": str(failure.path),
                    "error": failure.reason,
                },
            )

        snapshots = sorted(result.snapshots, key=attrgetter("timestamp"))
        record = reduce_snapshots(snapshots)
        self.writer.write(record)

        RETAINED_SNAPSHOTS.set(len(snapshots))
        logger.info(
            "aggregate_written",
            extra={
                "snapshots": len(snapshots),
                "corrupt": len(result.failures),
                "counters": len(record.counters),
                "timers": len(record.timers),
                "gauges": len(record.gauges),
            },
        )
        return record
