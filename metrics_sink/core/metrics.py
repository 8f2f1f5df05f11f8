"""Prometheus metrics describing the sink's own behaviour."""

from shared.metrics import get_counter, get_gauge, get_histogram

from .logger import SERVICE_NAME

FLUSH_CYCLES = get_counter(
    "flush_cycles_total", "Flush cycles that completed all stages", SERVICE_NAME
)
FLUSH_FAILURES = get_counter(
    "flush_failures_total",
    "Flush cycles abandoned, by failing stage",
    SERVICE_NAME,
    labelnames=("stage",),
)
SNAPSHOTS_WRITTEN = get_counter(
    "snapshots_written_total", "Raw snapshots persisted", SERVICE_NAME
)
SNAPSHOTS_DELETED = get_counter(
    "snapshots_deleted_total", "Expired snapshots removed by the sweeper", SERVICE_NAME
)
DELETE_FAILURES = get_counter(
    "snapshot_delete_failures_total",
    "Expired snapshots that could not be removed",
    SERVICE_NAME,
)
CORRUPT_SNAPSHOTS = get_counter(
    "corrupt_snapshots_total", "Snapshots skipped during aggregation", SERVICE_NAME
)

RETAINED_SNAPSHOTS = get_gauge(
    "retained_snapshots", "Snapshots included in the latest aggregate", SERVICE_NAME
)
LAST_SUCCESS = get_gauge(
    "last_flush_timestamp_seconds",
    "Host timestamp of the last successful flush",
    SERVICE_NAME,
)

CYCLE_DURATION = get_histogram(
    "flush_cycle_seconds",
    "Wall time of a write + sweep + aggregate cycle",
    SERVICE_NAME,
)
