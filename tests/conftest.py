import logging

import pytest
from prometheus_client import REGISTRY

from metrics_sink.domain.models import MetricsSnapshot
from metrics_sink.infrastructure.filesystem import (
    AggregateWriter,
    FileSnapshotStore,
    ensure_directory,
)


@pytest.fixture
def sink_root(tmp_path):
    """Root directory with the raw/ and aggregate/ layout already in place."""
    root = tmp_path / "statsd"
    ensure_directory(root / "raw")
    ensure_directory(root / "aggregate")
    return root


@pytest.fixture
def store(sink_root):
    return FileSnapshotStore(sink_root / "raw")


@pytest.fixture
def writer(sink_root):
    return AggregateWriter(sink_root / "aggregate")


@pytest.fixture
def make_snapshot():
    def _make(timestamp, counters=None, timers=None, gauges=None):
        return MetricsSnapshot(
            timestamp=timestamp,
            counters=counters or {},
            timers=timers or {},
            gauges=gauges or {},
        )

    return _make


@pytest.fixture
def sample_value():
    """Read a Prometheus sample from the default registry, treating absent as 0."""

    def _read(name, labels=None):
        value = REGISTRY.get_sample_value(name, labels or {})
        return value or 0.0

    return _read


@pytest.fixture
def host_metrics():
    """A flush payload shaped like the host sends it, extras included."""
    return {
        "counters": {"hits": 2, "statsd.packets_received": 10},
        "timers": {"latency": [5, 10]},
        "gauges": {"queue": 3},
        "timer_data": {"latency": {"mean_90": 7.5}},
        "counter_rates": {"hits": 0.2},
        "sets": {},
        "pctThreshold": [90],
    }


@pytest.fixture(autouse=True)
def restore_root_logger():
    """create_backend reinstalls the JSON handler; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
