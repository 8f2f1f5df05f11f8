"""Flush pipeline controller.

Each flush from the host runs write -> sweep -> aggregate to completion or
is abandoned at the first failing stage. Cycles are not re-entrant; the host
must deliver flushes one at a time.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping, Optional

from metrics_sink.core.config import Settings
from metrics_sink.core.logger import get_logger
from metrics_sink.core.metrics import (
    CYCLE_DURATION,
    FLUSH_CYCLES,
    FLUSH_FAILURES,
    LAST_SUCCESS,
    SNAPSHOTS_WRITTEN,
)
from metrics_sink.domain.errors import MetricsSinkError
from metrics_sink.domain.models import MetricsSnapshot, SnapshotPayload
from metrics_sink.domain.state import PipelineStage, PipelineState
from metrics_sink.infrastructure.filesystem import (
    AggregateWriter,
    FileSnapshotStore,
    SnapshotStore,
    ensure_directory,
)

from .aggregator import Aggregator
from .sweeper import RetentionSweeper

logger = get_logger("metrics_sink.pipeline")

# reporter(error, source, field, value)
StatusReporter = Callable[[Optional[Exception], str, str, Any], None]

SOURCE_NAME = "file"


class PipelineController:
    def __init__(
        self,
        store: SnapshotStore,
        sweeper: RetentionSweeper,
        aggregator: Aggregator,
        retention_millis: int,
        startup_time: int,
    ):
        self.store = store
        self.sweeper = sweeper
        self.aggregator = aggregator
        self.retention_millis = retention_millis
        self.state = PipelineState.started_at(startup_time)

    @classmethod
    def from_settings(cls, settings: Settings, startup_time: int) -> PipelineController:
        """Create the directory tree and wire the stages to it."""
        for directory in (
            settings.file_directory,
            settings.raw_directory,
            settings.aggregate_directory,
        ):
            ensure_directory(directory)
        store = FileSnapshotStore(settings.raw_directory)
        return cls(
            store=store,
            sweeper=RetentionSweeper(store),
            aggregator=Aggregator(store, AggregateWriter(settings.aggregate_directory)),
            retention_millis=settings.retention,
            startup_time=startup_time,
        )

    def on_flush(self, timestamp: int, metrics: Mapping[str, Any]) -> bool:
        """Run one flush cycle for the host's ``timestamp`` (seconds).

        Returns True when all stages completed. Failures never propagate to
        the host; they are logged and recorded as ``last_exception``.
        """
        millis = int(timestamp * 1000)
        started = time.perf_counter()
        logger.info("flush_started", extra={"flush_time": timestamp, "millis": millis})

        try:
            self.state.stage = PipelineStage.WRITING
            payload = SnapshotPayload.model_validate(metrics)
            self.store.write(MetricsSnapshot.from_payload(millis, payload))
            SNAPSHOTS_WRITTEN.inc()

            self.state.stage = PipelineStage.SWEEPING
            self.sweeper.sweep(millis, self.retention_millis)

            self.state.stage = PipelineStage.AGGREGATING
            self.aggregator.aggregate()
        except (MetricsSinkError, ValueError) as exc:
            stage = self.state.stage.value
            self.state.last_exception = timestamp
            FLUSH_FAILURES.labels(stage=stage).inc()
            logger.exception(
                "flush_failed",
                extra={"stage": stage, "flush_time": timestamp, "error": str(exc)},
            )
            return False
        finally:
            self.state.stage = PipelineStage.IDLE
            CYCLE_DURATION.observe(time.perf_counter() - started)

        self.state.last_flush = timestamp
        FLUSH_CYCLES.inc()
        LAST_SUCCESS.set(timestamp)
        logger.info("flush_completed", extra={"flush_time": timestamp})
        return True

    def on_status(self, reporter: StatusReporter) -> None:
        """Report ``lastFlush`` and ``lastException`` to the host."""
        fields = (
            ("lastFlush", self.state.last_flush),
            ("lastException", self.state.last_exception),
        )
        for name, value in fields:
            try:
                reporter(None, SOURCE_NAME, name, value)
            except Exception:  # noqa: BLE001
                logger.exception("status_reporter_error", extra={"field": name})
