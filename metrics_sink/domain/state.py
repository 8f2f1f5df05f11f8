from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PipelineStage(str, Enum):
    """Where a flush cycle currently is."""

    IDLE = "idle"
    WRITING = "writing"
    SWEEPING = "sweeping"
    AGGREGATING = "aggregating"


@dataclass
class PipelineState:
    """Status fields reported to the host.

    Both start at process start time; values are in the host's timestamp
    unit (seconds).
    """

    last_flush: int
    last_exception: int
    stage: PipelineStage = PipelineStage.IDLE

    @classmethod
    def started_at(cls, startup_time: int) -> PipelineState:
        return cls(last_flush=startup_time, last_exception=startup_time)
