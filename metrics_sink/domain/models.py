from __future__ import annotations

from typing import Annotated, Dict, List, Optional, Union

from pydantic import AllowInfNan, BaseModel, ConfigDict, Field, Strict, StrictInt

# Strict so strings and booleans are rejected rather than coerced; finite
# because JSON has no representation for inf/nan.
FiniteFloat = Annotated[float, Strict(), AllowInfNan(False)]
Number = Union[StrictInt, FiniteFloat]


class SnapshotPayload(BaseModel):
    """The three metric families of one flush, as stored on disk.

    Host payloads carry more (rates, percentiles, sets); only the raw
    families are kept.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    counters: Dict[str, Number] = Field(default_factory=dict)
    timers: Dict[str, List[Number]] = Field(default_factory=dict)
    gauges: Dict[str, Number] = Field(default_factory=dict)


class MetricsSnapshot(SnapshotPayload):
    """One flush's raw input, identified by its millisecond timestamp."""

    timestamp: int = Field(ge=0)

    @classmethod
    def from_payload(cls, timestamp: int, payload: SnapshotPayload) -> MetricsSnapshot:
        return cls(timestamp=timestamp, **payload.model_dump())

    def payload_json(self) -> str:
        # Timestamp lives in the file name, not the body
        return self.model_dump_json(exclude={"timestamp"}, indent=4)


class TimerStats(BaseModel):
    count: int
    min: Number
    max: Number
    mean: float
    stdev: float


class TimerAggregate(BaseModel):
    samples: List[Number] = Field(default_factory=list)
    stats: Optional[TimerStats] = None


class AggregateRecord(BaseModel):
    """Reduction of every retained snapshot; rebuilt in full on each pass."""

    counters: Dict[str, Number] = Field(default_factory=dict)
    timers: Dict[str, TimerAggregate] = Field(default_factory=dict)
    gauges: Dict[str, List[Number]] = Field(default_factory=dict)
