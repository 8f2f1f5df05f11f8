from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Tuple

from metrics_sink.core.logger import get_logger
from metrics_sink.domain.errors import StorageError
from metrics_sink.domain.models import AggregateRecord

from .paths import discard, stage_text

logger = get_logger("metrics_sink.aggregate_writer")

AGGREGATE_FILES = ("counters", "timers", "gauges")


class AggregateWriter:
    """Owns the aggregate directory: one pretty-printed JSON file per family.

    All three files are staged before any is renamed into place, so a
    failure while rendering or writing leaves the previous aggregate intact.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def write(self, record: AggregateRecord) -> None:
        documents = record.model_dump(mode="json", exclude_none=True)
        staged: List[Tuple[Path, Path]] = []
        try:
            for name in AGGREGATE_FILES:
                target = self.directory / name
                text = json.dumps(documents[name], indent=4)
                staged.append((stage_text(target, text), target))
            for tmp, target in staged:
                os.replace(tmp, target)
        except OSError as exc:
            for tmp, _ in staged:
                discard(tmp)
            raise StorageError(
                f"Cannot write aggregate to {self.directory}: {exc}", self.directory
            ) from exc
        logger.debug("aggregate_files_replaced", extra={"dir": str(self.directory)})

    def load(self) -> AggregateRecord:
        """Read the current aggregate back; missing files count as empty."""
        documents = {}
        for name in AGGREGATE_FILES:
            path = self.directory / name
            try:
                documents[name] = json.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                documents[name] = {}
        return AggregateRecord.model_validate(documents)
