"""Filesystem helpers shared by the snapshot store and the aggregate writer."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from metrics_sink.domain.errors import StorageError


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and any missing parents; raise StorageError on failure."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Cannot create directory {path}: {exc}", path) from exc
    return path


def stage_text(target: Path, text: str) -> Path:
    """Write ``text`` to a hidden temp file next to ``target`` and return it.

    The temp file lives in the same directory so that a later ``os.replace``
    is an atomic rename.
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
    except BaseException:
        discard(tmp)
        raise
    return tmp


def discard(tmp: Path) -> None:
    with contextlib.suppress(FileNotFoundError):
        tmp.unlink()


def write_atomic(target: Path, text: str) -> None:
    tmp = stage_text(target, text)
    try:
        os.replace(tmp, target)
    except BaseException:
        discard(tmp)
        raise
