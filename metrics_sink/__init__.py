"""File-backed metrics sink: persists flush snapshots, expires them after the
retention window and rebuilds aggregate statistics over what remains."""

from .backend import init

__all__ = ["init"]
