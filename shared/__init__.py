"""Shared utilities and components for the metrics sink."""

from .config import BaseLoggingConfig, BaseSinkConfig

__all__ = [
    "BaseLoggingConfig",
    "BaseSinkConfig",
]
