"""Shared configuration base classes.

Provides the logging settings every entrypoint needs plus the storage
settings common to anything that reads or writes the sink's directory tree.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_RETENTION_MS = 30_000  # low default so a misconfigured host can't fill a disk


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "authorization",
        "cookie",
    ]
    app_environment: str = "production"


class BaseSinkConfig(BaseSettings):
    """Storage location and retention window."""

    file_directory: Path
    retention: int = Field(default=DEFAULT_RETENTION_MS, ge=0)

    @property
    def raw_directory(self) -> Path:
        return self.file_directory / "raw"

    @property
    def aggregate_directory(self) -> Path:
        return self.file_directory / "aggregate"


__all__ = ["BaseLoggingConfig", "BaseSinkConfig", "DEFAULT_RETENTION_MS"]
