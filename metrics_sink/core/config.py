from __future__ import annotations

from typing import Any, Mapping

from shared.config import BaseLoggingConfig, BaseSinkConfig

# Host configuration keys recognised by the sink, mapped to Settings fields.
HOST_CONFIG_KEYS = {
    "fileDirectory": "file_directory",
    "retention": "retention",
    "metricsPort": "metrics_port",
}


class Settings(BaseSinkConfig, BaseLoggingConfig):
    # Prometheus exposition for the sink's own health; disabled when unset
    metrics_port: int | None = None

    @classmethod
    def from_host_config(cls, config: Mapping[str, Any]) -> "Settings":
        """Build settings from the host's camelCase configuration mapping.

        Keys that are absent or ``None`` fall back to environment variables
        and then to field defaults.
        """
        overrides = {
            field: config[key]
            for key, field in HOST_CONFIG_KEYS.items()
            if config.get(key) is not None
        }
        return cls(**overrides)
