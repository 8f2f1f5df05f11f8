from __future__ import annotations

import logging

from shared.config import BaseLoggingConfig
from shared.logging.json import configure_logging as _shared_configure_logging

SERVICE_NAME = "metrics_sink"

_configured = False


def configure_logging(config: BaseLoggingConfig | None = None, force: bool = False):
    """Install the JSON formatter on the root logger.

    The first ``get_logger`` call installs it from environment-driven
    defaults; ``backend.create_backend`` re-applies it with ``force=True``
    once the host configuration is known.
    """
    global _configured
    if _configured and not force:
        return
    config = config or BaseLoggingConfig()
    _shared_configure_logging(
        service=SERVICE_NAME,
        level=config.app_log_level,
        environment=config.app_environment,
        redaction_patterns=config.app_log_redaction_patterns,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
