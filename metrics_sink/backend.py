"""Host integration.

The host (a statsd-style daemon) loads the sink by calling ``init`` with its
start time, its configuration mapping and its event emitter. The sink then
listens for ``flush`` and ``status`` events.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

from prometheus_client import start_http_server

from .core.config import Settings
from .core.logger import configure_logging, get_logger
from .services.pipeline import PipelineController

logger = get_logger("metrics_sink.backend")


class EventEmitter(Protocol):
    def on(self, event: str, handler: Callable[..., Any]) -> Any: ...


def create_backend(startup_time: int, config: Mapping[str, Any]) -> PipelineController:
    """Build settings from the host config and bootstrap the directory tree.

    Raises pydantic ValidationError for bad configuration and StorageError
    if the directories cannot be created.
    """
    settings = Settings.from_host_config(config)
    configure_logging(settings, force=True)
    controller = PipelineController.from_settings(settings, startup_time)
    logger.info(
        "backend_initialised",
        extra={
            "file_directory": str(settings.file_directory),
            "retention_ms": settings.retention,
        },
    )
    if settings.metrics_port is not None:
        start_http_server(settings.metrics_port)
        logger.info("metrics_listening", extra={"port": settings.metrics_port})
    return controller


def init(startup_time: int, config: Mapping[str, Any], events: EventEmitter) -> bool:
    controller = create_backend(startup_time, config)
    events.on("flush", controller.on_flush)
    events.on("status", controller.on_status)
    return True
