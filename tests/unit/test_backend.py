from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from metrics_sink.backend import create_backend, init
from metrics_sink.services.pipeline import PipelineController


def test_init_subscribes_flush_and_status(tmp_path):
    events = MagicMock()

    assert init(100, {"fileDirectory": str(tmp_path / "statsd")}, events) is True

    subscribed = {c.args[0]: c.args[1] for c in events.on.call_args_list}
    assert set(subscribed) == {"flush", "status"}
    assert subscribed["flush"].__self__ is subscribed["status"].__self__
    assert isinstance(subscribed["flush"].__self__, PipelineController)


def test_create_backend_bootstraps_directories(tmp_path):
    controller = create_backend(100, {"fileDirectory": str(tmp_path / "x" / "y")})

    assert (tmp_path / "x" / "y" / "raw").is_dir()
    assert (tmp_path / "x" / "y" / "aggregate").is_dir()
    assert controller.retention_millis == 30000
    assert controller.state.last_flush == 100


def test_create_backend_requires_file_directory(monkeypatch):
    monkeypatch.delenv("FILE_DIRECTORY", raising=False)

    with pytest.raises(ValidationError):
        create_backend(100, {})


@patch("metrics_sink.backend.start_http_server")
def test_metrics_server_started_when_port_configured(mock_server, tmp_path):
    create_backend(100, {"fileDirectory": str(tmp_path), "metricsPort": 9102})

    mock_server.assert_called_once_with(9102)


@patch("metrics_sink.backend.start_http_server")
def test_metrics_server_not_started_by_default(mock_server, tmp_path):
    create_backend(100, {"fileDirectory": str(tmp_path)})

    mock_server.assert_not_called()


@patch("metrics_sink.core.logger._shared_configure_logging")
def test_create_backend_applies_logging_settings(mock_configure, monkeypatch, tmp_path):
    monkeypatch.setenv("APP_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("APP_ENVIRONMENT", "staging")

    create_backend(100, {"fileDirectory": str(tmp_path)})

    mock_configure.assert_called_once()
    kwargs = mock_configure.call_args.kwargs
    assert kwargs["service"] == "metrics_sink"
    assert kwargs["level"] == "DEBUG"
    assert kwargs["environment"] == "staging"
    assert "password" in kwargs["redaction_patterns"]
