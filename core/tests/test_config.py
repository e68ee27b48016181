"""Tests for emitter configuration and logging setup."""

import pytest
import structlog
from pydantic import ValidationError

from lifecycle_emitter import EmitterConfig, configure_logging
from lifecycle_emitter.logging_config import add_library_info, build_processors


class TestEmitterConfig:
    """Test the config model."""

    def test_defaults(self):
        config = EmitterConfig()

        assert config.log_errors is True
        assert config.log_level == "INFO"
        assert config.json_logs is False

    def test_log_level_normalized(self):
        assert EmitterConfig(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            EmitterConfig(log_level="chatty")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("EMITTER_LOG_ERRORS", "false")
        monkeypatch.setenv("EMITTER_LOG_LEVEL", "warning")
        monkeypatch.setenv("EMITTER_JSON_LOGS", "yes")

        config = EmitterConfig.from_env()

        assert config.log_errors is False
        assert config.log_level == "WARNING"
        assert config.json_logs is True

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv("EMITTER_LOG_ERRORS", raising=False)
        monkeypatch.delenv("EMITTER_LOG_LEVEL", raising=False)
        monkeypatch.setenv("EMITTER_JSON_LOGS", "")

        config = EmitterConfig.from_env()

        assert config == EmitterConfig()


class TestLoggingConfig:
    """Test structlog configuration."""

    def test_json_processors(self):
        processors = build_processors(json_output=True)

        assert isinstance(processors[0], structlog.processors.TimeStamper)
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_processors_without_timestamps(self):
        processors = build_processors(json_output=False, include_timestamps=False)

        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_library_info_added(self):
        event_dict = add_library_info(None, "info", {"event": "hello"})

        assert event_dict["library"] == "lifecycle-emitter"
        assert event_dict["event"] == "hello"

    def test_configure_logging(self, reset_structlog):
        configure_logging(json_output=True, log_level="DEBUG")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_config_applies_logging(self, reset_structlog):
        EmitterConfig(json_logs=True, log_level="ERROR").configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
