"""Emitter configuration."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, field_validator

from .constants import (
    DEFAULT_JSON_LOGS,
    DEFAULT_LOG_ERRORS,
    DEFAULT_LOG_LEVEL,
    ENV_JSON_LOGS,
    ENV_LOG_ERRORS,
    ENV_LOG_LEVEL,
    TRUTHY_VALUES,
)
from .logging_config import configure_logging


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUTHY_VALUES


class EmitterConfig(BaseModel):
    """Configuration for an emitter and the logging it writes to."""

    log_errors: bool = Field(
        default=DEFAULT_LOG_ERRORS,
        description="Write listener failures to the diagnostic logger",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)
    json_logs: bool = Field(default=DEFAULT_JSON_LOGS)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls) -> EmitterConfig:
        """Load configuration from environment variables."""
        return cls(
            log_errors=_env_flag(ENV_LOG_ERRORS, DEFAULT_LOG_ERRORS),
            log_level=os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            json_logs=_env_flag(ENV_JSON_LOGS, DEFAULT_JSON_LOGS),
        )

    def configure_logging(self) -> None:
        """Apply the logging part of this config to structlog."""
        configure_logging(json_output=self.json_logs, log_level=self.log_level)
