"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest
import structlog

from lifecycle_emitter import EventEmitter, ListenerRegistry


@pytest.fixture
def mock_logger():
    """Diagnostic logger that records calls instead of writing output."""
    return MagicMock()


@pytest.fixture
def registry(mock_logger):
    return ListenerRegistry(logger=mock_logger)


@pytest.fixture
def emitter(mock_logger):
    em = EventEmitter(logger=mock_logger)
    yield em
    em.destroy()


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after a test that configures logging."""
    yield
    structlog.reset_defaults()
