"""Tests for the emitter exception hierarchy.

Run with:
    pytest core/tests/test_errors.py -v
"""

from lifecycle_emitter import (
    EmitterDestroyedError,
    EmitterError,
    InvalidListenerError,
)


class TestEmitterErrorBase:
    """Test base EmitterError functionality."""

    def test_basic_message(self):
        error = EmitterError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.error_code == "EMITTER_ERROR"
        assert error.context == {}

    def test_context_rendered_into_str(self):
        error = EmitterError("Failed", event="ready", count=2)
        assert str(error) == "Failed [event=ready, count=2]"
        assert error.message == "Failed"
        assert error.context == {"event": "ready", "count": 2}

    def test_to_dict(self):
        error = EmitterError("Failed", event="ready")
        assert error.to_dict() == {
            "error_code": "EMITTER_ERROR",
            "message": "Failed",
            "context": {"event": "ready"},
        }


class TestSpecificErrors:
    """Test the concrete error types."""

    def test_destroyed_error(self):
        error = EmitterDestroyedError("on")
        assert isinstance(error, EmitterError)
        assert error.message == "EventEmitter is destroyed"
        assert error.error_code == "EMITTER_DESTROYED"
        assert error.operation == "on"
        assert str(error) == "EventEmitter is destroyed [operation=on]"

    def test_destroyed_error_without_operation(self):
        error = EmitterDestroyedError()
        assert str(error) == "EventEmitter is destroyed"
        assert error.operation is None

    def test_invalid_listener_is_type_error(self):
        error = InvalidListenerError(42)
        assert isinstance(error, TypeError)
        assert isinstance(error, EmitterError)
        assert error.error_code == "INVALID_LISTENER"
        assert error.context["listener_type"] == "int"
        assert error.listener == 42
