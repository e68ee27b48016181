"""
Emitter exceptions.

Only misuse of the emitter surfaces as an exception:
- Subscribing to a destroyed emitter
- Registering something that is not callable

Failures raised by listeners are never propagated to the caller of ``emit``;
they are routed to the listener-error channel and the diagnostic logger.
"""

from __future__ import annotations

from typing import Any, ClassVar


class EmitterError(Exception):
    """
    Base exception for emitter misuse.

    Attributes:
        error_code: Machine-readable code, fixed per subclass
        message: Human-readable description without the context suffix
        context: Details about the failed call, rendered into ``str(error)``
    """

    error_code: ClassVar[str] = "EMITTER_ERROR"

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        if context:
            details = ", ".join(f"{k}={v}" for k, v in context.items())
            message = f"{message} [{details}]"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": dict(self.context),
        }


class EmitterDestroyedError(EmitterError):
    """Raised by a subscribe operation called after ``destroy()``."""

    error_code = "EMITTER_DESTROYED"

    def __init__(self, operation: str | None = None):
        if operation:
            super().__init__("EventEmitter is destroyed", operation=operation)
        else:
            super().__init__("EventEmitter is destroyed")
        self.operation = operation


class InvalidListenerError(EmitterError, TypeError):
    """Raised when a subscribe operation is given something that is not callable."""

    error_code = "INVALID_LISTENER"

    def __init__(self, listener: Any):
        super().__init__("Listener must be callable", listener_type=type(listener).__name__)
        self.listener = listener
