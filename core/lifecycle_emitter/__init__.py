"""
Lifecycle Emitter: an in-process publish/subscribe primitive.

Callers register named-event listeners, emit events with arbitrary arguments,
and optionally await future events as asyncio futures.

## Layers

- **ListenerRegistry**: ``on``/``once``/``off``/``emit`` with snapshot dispatch
  and per-listener error isolation
- **EventEmitter**: has/no-listener notifications, a listener-error channel,
  ``clear``/``destroy`` lifecycle
- **Waiting**: ``wait_for_event``/``wait_for_any_event`` with optional timeout

Nothing here crosses a process boundary: no transport, no persistence.
"""

from .config import EmitterConfig
from .emitter import EventEmitter
from .errors import EmitterDestroyedError, EmitterError, InvalidListenerError
from .logging_config import configure_logging, get_logger
from .meta import ErrorReportGuard, MetaChannel, ReportState
from .registry import ListenerRegistry, Registration, Unsubscriber
from .waiting import EventWait, wait_for_any_event, wait_for_event

__all__ = [
    # Emitters
    "EventEmitter",
    "ListenerRegistry",
    "Registration",
    "Unsubscriber",
    # Meta-channels
    "MetaChannel",
    "ErrorReportGuard",
    "ReportState",
    # Waiting
    "EventWait",
    "wait_for_event",
    "wait_for_any_event",
    # Errors
    "EmitterError",
    "EmitterDestroyedError",
    "InvalidListenerError",
    # Config and logging
    "EmitterConfig",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
