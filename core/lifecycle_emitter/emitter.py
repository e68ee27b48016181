"""
Event emitter with lifecycle tracking and error diagnostics.

Adds to the listener registry:
- ``#has-listeners`` / ``#no-listeners`` notifications when an event gains its
  first listener or loses its last one
- a ``#listener-error`` channel receiving every listener failure
- ``clear``/``destroy`` lifecycle
- waiting for events as asyncio futures

Destroyed-state policy: subscribe operations raise ``EmitterDestroyedError``;
``emit`` and every removal operation become silent no-ops.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from types import TracebackType
from typing import Any

import structlog

from .config import EmitterConfig
from .constants import DEFAULT_LOG_ERRORS, DEFAULT_MAX_WAIT_MS
from .errors import EmitterDestroyedError
from .meta import ErrorReportGuard, MetaChannel
from .registry import (
    EventKey,
    Listener,
    ListenerRegistry,
    Registration,
    Unsubscriber,
    require_callable,
    remove_first,
)
from .waiting import wait_for_any_event, wait_for_event


def _empty_meta_registry() -> dict[MetaChannel, list[Registration]]:
    return {channel: [] for channel in MetaChannel}


class EventEmitter(ListenerRegistry):
    """
    In-process event emitter with lifecycle and error notifications.

    Usage:
        emitter = EventEmitter()
        emitter.on_has_event_listeners(lambda event: print("watching", event))
        emitter.on_listener_error(lambda error, event, *args: print(error))

        unsubscribe = emitter.on("ready", handle_ready)
        emitter.emit("ready", payload)
        unsubscribe()

        fired = await emitter.wait_for_event("ready", max_wait_ms=500)
    """

    def __init__(
        self,
        *,
        log_errors: bool = DEFAULT_LOG_ERRORS,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        super().__init__(log_errors=log_errors, logger=logger)
        self._meta: dict[MetaChannel, list[Registration]] = _empty_meta_registry()
        self._error_guard = ErrorReportGuard()
        self._destroyed = False

    @classmethod
    def from_config(
        cls,
        config: EmitterConfig,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> EventEmitter:
        """Create an emitter from an ``EmitterConfig``."""
        return cls(log_errors=config.log_errors, logger=logger)

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def _ensure_live(self, operation: str) -> None:
        if self._destroyed:
            raise EmitterDestroyedError(operation)

    # ------------------------------------------------------------------
    # Registry hooks
    # ------------------------------------------------------------------

    def _check_subscribe(self, operation: str) -> None:
        self._ensure_live(operation)

    def _subscribe(self, event: EventKey, registration: Registration) -> Unsubscriber:
        is_first = not self._events.get(event)
        unsubscriber = super()._subscribe(event, registration)

        if is_first:
            self._emit_meta(MetaChannel.HAS_LISTENERS, event)

        return unsubscriber

    def _discard(
        self,
        event: EventKey,
        predicate: Callable[[Registration], bool],
    ) -> bool:
        if self._destroyed:
            return False

        removed = super()._discard(event, predicate)
        if removed and event not in self._events:
            self._emit_meta(MetaChannel.NO_LISTENERS, event)
        return removed

    def emit(self, event: EventKey, *args: Any) -> bool:
        if self._destroyed:
            return False
        return super().emit(event, *args)

    def _handle_listener_error(
        self,
        error: Exception,
        event: EventKey,
        args: tuple[Any, ...],
    ) -> None:
        self._emit_meta(MetaChannel.LISTENER_ERROR, error, event, *args)
        if self._log_errors:
            self._log_listener_error(error, event, args)

    # ------------------------------------------------------------------
    # Meta-channels
    # ------------------------------------------------------------------

    def _on_meta(self, channel: MetaChannel, callback: Listener) -> Unsubscriber:
        require_callable(callback)
        registration = Registration(callback)
        self._meta[channel].append(registration)
        # Looked up at call time: destroy() swaps in a fresh meta registry
        return Unsubscriber(
            lambda: remove_first(self._meta[channel], lambda r: r is registration)
        )

    def _emit_meta(self, channel: MetaChannel, *args: Any) -> None:
        registrations = self._meta[channel]
        if not registrations:
            return

        for registration in list(registrations):
            try:
                registration.callback(*args)
            except Exception as e:
                if channel is MetaChannel.LISTENER_ERROR or self._error_guard.reporting:
                    if self._log_errors:
                        self._logger.error(
                            "Critical error in internal listener",
                            channel=str(channel),
                            error=str(e),
                            error_type=type(e).__name__,
                            exc_info=e,
                        )
                    continue

                with self._error_guard:
                    self._emit_meta(MetaChannel.LISTENER_ERROR, e, channel, *args)

    def on_has_event_listeners(self, callback: Listener) -> Unsubscriber:
        """Subscribe to events going from zero to one listener. ``callback(event)``."""
        self._ensure_live("on_has_event_listeners")
        return self._on_meta(MetaChannel.HAS_LISTENERS, callback)

    def on_no_event_listeners(self, callback: Listener) -> Unsubscriber:
        """Subscribe to events going from one to zero listeners. ``callback(event)``."""
        self._ensure_live("on_no_event_listeners")
        return self._on_meta(MetaChannel.NO_LISTENERS, callback)

    def on_listener_error(self, callback: Listener) -> Unsubscriber:
        """Subscribe to listener failures. ``callback(error, event, *args)``."""
        self._ensure_live("on_listener_error")
        return self._on_meta(MetaChannel.LISTENER_ERROR, callback)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def clear_event_listeners(self, event: EventKey) -> None:
        """Remove every listener of ``event`` with a single ``#no-listeners``."""
        if self._destroyed:
            return

        if self._events.pop(event, None):
            self._emit_meta(MetaChannel.NO_LISTENERS, event)

    def clear(self) -> None:
        """Remove every listener of every event."""
        if self._destroyed:
            return

        for event in list(self._events):
            self.clear_event_listeners(event)

    def destroy(self) -> None:
        """
        Clear all listeners and move to the destroyed state.

        Clears first, so ``#no-listeners`` subscribers see the teardown, then
        flips the flag and drops the meta-channel subscribers. Idempotent.
        """
        if self._destroyed:
            return

        self.clear()
        self._destroyed = True
        self._meta = _empty_meta_registry()
        self._events = {}

    def __enter__(self) -> EventEmitter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.destroy()

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    def wait_for_event(
        self,
        event: EventKey,
        max_wait_ms: float = DEFAULT_MAX_WAIT_MS,
    ) -> asyncio.Future[bool]:
        """
        Wait for ``event`` to be emitted.

        Args:
            event: Event to wait for
            max_wait_ms: Maximum time to wait in ms, 0 waits indefinitely

        Returns:
            Future resolving to True if the event fired, False on timeout
        """
        return wait_for_event(self, event, max_wait_ms)

    def wait_for_any_event(
        self,
        events: Iterable[EventKey],
        max_wait_ms: float = DEFAULT_MAX_WAIT_MS,
    ) -> asyncio.Future[bool]:
        """Wait for any of ``events`` to be emitted. See ``wait_for_event``."""
        return wait_for_any_event(self, events, max_wait_ms)
