"""
Listener registry: the core of the emitter.

Owns the event -> listeners mapping and implements ``on``/``once``/``off``/
``emit``. Two rules hold for every emission:

- Snapshot dispatch: an emission iterates a copy of the listener list taken
  when it starts. Listeners added during the emission fire on the next one;
  listeners removed during the emission still fire if they were snapshotted.
- Error isolation: every listener call is wrapped on its own. A failing
  listener never stops its siblings and never reaches the caller of ``emit``.

``EventEmitter`` builds lifecycle tracking on top of this class by overriding
the ``_check_subscribe``, ``_subscribe``, ``_discard`` and
``_handle_listener_error`` hooks.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

import structlog

from .constants import DEFAULT_LOG_ERRORS
from .errors import InvalidListenerError
from .logging_config import get_logger

Listener = Callable[..., Any]
EventKey = Hashable


@dataclass(eq=False, slots=True)
class Registration:
    """One stored listener entry.

    ``original`` is set for ``once`` wrappers so the user's callable can still
    be removed with ``off``.
    """

    callback: Listener
    original: Listener | None = None
    fired: bool = field(default=False, repr=False)

    @property
    def listener(self) -> Listener:
        return self.original if self.original is not None else self.callback

    def matches(self, listener: Listener) -> bool:
        return self.callback is listener or self.original is listener


def remove_first(
    registrations: list[Registration],
    predicate: Callable[[Registration], bool],
) -> Registration | None:
    """Remove and return the first registration matching ``predicate``."""
    for index, registration in enumerate(registrations):
        if predicate(registration):
            return registrations.pop(index)
    return None


class Unsubscriber:
    """
    Zero-argument handle returned by every subscribe operation.

    Calling it removes exactly the registration it was created for. Repeated
    calls are no-ops, and so is a call after the emitter has been destroyed.
    """

    __slots__ = ("_detach",)

    def __init__(self, detach: Callable[[], Any]):
        self._detach: Callable[[], Any] | None = detach

    @property
    def active(self) -> bool:
        """False once this handle has been called."""
        return self._detach is not None

    def __call__(self) -> None:
        detach, self._detach = self._detach, None
        if detach is not None:
            detach()

    def __repr__(self) -> str:
        return f"Unsubscriber(active={self.active})"


class ListenerRegistry:
    """
    Minimal in-process event emitter.

    Usage:
        registry = ListenerRegistry()
        unsubscribe = registry.on("ready", lambda value: print(value))
        registry.emit("ready", 42)
        unsubscribe()
    """

    def __init__(
        self,
        *,
        log_errors: bool = DEFAULT_LOG_ERRORS,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._events: dict[EventKey, list[Registration]] = {}
        self._log_errors = log_errors
        self._logger = logger if logger is not None else get_logger()
        # Keeps scheduled async listener tasks alive until they finish
        self._pending_tasks: set[asyncio.Future[Any]] = set()

    @property
    def log_errors(self) -> bool:
        """Whether listener failures are written to the diagnostic logger."""
        return self._log_errors

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def on(self, event: EventKey, listener: Listener) -> Unsubscriber:
        """Register ``listener`` for ``event`` and return its unsubscriber."""
        self._check_subscribe("on")
        require_callable(listener)
        return self._subscribe(event, Registration(listener))

    def once(self, event: EventKey, listener: Listener) -> Unsubscriber:
        """Register ``listener`` to be invoked on the next emission of ``event`` only."""
        self._check_subscribe("once")
        require_callable(listener)

        def fire_once(*args: Any) -> Any:
            if registration.fired:
                return None
            registration.fired = True
            self._discard(event, lambda r: r is registration)
            return listener(*args)

        registration = Registration(fire_once, original=listener)
        return self._subscribe(event, registration)

    def _check_subscribe(self, operation: str) -> None:
        """Hook run before any subscribe operation validates its arguments."""

    def _subscribe(self, event: EventKey, registration: Registration) -> Unsubscriber:
        self._events.setdefault(event, []).append(registration)
        return Unsubscriber(lambda: self._discard(event, lambda r: r is registration))

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_listener(self, event: EventKey, listener: Listener) -> None:
        """
        Remove the first registration of ``listener`` for ``event``.

        Matches the callable itself or the callable wrapped by ``once``.
        Unknown events, unknown listeners and non-callables are ignored.
        """
        if not callable(listener):
            return
        self._discard(event, lambda r: r.matches(listener))

    def off(self, event: EventKey, listener: Listener) -> None:
        """Alias for ``remove_listener``."""
        self.remove_listener(event, listener)

    def _discard(
        self,
        event: EventKey,
        predicate: Callable[[Registration], bool],
    ) -> bool:
        registrations = self._events.get(event)
        if not registrations:
            return False

        removed = remove_first(registrations, predicate)
        if removed is None:
            return False

        if not registrations:
            del self._events[event]
        return True

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, event: EventKey, *args: Any) -> bool:
        """
        Invoke every listener registered for ``event`` with ``args``.

        Returns:
            True if the event had listeners, False otherwise
        """
        registrations = self._events.get(event)
        if not registrations:
            return False

        for registration in list(registrations):
            self._invoke(registration.callback, event, args)
        return True

    def _invoke(self, callback: Listener, event: EventKey, args: tuple[Any, ...]) -> None:
        try:
            result = callback(*args)
        except Exception as e:
            self._handle_listener_error(e, event, args)
            return

        if inspect.isawaitable(result):
            self._schedule(result, event, args)

    def _schedule(self, awaitable: Any, event: EventKey, args: tuple[Any, ...]) -> None:
        """Start an async listener without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._logger.warning(
                "Async listener not scheduled: no running event loop",
                event_name=str(event),
            )
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending_tasks.add(task)

        def on_done(finished: asyncio.Future[Any]) -> None:
            self._pending_tasks.discard(finished)
            if finished.cancelled():
                return
            error = finished.exception()
            if isinstance(error, Exception):
                self._handle_listener_error(error, event, args)

        task.add_done_callback(on_done)

    def _handle_listener_error(
        self,
        error: Exception,
        event: EventKey,
        args: tuple[Any, ...],
    ) -> None:
        if self._log_errors:
            self._log_listener_error(error, event, args)

    def _log_listener_error(
        self,
        error: Exception,
        event: EventKey,
        args: tuple[Any, ...],
    ) -> None:
        self._logger.error(
            f'Error in listener for event "{event}"',
            event_name=str(event),
            listener_args=args,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def listener_count(self, event: EventKey) -> int:
        """Number of registrations for ``event``."""
        return len(self._events.get(event, ()))

    def has_listeners(self, event: EventKey) -> bool:
        return event in self._events

    def event_names(self) -> list[EventKey]:
        """Events that currently have listeners, in registration order."""
        return list(self._events)

    def listeners(self, event: EventKey) -> list[Listener]:
        """Registered callables for ``event``, unwrapping ``once`` wrappers."""
        return [r.listener for r in self._events.get(event, ())]


def require_callable(listener: Any) -> None:
    if not callable(listener):
        raise InvalidListenerError(listener)
