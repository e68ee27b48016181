"""
Waiting for events as asyncio futures.

A wait is two cancelable subscriptions joined by a resolve-once latch:
- one unsubscriber per awaited event
- an optional timer handle

Whichever fires first settles the future and releases the other, so nothing
lingers on either the event path or the timeout path.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_MAX_WAIT_MS
from .errors import EmitterDestroyedError

if TYPE_CHECKING:
    from .emitter import EventEmitter
    from .registry import EventKey, Unsubscriber


class EventWait:
    """A pending wait on one or more events of an emitter."""

    def __init__(
        self,
        emitter: EventEmitter,
        events: Iterable[EventKey],
        max_wait_ms: float = DEFAULT_MAX_WAIT_MS,
    ):
        self._emitter = emitter
        self.events: list[EventKey] = list(dict.fromkeys(events))
        self.max_wait_ms = max_wait_ms
        self._unsubscribers: list[Unsubscriber] = []
        self._timer: asyncio.TimerHandle | None = None
        self.future: asyncio.Future[bool] | None = None

    def start(self) -> asyncio.Future[bool]:
        """Subscribe to every event, arm the timer and return the future."""
        loop = asyncio.get_running_loop()
        self.future = loop.create_future()
        # Caller cancellation releases listeners and timer too
        self.future.add_done_callback(lambda _f: self._release())

        try:
            for event in self.events:
                unsubscribe = self._emitter.on(event, self._on_event)
                # A #has-listeners callback may emit the event inside on()
                if self.future.done():
                    unsubscribe()
                    return self.future
                self._unsubscribers.append(unsubscribe)
        except BaseException:
            self._release()
            raise

        if self.max_wait_ms > 0:
            self._timer = loop.call_later(self.max_wait_ms / 1000, self._settle, False)

        return self.future

    @property
    def pending(self) -> bool:
        return self.future is not None and not self.future.done()

    def _on_event(self, *_args: Any) -> None:
        self._settle(True)

    def _settle(self, result: bool) -> None:
        self._release()
        if self.future is not None and not self.future.done():
            self.future.set_result(result)

    def _release(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()


def wait_for_any_event(
    emitter: EventEmitter,
    events: Iterable[EventKey],
    max_wait_ms: float = DEFAULT_MAX_WAIT_MS,
) -> asyncio.Future[bool]:
    """
    Wait until any of ``events`` is emitted.

    Args:
        emitter: Emitter to subscribe to
        events: Event names; duplicates are ignored
        max_wait_ms: Timeout in milliseconds, 0 or less waits indefinitely

    Returns:
        Future resolving to True when an event fired, False on timeout

    Raises:
        EmitterDestroyedError: If the emitter has been destroyed
    """
    if emitter.is_destroyed:
        raise EmitterDestroyedError("wait_for_any_event")
    return EventWait(emitter, events, max_wait_ms).start()


def wait_for_event(
    emitter: EventEmitter,
    event: EventKey,
    max_wait_ms: float = DEFAULT_MAX_WAIT_MS,
) -> asyncio.Future[bool]:
    """Wait until ``event`` is emitted. See ``wait_for_any_event``."""
    if emitter.is_destroyed:
        raise EmitterDestroyedError("wait_for_event")
    return EventWait(emitter, [event], max_wait_ms).start()
