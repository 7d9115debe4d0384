"""Synchronous event bus for compile lifecycle events."""

from __future__ import annotations

import threading
from typing import Any, Callable

Listener = Callable[[Any], None]


class EventBus:
    """Publish-subscribe bus shared by the orchestrator and its observers.

    Events are delivered on the emitting thread, to catch-all listeners first
    and then to listeners of the event's exact type. Parallel compiles emit
    from worker threads, so registration is lock-guarded and each emit works
    from a snapshot of the listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}
        self._global_listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, event_type: type, callback: Listener) -> Listener:
        """Register *callback* for *event_type*; returns it so it can be removed later."""
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)
        return callback

    def on_all(self, callback: Listener) -> Listener:
        """Register *callback* for every event."""
        with self._lock:
            self._global_listeners.append(callback)
        return callback

    def unsubscribe(self, callback: Listener) -> None:
        """Remove *callback* wherever it was registered."""
        with self._lock:
            self._global_listeners = [cb for cb in self._global_listeners if cb is not callback]
            for event_type, callbacks in list(self._listeners.items()):
                self._listeners[event_type] = [cb for cb in callbacks if cb is not callback]

    def emit(self, event: Any) -> None:
        with self._lock:
            callbacks = [*self._global_listeners, *self._listeners.get(type(event), [])]
        for cb in callbacks:
            cb(event)
