"""Listener registry keyed by event name."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

Listener = Callable[[Any], None]


class ListenerRegistry:
    """Synchronous name-keyed listener registry.

    Callbacks for a name are invoked in registration order.  Besides the
    :class:`~chunksource.types.enums.EventName` members, any non-empty
    string is accepted as a custom event name.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, event_name: str, callback: Listener) -> None:
        """Register *callback* to run every time *event_name* fires."""
        if not isinstance(event_name, str) or not event_name:
            raise ValueError(f"Event name must be a non-empty string, got {event_name!r}")
        if not callable(callback):
            raise TypeError(f"Listener for {event_name!r} is not callable")
        self._listeners.setdefault(str(event_name), []).append(callback)

    def emit(self, event_name: str, payload: Any) -> None:
        """Invoke every listener for *event_name* with *payload*.

        Does nothing when no listener is registered.  Exceptions raised
        by a listener propagate to the caller.
        """
        # Copy so a listener registering another listener does not see it
        # fire during the same emit.
        for callback in list(self._listeners.get(str(event_name), ())):
            callback(payload)

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(str(event_name), ()))

    def event_names(self) -> list[str]:
        """Names with at least one listener, in first-registration order."""
        return list(self._listeners)
