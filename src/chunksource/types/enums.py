"""Enumeration types for chunksource."""
from __future__ import annotations

from enum import StrEnum


class EventName(StrEnum):
    """Event names a source fires on its own.

    Listeners may also register under any other non-empty string; such
    custom names only fire when emitted explicitly or chosen by a
    classifier.
    """

    OPEN = "open"
    MESSAGE = "message"
    SUCCESS = "success"
    ERROR = "error"


class StreamState(StrEnum):
    """Lifecycle state of a :class:`~chunksource.source.ChunkedEventSource`."""

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        return self in (StreamState.COMPLETED, StreamState.FAILED, StreamState.CLOSED)

    @property
    def accepts_chunks(self) -> bool:
        return self in (StreamState.CONNECTING, StreamState.STREAMING)
