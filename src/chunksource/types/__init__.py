"""chunksource type definitions."""
from __future__ import annotations

from chunksource.types.enums import EventName, StreamState
from chunksource.types.config import FramingOptions, RequestConfig
from chunksource.types.events import (
    EventRecord,
    MessageEvent,
    ResponseHead,
    TransportResponse,
)

__all__ = [
    "EventName",
    "StreamState",
    "FramingOptions",
    "RequestConfig",
    "EventRecord",
    "MessageEvent",
    "ResponseHead",
    "TransportResponse",
]
