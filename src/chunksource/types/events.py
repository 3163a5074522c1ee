"""Event payload types."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from chunksource.types.enums import EventName


@dataclass
class EventRecord:
    """Result of framing one text fragment.

    ``data`` is ``None`` when no item survived framing; such records are
    never dispatched.
    """

    event: str = EventName.MESSAGE
    data: list[Any] | None = None


@dataclass(frozen=True)
class MessageEvent:
    """Payload handed to ``message`` (or classifier-chosen) listeners."""

    data: list[Any]
    event: str = EventName.MESSAGE


@dataclass(frozen=True)
class ResponseHead:
    """Response metadata delivered with the ``open`` event."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""


@dataclass(frozen=True)
class TransportResponse:
    """Final response summary delivered with the ``success`` event."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    bytes_received: int = 0
