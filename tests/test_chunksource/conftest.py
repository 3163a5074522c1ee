"""Shared fixtures for chunksource tests."""
from __future__ import annotations

from typing import Any

import pytest

from chunksource.source import ChunkedEventSource
from chunksource.transport import Script, ScriptedTransport
from chunksource.types.config import RequestConfig


class Recorder:
    """Collects ``(event_name, payload)`` pairs in dispatch order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def listener(self, name: str):
        def callback(payload: Any) -> None:
            self.calls.append((name, payload))

        return callback

    def attach(self, source: ChunkedEventSource, *names: str) -> None:
        for name in names or ("open", "message", "success", "error"):
            source.add_listener(name, self.listener(name))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def payloads(self, name: str) -> list[Any]:
        return [payload for n, payload in self.calls if n == name]


@pytest.fixture
def config() -> RequestConfig:
    return RequestConfig(url="https://stream.test/events")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def make_source(
    *chunks: bytes | str,
    script: Script | None = None,
    **kwargs: Any,
) -> tuple[ChunkedEventSource, ScriptedTransport]:
    """Build a source over a scripted transport delivering *chunks*."""
    transport = ScriptedTransport([script or Script(chunks=chunks)])
    source = ChunkedEventSource(
        RequestConfig(url="https://stream.test/events"),
        transport=transport,
        **kwargs,
    )
    return source, transport
