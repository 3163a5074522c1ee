"""Transport interface and an in-memory scripted transport."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from chunksource.errors import AbortError
from chunksource.types.config import RequestConfig
from chunksource.types.events import ResponseHead, TransportResponse


@dataclass(frozen=True)
class TransportCallbacks:
    """Hooks a transport invokes while a request is in flight."""

    on_headers: Callable[[ResponseHead], None]
    on_chunk: Callable[[bytes], None]
    on_success: Callable[[TransportResponse], None]
    on_failure: Callable[[Exception], None]


@runtime_checkable
class TransportHandle(Protocol):
    """Handle to one in-flight request."""

    def abort(self) -> None:
        """Cancel the request.  Safe to call more than once."""
        ...

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the request finishes; return ``False`` on timeout."""
        ...


@runtime_checkable
class Transport(Protocol):
    """Protocol every transport must satisfy."""

    def request(self, config: RequestConfig, callbacks: TransportCallbacks) -> TransportHandle:
        """Issue *config* and report progress through *callbacks*."""
        ...


# ---------------------------------------------------------------------------
# Scripted transport
# ---------------------------------------------------------------------------


@dataclass
class Script:
    """What a :class:`ScriptedTransport` delivers for one request.

    ``error`` takes precedence over ``response``; when both are ``None``
    a 200 :class:`TransportResponse` is reported.  ``head=None`` skips
    the headers callback.
    """

    chunks: Sequence[bytes | str] = ()
    head: ResponseHead | None = field(default_factory=lambda: ResponseHead(status_code=200))
    response: TransportResponse | None = None
    error: Exception | None = None


class ScriptedHandle:
    """Handle that replays a :class:`Script` on demand."""

    def __init__(self, config: RequestConfig, callbacks: TransportCallbacks, script: Script) -> None:
        self.config = config
        self.callbacks = callbacks
        self.script = script
        self.aborted = False
        self.abort_calls = 0
        self._steps = self._build_steps()
        self._bytes_sent = 0

    def _build_steps(self) -> list[Callable[[], None]]:
        steps: list[Callable[[], None]] = []
        if self.script.head is not None:
            head = self.script.head
            steps.append(lambda: self.callbacks.on_headers(head))
        for chunk in self.script.chunks:
            data = chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)
            steps.append(lambda data=data: self._send_chunk(data))
        steps.append(self._finish)
        return steps

    def _send_chunk(self, data: bytes) -> None:
        self._bytes_sent += len(data)
        self.callbacks.on_chunk(data)

    def _finish(self) -> None:
        if self.script.error is not None:
            self.callbacks.on_failure(self.script.error)
            return
        response = self.script.response or TransportResponse(
            status_code=200, url=self.config.url, bytes_received=self._bytes_sent
        )
        self.callbacks.on_success(response)

    @property
    def pending_steps(self) -> int:
        return len(self._steps)

    def deliver_next(self) -> bool:
        """Deliver one scripted callback; return ``False`` when exhausted.

        Delivery continues after :meth:`abort` to mimic a transport
        that still flushes queued callbacks.
        """
        if not self._steps:
            return False
        step = self._steps.pop(0)
        step()
        return True

    def deliver(self) -> None:
        """Deliver every remaining scripted callback."""
        while self.deliver_next():
            pass

    def fail_abort(self) -> None:
        """Report an abort failure, as a real transport does after :meth:`abort`."""
        self._steps.clear()
        self.callbacks.on_failure(AbortError("request aborted"))

    def abort(self) -> None:
        self.aborted = True
        self.abort_calls += 1

    def wait(self, timeout: float | None = None) -> bool:
        self.deliver()
        return True


class ScriptedTransport:
    """In-memory transport for tests.

    Each :meth:`request` consumes the next :class:`Script` (the last one
    is reused once the list runs out) and returns a handle that delivers
    nothing until told to.
    """

    def __init__(self, scripts: Sequence[Script] | None = None) -> None:
        self._scripts = list(scripts or [Script()])
        self._script_idx = 0
        self.requests: list[RequestConfig] = []
        self.handles: list[ScriptedHandle] = []

    def request(self, config: RequestConfig, callbacks: TransportCallbacks) -> ScriptedHandle:
        self.requests.append(config)
        idx = min(self._script_idx, len(self._scripts) - 1)
        self._script_idx += 1
        handle = ScriptedHandle(config, callbacks, self._scripts[idx])
        self.handles.append(handle)
        return handle

    @property
    def last_handle(self) -> ScriptedHandle:
        if not self.handles:
            raise LookupError("No request has been issued")
        return self.handles[-1]
