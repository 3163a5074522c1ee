"""Event source over a chunked HTTP response."""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import partial
from typing import Any

from chunksource._base64 import decode_chunk
from chunksource.framing import PendingBuffer, frame_fragment
from chunksource.listeners import Listener, ListenerRegistry
from chunksource.transport import Transport, TransportCallbacks, TransportHandle
from chunksource.types.config import FramingOptions, RequestConfig
from chunksource.types.enums import EventName, StreamState
from chunksource.types.events import MessageEvent, ResponseHead, TransportResponse

logger = logging.getLogger(__name__)

Classifier = Callable[[list[Any]], str | None]


class ChunkedEventSource:
    """Turn a chunked response body into named events.

    The source issues *config* through *transport* as soon as it is
    constructed (unless ``autoconnect=False``), decodes every delivered
    chunk, reassembles JSON-array payloads split across chunks and fires
    ``message`` events carrying a :class:`MessageEvent`.  Transport
    lifecycle callbacks fire ``open``, ``success`` and ``error``.

    *classifier* may pick another event name for a payload; returning
    ``None`` keeps ``message``.

    All framing and dispatch runs inside transport callbacks, serialized
    by one reentrant lock so listeners may call :meth:`close` or
    :meth:`add_listener` themselves.
    """

    def __init__(
        self,
        config: RequestConfig,
        *,
        transport: Transport | None = None,
        options: FramingOptions | None = None,
        classifier: Classifier | None = None,
        via_base64: bool = True,
        autoconnect: bool = True,
    ) -> None:
        if transport is None:
            from chunksource._http import HttpxTransport

            transport = HttpxTransport()
        self.config = config
        self.options = options or FramingOptions()
        self._transport = transport
        self._classifier = classifier
        self._via_base64 = via_base64
        self._registry = ListenerRegistry()
        self._pending = PendingBuffer()
        self._handle: TransportHandle | None = None
        self._state = StreamState.IDLE
        self._generation = 0
        self._lock = threading.RLock()
        if autoconnect:
            self.connect()

    # -- public API -----------------------------------------------------------

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def pending(self) -> str:
        """Text currently held for reassembly."""
        return self._pending.text

    @property
    def handle(self) -> TransportHandle | None:
        return self._handle

    def connect(self) -> TransportHandle:
        """Issue the request, replacing any previous transport handle."""
        with self._lock:
            previous = self._handle
            if previous is not None and not self._state.is_terminal:
                previous.abort()
            self._generation += 1
            generation = self._generation
            self._pending.clear()
            self._state = StreamState.CONNECTING
            callbacks = TransportCallbacks(
                on_headers=partial(self._on_headers, generation),
                on_chunk=partial(self._on_chunk, generation),
                on_success=partial(self._on_success, generation),
                on_failure=partial(self._on_failure, generation),
            )
            logger.info("Connecting to %s %s", self.config.method, self.config.url)
            try:
                self._handle = self._transport.request(self.config.streaming(), callbacks)
            except Exception:
                self._state = StreamState.FAILED
                raise
            return self._handle

    def close(self) -> None:
        """Abort the request.  No event fires after this returns."""
        with self._lock:
            if self._state is StreamState.CLOSED:
                return
            self._state = StreamState.CLOSED
            logger.info("Closing stream %s", self.config.url)
            if self._handle is not None:
                self._handle.abort()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the current request finishes.

        Returns ``False`` if *timeout* elapsed first.
        """
        handle = self._handle
        if handle is None:
            return True
        return handle.wait(timeout)

    def add_listener(self, event_name: str, callback: Listener) -> None:
        """Register *callback* for *event_name*; see :class:`EventName`."""
        with self._lock:
            self._registry.add_listener(event_name, callback)

    def emit(self, event_name: str, payload: Any) -> None:
        """Invoke the listeners registered for *event_name*."""
        with self._lock:
            self._registry.emit(event_name, payload)

    def listener_count(self, event_name: str) -> int:
        return self._registry.listener_count(event_name)

    def event_names(self) -> list[str]:
        return self._registry.event_names()

    def __enter__(self) -> ChunkedEventSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- transport callbacks ---------------------------------------------------

    def _is_live(self, generation: int, hook: str) -> bool:
        if generation != self._generation:
            logger.debug("Ignoring %s from a superseded connection", hook)
            return False
        if hook == "chunk":
            live = self._state.accepts_chunks
        else:
            live = not self._state.is_terminal
        if not live:
            logger.debug("Ignoring %s in state %s", hook, self._state)
        return live

    def _on_headers(self, generation: int, head: ResponseHead) -> None:
        with self._lock:
            if not self._is_live(generation, "headers"):
                return
            self._state = StreamState.STREAMING
            self._registry.emit(EventName.OPEN, head)

    def _on_chunk(self, generation: int, chunk: bytes) -> None:
        with self._lock:
            if not self._is_live(generation, "chunk"):
                return
            fragment = decode_chunk(chunk, via_base64=self._via_base64)
            record = frame_fragment(fragment, self._pending, self.options)
            if not record.data:
                return
            event = record.event
            if self._classifier is not None:
                event = self._classifier(record.data) or event
            self._registry.emit(event, MessageEvent(data=record.data, event=event))

    def _on_success(self, generation: int, response: TransportResponse) -> None:
        with self._lock:
            if not self._is_live(generation, "success"):
                return
            self._state = StreamState.COMPLETED
            logger.info("Stream %s completed", self.config.url)
            self._registry.emit(EventName.SUCCESS, response)

    def _on_failure(self, generation: int, error: Exception) -> None:
        with self._lock:
            if not self._is_live(generation, "failure"):
                return
            self._state = StreamState.FAILED
            logger.warning("Stream %s failed: %s", self.config.url, error)
            self._registry.emit(EventName.ERROR, error)
