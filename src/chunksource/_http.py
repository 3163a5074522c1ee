"""Streaming HTTP transport built on httpx."""
from __future__ import annotations

import logging
import threading

import httpx

from chunksource.errors import (
    AbortError,
    ChunkSourceError,
    NetworkError,
    RequestTimeoutError,
    StreamError,
    error_from_status_code,
)
from chunksource.transport import TransportCallbacks
from chunksource.types.config import RequestConfig
from chunksource.types.events import ResponseHead, TransportResponse

logger = logging.getLogger(__name__)


class HttpxRequestHandle:
    """A request running on its own worker thread."""

    def __init__(
        self,
        client: httpx.Client,
        config: RequestConfig,
        callbacks: TransportCallbacks,
        *,
        daemon: bool = True,
    ) -> None:
        self._client = client
        self._config = config
        self._callbacks = callbacks
        self._aborted = threading.Event()
        self._done = threading.Event()
        self._response: httpx.Response | None = None
        self._thread = threading.Thread(
            target=self._run,
            name=f"chunksource-{config.method}-{config.url}",
            daemon=daemon,
        )

    def start(self) -> None:
        self._thread.start()

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def abort(self) -> None:
        if self._aborted.is_set():
            return
        self._aborted.set()
        response = self._response
        if response is not None and not self._done.is_set():
            # Unblocks a worker sitting in a socket read.
            response.close()

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    # -- worker ---------------------------------------------------------------

    def _run(self) -> None:
        try:
            failure = self._stream()
            if failure is not None:
                logger.warning("Request to %s failed: %s", self._config.url, failure)
                self._callbacks.on_failure(failure)
        finally:
            self._done.set()

    def _stream(self) -> Exception | None:
        """Run the request; return the failure to report, if any."""
        cfg = self._config
        timeout = httpx.Timeout(cfg.timeout) if cfg.timeout is not None else httpx.Timeout(None)
        try:
            with self._client.stream(
                cfg.method,
                cfg.url,
                headers=cfg.headers,
                params=cfg.query_params() or None,
                timeout=timeout,
                **cfg.body_kwargs(),
            ) as resp:
                self._response = resp
                if self._aborted.is_set():
                    return AbortError("request aborted")
                if resp.status_code >= 300:
                    raw_text = resp.read().decode("utf-8", errors="replace")
                    return error_from_status_code(
                        resp.status_code,
                        raw_text or resp.reason_phrase,
                        body=raw_text,
                    )

                headers = dict(resp.headers)
                url = str(resp.url)
                self._callbacks.on_headers(
                    ResponseHead(status_code=resp.status_code, headers=headers, url=url)
                )

                received = 0
                for chunk in self._iter_chunks(resp):
                    if self._aborted.is_set():
                        break
                    received += len(chunk)
                    logger.debug("Received %d byte chunk from %s", len(chunk), url)
                    self._callbacks.on_chunk(chunk)

                if self._aborted.is_set():
                    return AbortError("request aborted")
                self._callbacks.on_success(
                    TransportResponse(
                        status_code=resp.status_code,
                        headers=headers,
                        url=url,
                        bytes_received=received,
                    )
                )
                return None
        except httpx.TimeoutException as exc:
            return RequestTimeoutError(str(exc), cause=exc)
        except httpx.HTTPError as exc:
            if self._aborted.is_set():
                return AbortError("request aborted", cause=exc)
            return NetworkError(str(exc), cause=exc)
        except httpx.StreamError as exc:
            if self._aborted.is_set():
                return AbortError("request aborted", cause=exc)
            return StreamError(str(exc), cause=exc)
        except ChunkSourceError as exc:
            return exc
        except Exception as exc:
            return StreamError(f"Callback failed while streaming: {exc}", cause=exc)

    def _iter_chunks(self, resp: httpx.Response):
        if self._config.enable_chunked:
            yield from resp.iter_bytes()
            return
        body = resp.read()
        if body:
            yield body


class HttpxTransport:
    """Transport running each request through :class:`httpx.Client` on a worker thread.

    Callbacks are invoked from that worker thread, one request at a time
    per handle.
    """

    def __init__(self, client: httpx.Client | None = None, *, daemon: bool = True) -> None:
        self._client = client or httpx.Client(follow_redirects=True)
        self._owns_client = client is None
        self._daemon = daemon

    def request(self, config: RequestConfig, callbacks: TransportCallbacks) -> HttpxRequestHandle:
        handle = HttpxRequestHandle(self._client, config, callbacks, daemon=self._daemon)
        handle.start()
        return handle

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()
