"""chunksource: server-sent-style events over chunked HTTP responses."""
from __future__ import annotations

__version__ = "0.1.0"

# Errors
from chunksource.errors import (
    ChunkSourceError,
    TransportError,
    HTTPStatusError,
    InvalidRequestError,
    AuthenticationError,
    AccessDeniedError,
    NotFoundError,
    RateLimitError,
    ServerError,
    RequestTimeoutError,
    NetworkError,
    AbortError,
    StreamError,
    ConfigurationError,
    error_from_status_code,
)

# Types
from chunksource.types import (
    EventName,
    EventRecord,
    FramingOptions,
    MessageEvent,
    RequestConfig,
    ResponseHead,
    StreamState,
    TransportResponse,
)

# Core
from chunksource._base64 import decode_chunk
from chunksource.framing import PendingBuffer, frame_fragment, is_json_string
from chunksource.listeners import ListenerRegistry
from chunksource.transport import (
    Script,
    ScriptedTransport,
    Transport,
    TransportCallbacks,
    TransportHandle,
)
from chunksource._http import HttpxTransport
from chunksource.source import ChunkedEventSource

__all__ = [
    "__version__",
    # Errors
    "ChunkSourceError",
    "TransportError",
    "HTTPStatusError",
    "InvalidRequestError",
    "AuthenticationError",
    "AccessDeniedError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "RequestTimeoutError",
    "NetworkError",
    "AbortError",
    "StreamError",
    "ConfigurationError",
    "error_from_status_code",
    # Types
    "EventName",
    "EventRecord",
    "FramingOptions",
    "MessageEvent",
    "RequestConfig",
    "ResponseHead",
    "StreamState",
    "TransportResponse",
    # Core
    "decode_chunk",
    "PendingBuffer",
    "frame_fragment",
    "is_json_string",
    "ListenerRegistry",
    "Script",
    "ScriptedTransport",
    "Transport",
    "TransportCallbacks",
    "TransportHandle",
    "HttpxTransport",
    "ChunkedEventSource",
]
