"""Configuration types."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from chunksource.errors import ConfigurationError

HTTP_METHODS = frozenset(
    {"GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD", "TRACE", "CONNECT"}
)

# Methods whose mapping ``data`` is merged into the query string.
QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE", "OPTIONS"})

ResponseType = Literal["text", "arraybuffer"]

DEFAULT_MAX_PENDING = 1024 * 1024


def _default_headers() -> dict[str, str]:
    return {"content-type": "application/json"}


@dataclass(frozen=True)
class RequestConfig:
    """Request settings forwarded to a transport.

    ``timeout`` is in seconds; ``None`` disables it.
    """

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=_default_headers)
    data: str | bytes | Mapping[str, Any] | list[Any] | None = None
    params: dict[str, Any] | None = None
    timeout: float | None = 60.0
    enable_chunked: bool = False
    response_type: ResponseType = "arraybuffer"

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigurationError("RequestConfig.url must not be empty")
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {self.method!r}")
        object.__setattr__(self, "method", method)
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")
        if self.response_type not in ("text", "arraybuffer"):
            raise ConfigurationError(
                f"response_type must be 'text' or 'arraybuffer', got {self.response_type!r}"
            )

    def streaming(self) -> RequestConfig:
        """Return a copy with chunked delivery and text responses forced on."""
        return dataclasses.replace(self, enable_chunked=True, response_type="text")

    def query_params(self) -> dict[str, Any]:
        """Query parameters, including mapping ``data`` on query-style methods."""
        merged = dict(self.params or {})
        if self.method in QUERY_METHODS and isinstance(self.data, Mapping):
            merged.update(self.data)
        return merged

    def body_kwargs(self) -> dict[str, Any]:
        """Keyword arguments describing the request body for :mod:`httpx`."""
        if self.data is None:
            return {}
        if isinstance(self.data, Mapping):
            if self.method in QUERY_METHODS:
                return {}
            return {"json": dict(self.data)}
        if isinstance(self.data, list):
            return {"json": self.data}
        return {"content": self.data}


@dataclass(frozen=True)
class FramingOptions:
    """Tuning for :func:`chunksource.framing.frame_fragment`.

    ``wrap_scalars`` decides what happens to a line that parses as JSON
    but is not an array: wrapped as a one-item list, or dropped as
    malformed.  ``max_pending`` caps the pending buffer in characters;
    ``None`` leaves it unbounded.
    """

    wrap_scalars: bool = True
    max_pending: int | None = DEFAULT_MAX_PENDING
    data_prefix: str = "data:"

    def __post_init__(self) -> None:
        if self.max_pending is not None and self.max_pending < 0:
            raise ConfigurationError(
                f"max_pending must be >= 0 or None, got {self.max_pending!r}"
            )
