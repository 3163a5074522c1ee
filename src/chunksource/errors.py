"""Error hierarchy for chunksource."""
from __future__ import annotations

from typing import Any


class ChunkSourceError(Exception):
    """Base error for all chunksource errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class TransportError(ChunkSourceError):
    """A request-level failure reported by a transport."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.retryable = retryable


class HTTPStatusError(TransportError):
    """The server answered with a non-success status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: Any = None,
        retryable: bool = False,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, retryable=retryable, cause=cause)
        self.status_code = status_code
        self.body = body


# ---------------------------------------------------------------------------
# Status-specific errors
# ---------------------------------------------------------------------------


class InvalidRequestError(HTTPStatusError):
    """The request was malformed or invalid."""


class AuthenticationError(HTTPStatusError):
    """Authentication failed."""


class AccessDeniedError(HTTPStatusError):
    """Access denied."""


class NotFoundError(HTTPStatusError):
    """The stream endpoint does not exist."""


class RateLimitError(HTTPStatusError):
    """Rate limit exceeded."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class ServerError(HTTPStatusError):
    """Server-side error."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


# ---------------------------------------------------------------------------
# Connection-level errors
# ---------------------------------------------------------------------------


class RequestTimeoutError(TransportError):
    """A request timed out."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class NetworkError(TransportError):
    """A network-level error occurred."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)


class AbortError(TransportError):
    """The request was aborted by the caller."""


# ---------------------------------------------------------------------------
# Non-transport errors
# ---------------------------------------------------------------------------


class StreamError(ChunkSourceError):
    """An error occurred while processing a delivered chunk."""


class ConfigurationError(ChunkSourceError):
    """Invalid request or framing configuration."""


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------


def error_from_status_code(
    status_code: int,
    message: str,
    *,
    body: Any = None,
) -> HTTPStatusError:
    """Map HTTP status code to the appropriate error type."""
    common = dict(status_code=status_code, body=body)

    if status_code in (400, 422):
        return InvalidRequestError(message, **common)
    if status_code == 401:
        return AuthenticationError(message, **common)
    if status_code == 403:
        return AccessDeniedError(message, **common)
    if status_code == 404:
        return NotFoundError(message, **common)
    if status_code == 408:
        return HTTPStatusError(message, retryable=True, **common)
    if status_code == 429:
        return RateLimitError(message, **common)
    if 500 <= status_code <= 599:
        return ServerError(message, **common)

    return HTTPStatusError(message, **common)
