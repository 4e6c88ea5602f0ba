"""
Error taxonomy for JSON-over-HTTP calls.

Every failure a call can produce is one of the classes below. They are
grouped by the phase in which they occur:

- **Build time** (before any I/O):
    EncodingFailed → the request body could not be serialized to JSON

- **Transport time** (``TransportFailure``):
    NonHttpResponse  → the reply was not an HTTP response (no status code)
    NoInternet       → no connectivity (DNS failure, connection refused)
    Timeout          → the transport's deadline elapsed
    TransportGeneral → anything else, including cancellation

- **Protocol time** (``StatusError`` plus ``DecodingFailed``):
    HTTP 401 → Unauthorized
    HTTP 403 → Forbidden
    HTTP 404 → NotFound
    HTTP 5xx → ServerError
    other    → BadStatus (reason taken from a ``{"reason": ...}`` body if any)
    2xx body that does not decode into the requested model → DecodingFailed

None of these are retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

NO_INTERNET_CODE = -1009
TIMEOUT_CODE = -1001


@dataclass(frozen=True)
class NetworkError(Exception):
    """
    Base exception for every failure raised by this package.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code, or a negative sentinel code for
            transport conditions (None when neither applies).
        reason: Server-supplied reason string if one was decoded.
        cause: Underlying exception this error wraps, if any.
    """
    message: str
    status_code: int | None = None
    reason: str | None = None
    cause: BaseException | None = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.reason:
            parts.append(f"reason={self.reason}")
        if self.cause is not None:
            parts.append(f"cause={self.cause!r}")
        return " | ".join(parts)


class EncodingFailed(NetworkError):
    """Request body could not be encoded as JSON."""
    pass


class TransportFailure(NetworkError):
    """The request never produced a usable HTTP response."""
    pass


class NonHttpResponse(TransportFailure):
    """Reply carried no HTTP status (non-HTTP scheme or response)."""
    pass


class NoInternet(TransportFailure):
    """No connectivity - DNS failure or connection refused."""
    pass


class Timeout(TransportFailure):
    """The transport deadline elapsed before a response arrived."""
    pass


class TransportGeneral(TransportFailure):
    """
    Any other transport-layer failure.

    The original exception is kept verbatim in ``cause``. Cancellation of an
    in-flight request also ends up here.
    """
    pass


class StatusError(NetworkError):
    """An HTTP response arrived with a status outside the accepted set."""
    pass


class Unauthorized(StatusError):
    """HTTP 401 - authentication required."""
    pass


class Forbidden(StatusError):
    """HTTP 403 - access denied."""
    pass


class NotFound(StatusError):
    """HTTP 404 - resource does not exist."""
    pass


class ServerError(StatusError):
    """HTTP 5xx - server-side failure."""
    pass


class BadStatus(StatusError):
    """
    Status outside the accepted set that matches no named case.

    ``reason`` comes from a best-effort decode of the response body and is
    None when the body is empty or not an error payload.
    """
    pass


class DecodingFailed(NetworkError):
    """A success response body did not decode into the requested model."""
    pass


def encoding_failed(cause: BaseException) -> EncodingFailed:
    return EncodingFailed("Request body could not be encoded as JSON", cause=cause)


def decoding_failed(cause: BaseException, status_code: int | None = None) -> DecodingFailed:
    return DecodingFailed("Response body could not be decoded", status_code=status_code, cause=cause)


def no_internet(cause: BaseException | None = None) -> NoInternet:
    return NoInternet("The Internet connection appears to be offline", status_code=NO_INTERNET_CODE, cause=cause)


def timed_out(cause: BaseException | None = None) -> Timeout:
    return Timeout("The request timed out", status_code=TIMEOUT_CODE, cause=cause)


def non_http(cause: BaseException | None = None) -> NonHttpResponse:
    return NonHttpResponse("Response is not an HTTP response", cause=cause)


def transport_general(cause: BaseException) -> TransportGeneral:
    return TransportGeneral("Request failed", cause=cause)
