"""
Status classification and response-body decoding.

A response whose status is in the accepted set is a success and its body is
handed back untouched. Anything else is turned into exactly one StatusError,
chosen by a fixed priority that ignores the body entirely except for the
final BadStatus case:

    401 → Unauthorized
    403 → Forbidden
    404 → NotFound
    500..599 → ServerError
    anything else → BadStatus(status, reason)

For BadStatus the body is decoded as ``{"reason": "..."}`` on a best-effort
basis. A body that is empty, not JSON or shaped differently simply yields
``reason=None``; that decode never raises.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, TypeAdapter

from jsonhttp.http.errors import (
    BadStatus,
    Forbidden,
    NotFound,
    ServerError,
    StatusError,
    Unauthorized,
    decoding_failed,
)
from jsonhttp.http.transport import RawResponse

T = TypeVar("T")

DEFAULT_ACCEPTED_STATUSES: frozenset[int] = frozenset(range(200, 300))


class ErrorPayload(BaseModel):
    reason: str


def accepted_set(statuses: Iterable[int] | None) -> frozenset[int]:
    if statuses is None:
        return DEFAULT_ACCEPTED_STATUSES
    return frozenset(statuses)


def decode_error_reason(body: bytes) -> str | None:
    if not body:
        return None
    try:
        return ErrorPayload.model_validate_json(body).reason
    except ValueError:
        return None


def status_error(status: int, body: bytes = b"") -> StatusError:
    if status == 401:
        return Unauthorized("Unauthorized: authentication is required", status_code=status)
    if status == 403:
        return Forbidden("Forbidden: access to the resource is denied", status_code=status)
    if status == 404:
        return NotFound("Not found: the requested resource does not exist", status_code=status)
    if 500 <= status <= 599:
        return ServerError("Server error", status_code=status)
    return BadStatus(
        f"Unexpected status code {status}",
        status_code=status,
        reason=decode_error_reason(body),
    )


def classify(response: RawResponse, accepted_statuses: Iterable[int] | None = None) -> bytes:
    """
    Return the body of an accepted response or raise its StatusError.

    Args:
        response: Normalized transport output.
        accepted_statuses: Statuses treated as success (default 200..299).

    Returns:
        The raw response body.

    Raises:
        StatusError: Unauthorized, Forbidden, NotFound, ServerError or
            BadStatus depending on the status code.
    """
    if response.status in accepted_set(accepted_statuses):
        return response.body
    raise status_error(response.status, response.body)


@lru_cache(maxsize=128)
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


def decode_model(body: bytes, model: type[T], *, status_code: int | None = None) -> T:
    """Decode JSON ``body`` into ``model``; raise DecodingFailed on any mismatch."""
    try:
        adapter = _adapter(model)
    except TypeError:
        adapter = TypeAdapter(model)
    try:
        return adapter.validate_json(body)
    except ValueError as exc:
        raise decoding_failed(exc, status_code=status_code) from exc
