from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic_core import PydanticSerializationError, to_json

from jsonhttp.http.errors import encoding_failed

DEFAULT_ACCEPT_ENCODING = "gzip, deflate, br"
JSON_CONTENT_TYPE = "application/json"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: HttpMethod | str) -> HttpMethod:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None


@dataclass(frozen=True)
class RequestSpec:
    """
    Wire-ready request descriptor.

    Attributes:
        url: Absolute request URL.
        method: HTTP method.
        headers: Read-only header mapping, defaults already merged.
        body: Encoded JSON body, or None for body-less requests.
    """
    url: str
    method: HttpMethod
    headers: Mapping[str, str]
    body: bytes | None = None

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


def build_request(
    url: str,
    headers: Mapping[str, str] | None = None,
    method: HttpMethod | str = HttpMethod.GET,
    body: Any | None = None,
    *,
    accept_encoding: str = DEFAULT_ACCEPT_ENCODING,
    default_headers: Mapping[str, str] | None = None,
) -> RequestSpec:
    """
    Build a JSON request.

    Header precedence, lowest first: ``Accept-Encoding`` / ``Content-Type``,
    then ``default_headers``, then ``headers``. Names compare
    case-insensitively and the later value replaces the earlier one.

    Args:
        url: Request URL.
        headers: Caller headers.
        method: HttpMethod or its name.
        body: Any value pydantic-core can serialize (dicts, lists, scalars,
            pydantic models, dataclasses). None means no body.
        accept_encoding: Value sent as ``Accept-Encoding``.
        default_headers: Extra headers applied before the caller's.

    Returns:
        Immutable RequestSpec.

    Raises:
        EncodingFailed: If ``body`` cannot be serialized.
        ValueError: If ``method`` is not a supported method name.
    """
    http_method = HttpMethod.parse(method)

    merged: dict[str, str] = {}
    _set_header(merged, "Accept-Encoding", accept_encoding)
    if body is not None:
        _set_header(merged, "Content-Type", JSON_CONTENT_TYPE)
    for source in (default_headers, headers):
        for key, value in (source or {}).items():
            _set_header(merged, key, value)

    encoded: bytes | None = None
    if body is not None:
        try:
            encoded = to_json(body)
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            raise encoding_failed(exc) from exc

    return RequestSpec(url=url, method=http_method, headers=MappingProxyType(merged), body=encoded)


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    lowered = name.lower()
    for existing in [key for key in headers if key.lower() == lowered]:
        del headers[existing]
    headers[name] = value
