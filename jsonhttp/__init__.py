from jsonhttp.client import JsonClient, fetch_typed, submit_raw
from jsonhttp.http.classifier import DEFAULT_ACCEPTED_STATUSES, ErrorPayload, classify, decode_model
from jsonhttp.http.errors import (
    BadStatus,
    DecodingFailed,
    EncodingFailed,
    Forbidden,
    NetworkError,
    NoInternet,
    NonHttpResponse,
    NotFound,
    ServerError,
    StatusError,
    Timeout,
    TransportFailure,
    TransportGeneral,
    Unauthorized,
)
from jsonhttp.http.request import HttpMethod, RequestSpec, build_request
from jsonhttp.http.transport import HttpxTransport, RawResponse, Transport, TransportReply, execute

__all__ = [
    "BadStatus",
    "DEFAULT_ACCEPTED_STATUSES",
    "DecodingFailed",
    "EncodingFailed",
    "ErrorPayload",
    "Forbidden",
    "HttpMethod",
    "HttpxTransport",
    "JsonClient",
    "NetworkError",
    "NoInternet",
    "NonHttpResponse",
    "NotFound",
    "RawResponse",
    "RequestSpec",
    "ServerError",
    "StatusError",
    "Timeout",
    "Transport",
    "TransportFailure",
    "TransportGeneral",
    "TransportReply",
    "Unauthorized",
    "build_request",
    "classify",
    "decode_model",
    "execute",
    "fetch_typed",
    "submit_raw",
]
