from jsonhttp.http.classifier import DEFAULT_ACCEPTED_STATUSES, classify, decode_model
from jsonhttp.http.errors import NetworkError, StatusError, TransportFailure
from jsonhttp.http.request import HttpMethod, RequestSpec, build_request
from jsonhttp.http.transport import HttpxTransport, RawResponse, Transport, execute

__all__ = [
    "DEFAULT_ACCEPTED_STATUSES",
    "HttpMethod",
    "HttpxTransport",
    "NetworkError",
    "RawResponse",
    "RequestSpec",
    "StatusError",
    "Transport",
    "TransportFailure",
    "build_request",
    "classify",
    "decode_model",
    "execute",
]
