from __future__ import annotations

import asyncio
import socket
from dataclasses import dataclass
from typing import Protocol

import httpx

from jsonhttp.http.errors import NetworkError, TransportFailure, no_internet, non_http, timed_out, transport_general
from jsonhttp.http.request import RequestSpec


@dataclass(frozen=True)
class TransportReply:
    """What a Transport hands back for one request."""
    status: int | None
    body: bytes
    is_http: bool = True


@dataclass(frozen=True)
class RawResponse:
    status: int
    body: bytes


class Transport(Protocol):
    async def perform(self, spec: RequestSpec) -> TransportReply:
        """Send one request. Transport-layer failures propagate as raised."""
        ...


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    When no client is passed one is created with httpx's default settings
    (optionally over ``transport``) and owned by this transport; ``aclose``
    only closes an owned client.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if client is not None and transport is not None:
            raise ValueError("Pass either client or transport, not both")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport)

    async def perform(self, spec: RequestSpec) -> TransportReply:
        # httpx rejects non-http(s) schemes with UnsupportedProtocol, so every
        # reply that gets here is an HTTP response.
        response = await self._client.request(
            spec.method.value,
            spec.url,
            headers=dict(spec.headers),
            content=spec.body,
        )
        return TransportReply(status=response.status_code, body=response.content)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def map_transport_error(exc: BaseException) -> TransportFailure:
    """Translate a raw transport exception into the matching TransportFailure."""
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return timed_out(exc)
    if isinstance(exc, (httpx.ConnectError, ConnectionError, socket.gaierror)):
        return no_internet(exc)
    if isinstance(exc, httpx.UnsupportedProtocol):
        return non_http(exc)
    return transport_general(exc)


async def execute(spec: RequestSpec, transport: Transport) -> RawResponse:
    """
    Perform ``spec`` exactly once and normalize the outcome.

    Raises:
        NonHttpResponse: The reply carried no HTTP status.
        NoInternet: No connectivity.
        Timeout: The transport deadline elapsed.
        TransportGeneral: Any other failure, including cancellation.
    """
    try:
        reply = await transport.perform(spec)
    except NetworkError:
        raise
    except (Exception, asyncio.CancelledError) as exc:
        raise map_transport_error(exc) from exc

    if not reply.is_http or reply.status is None:
        raise non_http()
    return RawResponse(status=reply.status, body=reply.body)
