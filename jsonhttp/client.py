from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, TypeVar

import httpx

from jsonhttp.config import AppConfig, ClientConfig
from jsonhttp.http.classifier import accepted_set, classify, decode_model
from jsonhttp.http.errors import NetworkError, TransportFailure
from jsonhttp.http.request import HttpMethod, RequestSpec, build_request
from jsonhttp.http.transport import HttpxTransport, RawResponse, Transport, execute
from jsonhttp.obs.logging import LogSettings, build_logger, log_event

T = TypeVar("T")


@dataclass
class ClientMetrics:
    http_requests_total: dict[tuple[str, str], int] = field(default_factory=lambda: defaultdict(int))
    http_latency_ms: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))

    def record_request(self, method: str, outcome: str, latency_ms: float) -> None:
        self.http_requests_total[(method, outcome)] += 1
        self.http_latency_ms[method].append(latency_ms)


class JsonClient:
    """
    JSON-over-HTTP client.

    Every call runs independently: nothing but the metrics counters is
    shared between concurrent calls.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        transport: Transport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if transport is not None and http_client is not None:
            raise ValueError("Pass either transport or http_client, not both")
        self._config = config or ClientConfig()
        self._logger = logger or logging.getLogger(__name__)
        self._metrics = ClientMetrics()
        self._owned_transport: HttpxTransport | None = None
        if transport is None:
            self._owned_transport = HttpxTransport(http_client)
            transport = self._owned_transport
        self._transport = transport
        self._accepted = accepted_set(self._config.accepted_statuses)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        logger_name: str = "jsonhttp.client",
        transport: Transport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> JsonClient:
        logger = build_logger(
            LogSettings(level=config.obs.log_level, name=logger_name, jsonl=config.obs.log_jsonl)
        )
        return cls(config.client, logger=logger, transport=transport, http_client=http_client)

    @property
    def metrics(self) -> ClientMetrics:
        return self._metrics

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.aclose()

    async def __aenter__(self) -> JsonClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def build_request(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        method: HttpMethod | str = HttpMethod.GET,
        body: Any | None = None,
    ) -> RequestSpec:
        return build_request(
            url,
            headers,
            method,
            body,
            accept_encoding=self._config.accept_encoding,
            default_headers=self._config.default_headers,
        )

    async def fetch_typed(
        self,
        spec: RequestSpec,
        model: type[T],
        accepted_statuses: Iterable[int] | None = None,
    ) -> T:
        response = await self._execute(spec)
        body = self._classify(spec, response, accepted_statuses)
        try:
            return decode_model(body, model, status_code=response.status)
        except NetworkError as exc:
            self._log_fail(spec, exc)
            raise

    async def submit_raw(
        self,
        spec: RequestSpec,
        accepted_statuses: Iterable[int] | None = None,
    ) -> bytes:
        response = await self._execute(spec)
        return self._classify(spec, response, accepted_statuses)

    async def _execute(self, spec: RequestSpec) -> RawResponse:
        method = spec.method.value
        start = time.monotonic()
        try:
            response = await execute(spec, self._transport)
        except TransportFailure as exc:
            latency_ms = (time.monotonic() - start) * 1000
            self._metrics.record_request(method, type(exc).__name__, latency_ms)
            self._log_fail(spec, exc)
            raise

        latency_ms = (time.monotonic() - start) * 1000
        self._metrics.record_request(method, str(response.status), latency_ms)
        log_event(
            self._logger,
            logging.INFO,
            "http_request",
            f"{method} {spec.url}",
            method=method,
            url=spec.url,
            status=response.status,
            latency_ms=round(latency_ms, 2),
        )
        return response

    def _classify(
        self,
        spec: RequestSpec,
        response: RawResponse,
        accepted_statuses: Iterable[int] | None,
    ) -> bytes:
        accepted = self._accepted if accepted_statuses is None else accepted_set(accepted_statuses)
        try:
            return classify(response, accepted)
        except NetworkError as exc:
            self._log_fail(spec, exc)
            raise

    def _log_fail(self, spec: RequestSpec, exc: NetworkError) -> None:
        log_event(
            self._logger,
            logging.WARNING,
            "http_fail",
            f"Request failed for {spec.method.value} {spec.url}",
            url=spec.url,
            error_type=type(exc).__name__,
            status=exc.status_code,
            reason=exc.reason,
        )


async def fetch_typed(
    spec: RequestSpec,
    model: type[T],
    *,
    transport: Transport,
    accepted_statuses: Iterable[int] | None = None,
) -> T:
    """Execute ``spec`` and decode an accepted body into ``model``."""
    response = await execute(spec, transport)
    body = classify(response, accepted_statuses)
    return decode_model(body, model, status_code=response.status)


async def submit_raw(
    spec: RequestSpec,
    *,
    transport: Transport,
    accepted_statuses: Iterable[int] | None = None,
) -> bytes:
    """Execute ``spec`` and return the raw body of an accepted response."""
    response = await execute(spec, transport)
    return classify(response, accepted_statuses)
