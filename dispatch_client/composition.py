"""Client composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from dispatch_client.application.async_client import AsyncClient
from dispatch_client.application.callback_client import CallbackClient
from dispatch_client.application.stream_client import StreamClient
from dispatch_client.config.settings import Settings
from dispatch_client.constants import SECRET_KIND, SERVICE_NAME
from dispatch_client.domain.environment import Environment, HeaderSecret, QuerySecret, Secret
from dispatch_client.domain.http import HeaderKey, HeaderValue
from dispatch_client.domain.requestable import Requestable
from dispatch_client.domain.resource import Resource
from dispatch_client.infrastructure.decoding.factory import create_decoder
from dispatch_client.infrastructure.http.factory import (
    create_async_transport,
    create_callback_transport,
)
from dispatch_client.infrastructure.http.httpx_transport import (
    HttpxAsyncTransport,
    HttpxCallbackTransport,
)
from dispatch_client.ports.decoder import Decoder


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _secret_from(settings: Settings) -> Secret | None:
    kind = settings.api_secret_kind.strip().lower()
    name = settings.api_secret_name
    value = settings.api_secret_value.get_secret_value()
    if kind == SECRET_KIND.NONE:
        return None
    if not name:
        raise ValueError("API_SECRET_NAME is required when API_SECRET_KIND is set")
    if kind == SECRET_KIND.HEADER:
        return HeaderSecret(HeaderKey(name), HeaderValue(value))
    if kind == SECRET_KIND.QUERY:
        return QuerySecret(name, value)
    raise ValueError(f"unknown API_SECRET_KIND: {settings.api_secret_kind}")


def create_environment(settings: Settings) -> Environment:
    headers = dict(settings.api_headers)
    if settings.fetch_user_agent:
        headers.setdefault("User-Agent", settings.fetch_user_agent)
    return Environment(
        scheme=settings.api_scheme,
        endpoint=settings.api_host,
        additional_headers=headers,
        port=settings.api_port,
        base_path=settings.api_base_path,
        secret=_secret_from(settings),
    )


class ClientDependencies:
    """Holds the wired environment, decoder, transports and clients and their lifecycle."""

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._environment = create_environment(settings)
        self._decoder = create_decoder(settings)
        self._async_transport: HttpxAsyncTransport | None = None
        self._callback_transport: HttpxCallbackTransport | None = None
        self._async_client: AsyncClient | None = None
        self._stream_client: StreamClient | None = None
        self._callback_client: CallbackClient | None = None
        self._connected = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def decoder(self) -> Decoder:
        return self._decoder

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def async_client(self) -> AsyncClient:
        if self._async_client is None:
            raise RuntimeError("async_client is not initialized")
        return self._async_client

    @property
    def stream_client(self) -> StreamClient:
        if self._stream_client is None:
            raise RuntimeError("stream_client is not initialized")
        return self._stream_client

    @property
    def callback_client(self) -> CallbackClient:
        if self._callback_client is None:
            raise RuntimeError("callback_client is not initialized")
        return self._callback_client

    def decodable(self, request: Requestable, target: Any) -> Resource[Any]:
        """Resource decoded with the configured decoder (honours DATE_DECODING)."""
        return Resource.decodable(request, target, self._decoder)

    def connect(self) -> None:
        self._async_transport = create_async_transport(self._settings)
        self._callback_transport = create_callback_transport(self._settings)
        self._async_client = AsyncClient(self._environment, self._async_transport)
        self._stream_client = StreamClient(self._environment, self._async_transport)
        self._callback_client = CallbackClient(self._environment, self._callback_transport)
        self._connected = True
        _log("clients_ready", environment=self._environment.debug_description)

    async def close(self) -> None:
        if self._async_transport is not None:
            try:
                await self._async_transport.close()
            except Exception as exc:
                logger.warning("async transport close failed: {}", exc)
            self._async_transport = None

        if self._callback_transport is not None:
            try:
                self._callback_transport.close()
            except Exception as exc:
                logger.warning("callback transport close failed: {}", exc)
            self._callback_transport = None

        self._async_client = None
        self._stream_client = None
        self._callback_client = None
        self._connected = False
        _log("clients_closed")


def create_client_dependencies(settings: Settings | None = None) -> ClientDependencies:
    return ClientDependencies(settings=settings or Settings())
