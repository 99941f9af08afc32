"""Transport factories: build httpx-backed transports from settings (no provider logic in composition)."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import httpx

from dispatch_client.config.settings import Settings
from dispatch_client.infrastructure.http.httpx_transport import (
    HttpxAsyncTransport,
    HttpxCallbackTransport,
)
from dispatch_client.ports.transport import RequestTimeout


def _request_timeout(settings: Settings) -> RequestTimeout:
    return RequestTimeout(
        connect_seconds=settings.fetch_connect_timeout_seconds,
        read_seconds=settings.fetch_read_timeout_seconds,
    )


def create_async_transport(settings: Settings) -> HttpxAsyncTransport:
    """Awaitable + stream transport. Timeouts are applied per request by the adapter."""
    return HttpxAsyncTransport(httpx.AsyncClient(), _request_timeout(settings))


def create_callback_transport(settings: Settings) -> HttpxCallbackTransport:
    executor = ThreadPoolExecutor(
        max_workers=max(1, settings.callback_workers),
        thread_name_prefix="dispatch-client",
    )
    return HttpxCallbackTransport(httpx.Client(), _request_timeout(settings), executor)
