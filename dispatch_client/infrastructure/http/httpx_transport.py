"""Concrete transports using httpx (injected where the transport ports are needed).

Redirects are never followed; a 3xx reaches the pipeline as an unhandled status code.
Error messages carry the method only: the URL may contain a query secret.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import AsyncIterator

import httpx
from loguru import logger

from dispatch_client.domain.wire_request import WireRequest
from dispatch_client.ports.transport import (
    AsyncTransport,
    CallbackTransport,
    RequestTimeout,
    ResponseMetadata,
    StreamTransport,
    TransportCancelledError,
    TransportCompletion,
    TransportError,
    TransportReply,
    TransportTask,
    TransportTimeoutError,
)


def _httpx_timeout(timeout: RequestTimeout) -> httpx.Timeout:
    return httpx.Timeout(
        connect=timeout.connect_seconds,
        read=timeout.read_seconds,
        write=timeout.read_seconds,
        pool=timeout.connect_seconds,
    )


def _to_reply(response: httpx.Response) -> TransportReply:
    return TransportReply(
        body=response.content,
        metadata=ResponseMetadata(
            status_code=response.status_code,
            headers=dict(response.headers),
            url=str(response.url),
        ),
    )


def _translate(request: WireRequest, exc: httpx.HTTPError) -> TransportError:
    if isinstance(exc, httpx.TimeoutException):
        return TransportTimeoutError(f"timeout during {request.method.value} request")
    return TransportError(f"{request.method.value} request failed: {exc}")


class HttpxAsyncTransport(AsyncTransport, StreamTransport):
    """AsyncTransport and StreamTransport implementation using httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient, timeout: RequestTimeout) -> None:
        self._client = client
        self._timeout = _httpx_timeout(timeout)

    async def transmit(self, request: WireRequest) -> TransportReply:
        try:
            response = await self._client.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                content=request.body,
                timeout=self._timeout,
                follow_redirects=False,
            )
        except httpx.HTTPError as exc:
            raise _translate(request, exc) from exc
        return _to_reply(response)

    async def stream(self, request: WireRequest) -> AsyncIterator[TransportReply]:
        yield await self.transmit(request)

    async def close(self) -> None:
        await self._client.aclose()


class HttpxTransportTask(TransportTask):
    """Suspended exchange; resume() schedules it on the transport's executor.

    The completion runs exactly once: with the exchange outcome, or with
    TransportCancelledError when cancelled before the exchange started, or with
    TransportError when resumed after the transport was closed.
    """

    def __init__(self, transport: "HttpxCallbackTransport", request: WireRequest, completion: TransportCompletion) -> None:
        self._transport = transport
        self._request = request
        self._completion = completion
        self._lock = threading.Lock()
        self._future: Future[None] | None = None
        self._finished = False

    def resume(self) -> None:
        with self._lock:
            if self._future is not None or self._finished:
                return
            try:
                self._future = self._transport.executor.submit(self._run)
                return
            except RuntimeError as exc:
                # executor already shut down by close()
                failure = TransportError(f"transport closed before {self._request.method.value} request")
                failure.__cause__ = exc
        self._finish(None, None, failure)

    def cancel(self) -> None:
        with self._lock:
            if self._finished:
                return
            if self._future is not None and not self._future.cancel():
                # already running; the exchange outcome will be delivered
                return
        self._finish(None, None, TransportCancelledError("task cancelled before transmission"))

    def _run(self) -> None:
        body, metadata, error = self._transport.perform(self._request)
        self._finish(body, metadata, error)

    def _finish(
        self,
        body: bytes | None,
        metadata: ResponseMetadata | None,
        error: BaseException | None,
    ) -> None:
        with self._lock:
            if self._finished:
                return
            self._finished = True
        self._completion(body, metadata, error)


class HttpxCallbackTransport(CallbackTransport):
    """CallbackTransport implementation using httpx.Client on a thread pool."""

    def __init__(
        self,
        client: httpx.Client,
        timeout: RequestTimeout,
        executor: ThreadPoolExecutor,
    ) -> None:
        self._client = client
        self._timeout = _httpx_timeout(timeout)
        self._executor = executor

    @property
    def executor(self) -> ThreadPoolExecutor:
        return self._executor

    def submit(self, request: WireRequest, completion: TransportCompletion) -> HttpxTransportTask:
        return HttpxTransportTask(self, request, completion)

    def perform(
        self, request: WireRequest
    ) -> tuple[bytes | None, ResponseMetadata | None, BaseException | None]:
        try:
            response = self._client.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                content=request.body,
                timeout=self._timeout,
                follow_redirects=False,
            )
        except httpx.HTTPError as exc:
            error = _translate(request, exc)
            error.__cause__ = exc
            return None, None, error
        except Exception as exc:
            logger.warning("unexpected transport failure: {}", exc)
            return None, None, exc
        reply = _to_reply(response)
        return reply.body, reply.metadata, None

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self._client.close()
