"""Callback-style client: returns an unstarted task, delivers the terminal state to a completion."""
from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

from loguru import logger

from dispatch_client.application.pipeline import complete, prepare, report
from dispatch_client.domain.environment import Environment
from dispatch_client.domain.errors import InvalidRequestError, InvalidResponseError, ResponseError
from dispatch_client.domain.resource import Resource
from dispatch_client.domain.result import Failed, Result
from dispatch_client.ports.transport import CallbackTransport, ResponseMetadata, TransportTask

T = TypeVar("T")

Completion = Callable[[Result[T]], None]


class _DeliverOnce(Generic[T]):
    """Wraps a completion so it runs at most once, whatever thread calls it."""

    def __init__(self, completion: Completion[T]) -> None:
        self._completion = completion
        self._lock = threading.Lock()
        self._delivered = False

    def __call__(self, outcome: Result[T]) -> None:
        with self._lock:
            if self._delivered:
                logger.warning("duplicate completion dropped: success={}", outcome.is_success)
                return
            self._delivered = True
        self._completion(outcome)


class CallbackClient:
    """Executes Resources over a CallbackTransport.

    The transport task is returned unstarted; call ``resume()`` to transmit. A
    request that cannot be built delivers Failed(InvalidRequestError) immediately
    and returns None.
    """

    def __init__(self, environment: Environment, transport: CallbackTransport) -> None:
        self._environment = environment
        self._transport = transport

    @property
    def environment(self) -> Environment:
        return self._environment

    def execute(self, resource: Resource[T], completion: Completion[T]) -> TransportTask | None:
        deliver: _DeliverOnce[T] = _DeliverOnce(completion)
        try:
            wire_request = prepare(resource.request, self._environment)
        except InvalidRequestError as exc:
            outcome: Result[T] = Failed(exc)
            report(outcome)
            deliver(outcome)
            return None

        def on_complete(
            body: bytes | None,
            metadata: ResponseMetadata | None,
            error: BaseException | None,
        ) -> None:
            try:
                outcome = complete(body, metadata, error, resource.decode)
            except Exception as exc:
                logger.warning("completion handling failed: {}", type(exc).__name__)
                outcome = Failed(InvalidResponseError())
                report(outcome)
            deliver(outcome)

        try:
            return self._transport.submit(wire_request, on_complete)
        except Exception as exc:
            logger.warning("transport submit failed: {}", exc)
            outcome = Failed(ResponseError(exc))
            report(outcome)
            deliver(outcome)
            return None
