"""Stream client: single-shot async iterators over the dispatch pipeline.

``publish`` yields the decoded value once and completes, or raises the RequestError
on the first ``__anext__``. Nothing runs until the iterator is consumed, so a
request that cannot be built surfaces as an immediately failing stream rather than
an exception at call time.
"""
from __future__ import annotations

from typing import AsyncIterator, TypeVar

from dispatch_client.application.pipeline import checked_reply, complete, complete_reply, prepare, report
from dispatch_client.domain.environment import Environment
from dispatch_client.domain.errors import InvalidRequestError, ResponseError
from dispatch_client.domain.requestable import Requestable
from dispatch_client.domain.resource import Resource
from dispatch_client.domain.result import Failed, Result
from dispatch_client.domain.wire_request import WireRequest
from dispatch_client.ports.transport import StreamTransport, TransportReply

T = TypeVar("T")


class StreamClient:
    def __init__(self, environment: Environment, transport: StreamTransport) -> None:
        self._environment = environment
        self._transport = transport

    @property
    def environment(self) -> Environment:
        return self._environment

    async def _first_reply(self, wire_request: WireRequest) -> object:
        replies = self._transport.stream(wire_request)
        try:
            async for reply in replies:
                return reply
            return None
        finally:
            aclose = getattr(replies, "aclose", None)
            if aclose is not None:
                await aclose()

    async def _resolve(self, resource: Resource[T]) -> Result[T]:
        try:
            wire_request = prepare(resource.request, self._environment)
        except InvalidRequestError as exc:
            outcome: Result[T] = Failed(exc)
            report(outcome)
            return outcome

        try:
            reply = await self._first_reply(wire_request)
        except Exception as exc:
            return complete(None, None, exc, resource.decode)
        return complete_reply(reply, resource.decode)

    async def _publish(self, resource: Resource[T]) -> AsyncIterator[T]:
        outcome = await self._resolve(resource)
        yield outcome.unwrap()

    def publish(self, resource: Resource[T]) -> AsyncIterator[T]:
        return self._publish(resource)

    async def _publish_raw(self, request: Requestable) -> AsyncIterator[TransportReply]:
        wire_request = prepare(request, self._environment)
        try:
            reply = await self._first_reply(wire_request)
        except Exception as exc:
            raise ResponseError(exc) from exc
        yield checked_reply(reply)

    def publish_raw(self, request: Requestable) -> AsyncIterator[TransportReply]:
        """Raw counterpart of ``publish``: yields the HTTP reply without status branching or decoding."""
        return self._publish_raw(request)
