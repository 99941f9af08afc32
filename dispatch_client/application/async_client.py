"""Awaitable client: the whole pipeline is one suspend point returning a Result."""
from __future__ import annotations

from typing import TypeVar

from dispatch_client.application.pipeline import checked_reply, complete, complete_reply, prepare, report
from dispatch_client.domain.environment import Environment
from dispatch_client.domain.errors import InvalidRequestError, ResponseError
from dispatch_client.domain.requestable import Requestable
from dispatch_client.domain.resource import Resource
from dispatch_client.domain.result import Failed, Result
from dispatch_client.ports.transport import AsyncTransport, TransportReply

T = TypeVar("T")


class AsyncClient:
    """Executes Resources over an AsyncTransport.

    ``execute`` never raises a RequestError: every failure comes back as Failed.
    ``execute_or_raise`` is the same call with the failure raised instead.
    asyncio.CancelledError is propagated untouched.
    """

    def __init__(self, environment: Environment, transport: AsyncTransport) -> None:
        self._environment = environment
        self._transport = transport

    @property
    def environment(self) -> Environment:
        return self._environment

    async def execute(self, resource: Resource[T]) -> Result[T]:
        try:
            wire_request = prepare(resource.request, self._environment)
        except InvalidRequestError as exc:
            outcome: Result[T] = Failed(exc)
            report(outcome)
            return outcome

        try:
            reply = await self._transport.transmit(wire_request)
        except Exception as exc:
            return complete(None, None, exc, resource.decode)
        return complete_reply(reply, resource.decode)

    async def execute_or_raise(self, resource: Resource[T]) -> T:
        outcome = await self.execute(resource)
        return outcome.unwrap()

    async def send(self, request: Requestable) -> TransportReply:
        """Raw exchange without status branching or decoding.

        Raises InvalidRequestError, ResponseError or InvalidResponseError.
        """
        wire_request = prepare(request, self._environment)
        try:
            reply = await self._transport.transmit(wire_request)
        except Exception as exc:
            raise ResponseError(exc) from exc
        return checked_reply(reply)
