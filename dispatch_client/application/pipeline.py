"""Dispatch pipeline shared by the callback, awaitable and stream clients.

Per call, strictly in order:
    1. Build     -> InvalidRequestError
    2. Transmit  -> ResponseError (any exception raised by the transport step)
    3. Classify  -> InvalidResponseError when no status code is available
    4. Branch    -> UnhandledStatusCodeError for anything outside 200-299
    5. Decode    -> InvalidDataError for a missing/empty body, DecodeError when decode raises

Clients only differ in how the terminal state is delivered; steps 1 and 3-5 live here.
"""
from __future__ import annotations

from typing import Any, Callable, TypeVar

from loguru import logger

from dispatch_client.constants import SERVICE_NAME, SUCCESS_STATUS_CODES
from dispatch_client.domain.environment import Environment
from dispatch_client.domain.errors import (
    DecodeError,
    InvalidDataError,
    InvalidResponseError,
    RequestError,
    ResponseError,
    UnhandledStatusCodeError,
)
from dispatch_client.domain.requestable import Requestable
from dispatch_client.domain.result import Failed, Result, Succeeded
from dispatch_client.domain.wire_request import WireRequest, build_wire_request
from dispatch_client.ports.transport import ResponseMetadata, TransportReply

T = TypeVar("T")


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def prepare(request: Requestable, environment: Environment) -> WireRequest:
    """Build step. Raises InvalidRequestError."""
    try:
        wire_request = build_wire_request(request, environment)
    except RequestError as exc:
        _log(
            "request_build_failed",
            method=request.method.value,
            path=request.path,
            environment=environment.debug_description,
            detail=getattr(exc, "detail", None),
        )
        raise
    _log(
        "request_built",
        method=request.method.value,
        path=request.path,
        environment=environment.debug_description,
    )
    return wire_request


def status_code_of(metadata: ResponseMetadata | None) -> int:
    """Classify step. Raises InvalidResponseError when the reply is not HTTP-shaped."""
    status_code = getattr(metadata, "status_code", None)
    if not isinstance(status_code, int) or isinstance(status_code, bool):
        raise InvalidResponseError()
    return status_code


def checked_reply(reply: object) -> TransportReply:
    """Raw counterpart of the classify step: the reply must be an HTTP reply with a status code."""
    if not isinstance(reply, TransportReply):
        raise InvalidResponseError()
    status_code_of(reply.metadata)
    return reply


def map_response(
    body: bytes | None,
    metadata: ResponseMetadata | None,
    decode: Callable[[bytes], T],
) -> T:
    """Classify, branch on status and decode. Raises a RequestError on any failure."""
    status_code = status_code_of(metadata)
    if status_code not in SUCCESS_STATUS_CODES:
        raise UnhandledStatusCodeError(status_code)
    if not body:
        raise InvalidDataError()
    try:
        return decode(body)
    except DecodeError:
        raise
    except Exception as exc:
        raise DecodeError(exc) from exc


def complete(
    body: bytes | None,
    metadata: ResponseMetadata | None,
    error: BaseException | None,
    decode: Callable[[bytes], T],
) -> Result[T]:
    """Normalise one transport outcome into the terminal state of the call."""
    if error is not None:
        outcome: Result[T] = Failed(ResponseError(error))
    else:
        try:
            outcome = Succeeded(map_response(body, metadata, decode))
        except RequestError as exc:
            outcome = Failed(exc)
    report(outcome, metadata)
    return outcome


def complete_reply(reply: object, decode: Callable[[bytes], T]) -> Result[T]:
    """Terminal state for what a transport returned; anything but a TransportReply is InvalidResponse."""
    if not isinstance(reply, TransportReply):
        outcome: Result[T] = Failed(InvalidResponseError())
        report(outcome)
        return outcome
    return complete(reply.body, reply.metadata, None, decode)


def report(outcome: Result[Any], metadata: ResponseMetadata | None = None) -> None:
    status_code = getattr(metadata, "status_code", None)
    if isinstance(outcome, Failed):
        _log("request_failed", kind=outcome.error.kind.value, status_code=status_code)
    else:
        _log("request_succeeded", status_code=status_code)
