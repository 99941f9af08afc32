"""Transport port: contract for performing one HTTP exchange.

The dispatch pipeline depends on this port; infrastructure (e.g. httpx) implements it.
Three interchangeable primitives exist for the same WireRequest: callback, awaitable
and async stream. A reply whose metadata carries no status code is not an HTTP
response.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import AsyncIterator, Callable, Mapping, Optional, Protocol, runtime_checkable

from dispatch_client.domain.wire_request import WireRequest


class TransportError(Exception):
    """Base for transport failures (network, timeout, etc.)."""


class TransportTimeoutError(TransportError):
    """Raised when the exchange times out."""


class TransportCancelledError(TransportError):
    """Reported when a task is cancelled before it produced a response."""


@dataclass(frozen=True)
class RequestTimeout:
    """Connect and read timeouts in seconds."""

    connect_seconds: float
    read_seconds: float


@dataclass(frozen=True)
class ResponseMetadata:
    """Read-only view of what the server answered. ``status_code`` is None when unavailable."""

    status_code: int | None
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


@dataclass(frozen=True)
class TransportReply:
    body: bytes | None
    metadata: ResponseMetadata | None


TransportCompletion = Callable[
    [Optional[bytes], Optional[ResponseMetadata], Optional[BaseException]], None
]


@runtime_checkable
class TransportTask(Protocol):
    """Handle returned by CallbackTransport.submit. Nothing is transmitted before resume()."""

    def resume(self) -> None: ...

    def cancel(self) -> None: ...


@runtime_checkable
class CallbackTransport(Protocol):
    def submit(self, request: WireRequest, completion: TransportCompletion) -> TransportTask:
        """Prepare the exchange; completion receives (body, metadata, error) once the task ran."""
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    async def transmit(self, request: WireRequest) -> TransportReply:
        """Perform the exchange; raise TransportError (or any exception) on failure."""
        ...


@runtime_checkable
class StreamTransport(Protocol):
    def stream(self, request: WireRequest) -> AsyncIterator[TransportReply]:
        """Async iterator yielding the reply once, or raising on failure."""
        ...
