"""Resource: what to fetch and how to interpret it, as one reusable unit."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from dispatch_client.domain.requestable import Requestable
from dispatch_client.ports.decoder import Decoder

T = TypeVar("T")


@dataclass(frozen=True)
class Resource(Generic[T]):
    """A Requestable bound to a decode function ``bytes -> T``.

    The decode function may raise anything; the pipeline reports it as DecodeError.
    """

    request: Requestable
    decode: Callable[[bytes], T]

    @classmethod
    def decodable(cls, request: Requestable, target: Any, decoder: Decoder) -> "Resource[Any]":
        """Resource whose body is decoded into ``target`` by ``decoder``."""

        def decode(data: bytes) -> Any:
            return decoder.parse(data, target)

        return cls(request=request, decode=decode)
