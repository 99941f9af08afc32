"""Decoder port: bytes + target shape -> typed value."""
from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

DATE_DECODING_CONTEXT_KEY = "date_decoding"


class ParserError(Exception):
    """Raised when bytes cannot be decoded into the requested shape."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"JSON Decoding Error {underlying}")
        self.underlying = underlying


class DateDecoding(str, Enum):
    """How date literals in a payload are interpreted."""

    ISO8601 = "iso8601"
    SECONDS_SINCE_1970 = "seconds_since_1970"
    MILLISECONDS_SINCE_1970 = "milliseconds_since_1970"


@runtime_checkable
class Decoder(Protocol):
    @property
    def date_decoding(self) -> DateDecoding: ...

    def parse(self, data: bytes, target: Any) -> Any:
        """Decode ``data`` into ``target``; raise ParserError on malformed input."""
        ...
