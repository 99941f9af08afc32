"""Closed failure taxonomy shared by every dispatch style.

Callers branch on the concrete class (or on ``kind``); the underlying collaborator
failure is kept on ``underlying`` for ResponseError and DecodeError.
"""
from __future__ import annotations

from enum import Enum
from typing import ClassVar


class RequestErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    INVALID_DATA = "invalid_data"
    INVALID_RESPONSE = "invalid_response"
    UNHANDLED_STATUS_CODE = "unhandled_status_code"
    RESPONSE = "response"
    DECODE = "decode"


class RequestError(Exception):
    """Base for every terminal dispatch failure."""

    kind: ClassVar[RequestErrorKind]


class InvalidRequestError(RequestError):
    """Descriptor and environment could not be resolved into a valid URL."""

    kind = RequestErrorKind.INVALID_REQUEST

    def __init__(self, detail: str | None = None) -> None:
        super().__init__("Unable to create valid request for resource in environment")
        self.detail = detail


class InvalidDataError(RequestError):
    """2xx response without body bytes."""

    kind = RequestErrorKind.INVALID_DATA

    def __init__(self) -> None:
        super().__init__("Invalid Data")


class InvalidResponseError(RequestError):
    """Transport produced something that is not an HTTP response."""

    kind = RequestErrorKind.INVALID_RESPONSE

    def __init__(self) -> None:
        super().__init__("Invalid Response")


class UnhandledStatusCodeError(RequestError):
    kind = RequestErrorKind.UNHANDLED_STATUS_CODE

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Invalid Response StatusCode {status_code}")
        self.status_code = status_code


class ResponseError(RequestError):
    """Transport failed before producing an HTTP response."""

    kind = RequestErrorKind.RESPONSE

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Response Error {underlying}")
        self.underlying = underlying


class DecodeError(RequestError):
    """Body bytes were present but could not be decoded into the target shape."""

    kind = RequestErrorKind.DECODE

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Decode Error {underlying}")
        self.underlying = underlying
