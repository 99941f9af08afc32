"""HTTP vocabulary shared by the descriptor, environment and wire request."""
from __future__ import annotations

from enum import Enum
from typing import NewType

HeaderKey = NewType("HeaderKey", str)
HeaderValue = NewType("HeaderValue", str)


class Scheme(str, Enum):
    SECURE = "https"
    INSECURE = "http"


class Method(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
