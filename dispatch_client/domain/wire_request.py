"""Wire request builder: combines a Requestable and an Environment into a transport-ready request.

URL construction:
    scheme://endpoint[:port][/base_path]path[?request params...&query secret]

The port is rendered exactly as configured (``:443`` is kept for https), the path
is taken verbatim and only characters a URL cannot carry are percent-encoded.

Header precedence (last write wins, keys compared case-insensitively):
    request headers < environment additional headers < header secret
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping
from urllib.parse import quote

import httpx

from dispatch_client.domain.environment import Environment, HeaderSecret, QuerySecret
from dispatch_client.domain.errors import InvalidRequestError
from dispatch_client.domain.http import Method
from dispatch_client.domain.requestable import QueryItem, Requestable

_HOST_PATTERN = re.compile(r"^(\[[0-9A-Fa-f:.]+\]|[^\s/?#@\[\]:\\]+)$")
_PATH_SAFE = "/:@!$&'()*+,;=-._~%"
_QUERY_SAFE = "/:@!$'()*,;?-._~"


@dataclass(frozen=True)
class WireRequest:
    """Fully resolved request handed to a transport. Never mutated after construction."""

    method: Method
    url: str
    headers: Mapping[str, str]
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def header(self, key: str) -> str | None:
        lowered = key.lower()
        for name, value in self.headers.items():
            if name.lower() == lowered:
                return value
        return None


def _join_path(base_path: str | None, path: str) -> str:
    if not base_path or not base_path.strip("/"):
        return path
    prefix = "/" + base_path.strip("/")
    if not path:
        return prefix
    if path.startswith("/"):
        return prefix + path
    return f"{prefix}/{path}"


def _encode_query(items: list[QueryItem]) -> str:
    encoded = []
    for name, value in items:
        if value is None:
            encoded.append(quote(name, safe=_QUERY_SAFE))
        else:
            encoded.append(f"{quote(name, safe=_QUERY_SAFE)}={quote(value, safe=_QUERY_SAFE)}")
    return "&".join(encoded)


def _set_header(headers: dict[str, str], key: str, value: str) -> None:
    lowered = key.lower()
    for existing in [name for name in headers if name.lower() == lowered]:
        del headers[existing]
    headers[key] = value


def build_url(request: Requestable, environment: Environment) -> str:
    """Resolve the absolute URL, or raise InvalidRequestError if none can be formed."""
    host = environment.endpoint
    if not host or not _HOST_PATTERN.match(host):
        raise InvalidRequestError("invalid endpoint host")

    port = environment.port
    if port is not None and (isinstance(port, bool) or not 0 <= port <= 65535):
        raise InvalidRequestError("port out of range")

    path = _join_path(environment.base_path, request.path)
    if path and not path.startswith("/"):
        raise InvalidRequestError("path must be empty or start with '/'")

    items: list[QueryItem] = list(request.parameters)
    secret = environment.secret
    if isinstance(secret, QuerySecret):
        items.append((secret.name, secret.value))

    url = f"{environment.scheme.value}://{host}"
    if port is not None:
        url += f":{port}"
    url += quote(path, safe=_PATH_SAFE)
    if items:
        url += "?" + _encode_query(items)

    try:
        httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidRequestError("url rejected by parser") from exc
    return url


def build_headers(request: Requestable, environment: Environment) -> dict[str, str]:
    headers: dict[str, str] = {}
    for key, value in request.headers.items():
        _set_header(headers, key, value)
    for key, value in environment.additional_headers.items():
        _set_header(headers, key, value)
    secret = environment.secret
    if isinstance(secret, HeaderSecret):
        _set_header(headers, secret.key, secret.value)
    return headers


def build_wire_request(request: Requestable, environment: Environment) -> WireRequest:
    return WireRequest(
        method=request.method,
        url=build_url(request, environment),
        headers=build_headers(request, environment),
        body=request.body,
    )
