"""Deployment target description: where requests go and what every request carries."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from dispatch_client.domain.http import HeaderKey, HeaderValue, Scheme


@dataclass(frozen=True)
class QuerySecret:
    """Credential appended to the URL query, always after the request's own parameters."""

    name: str
    value: str = field(repr=False)


@dataclass(frozen=True)
class HeaderSecret:
    """Credential injected as a header; overrides any same-named request or environment header."""

    key: HeaderKey
    value: HeaderValue = field(repr=False)


Secret = Union[QuerySecret, HeaderSecret]


@dataclass(frozen=True)
class Environment:
    """Immutable deployment target shared by any number of concurrent requests.

    The secret is excluded from repr() and from the debug description so an
    Environment can be logged as-is.
    """

    scheme: Scheme
    endpoint: str
    additional_headers: Mapping[str, str] = field(default_factory=dict)
    port: int | None = None
    base_path: str | None = None
    secret: Secret | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.scheme, Scheme):
            raise TypeError("environment.scheme must be a Scheme")
        if self.secret is not None and not isinstance(self.secret, (QuerySecret, HeaderSecret)):
            raise TypeError("environment.secret must be a QuerySecret or HeaderSecret")
        object.__setattr__(
            self, "additional_headers", MappingProxyType(dict(self.additional_headers))
        )

    @property
    def debug_description(self) -> str:
        components = [f"{self.scheme.value}-{self.endpoint}"]
        if self.port is not None:
            components.append(f":{self.port}")
        if self.base_path:
            components.append(f"/{self.base_path}")
        return "".join(components)

    def __str__(self) -> str:
        return self.debug_description
