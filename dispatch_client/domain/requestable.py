"""Request descriptor: one logical request, independent of where it is sent."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from dispatch_client.domain.http import Method

QueryItem = Tuple[str, Optional[str]]


@dataclass(frozen=True)
class Requestable:
    """Declarative description of an HTTP request.

    Only ``path`` is required; omitted fields default to GET, no query
    parameters, no headers and no body.
    """

    path: str
    method: Method = Method.GET
    parameters: Sequence[QueryItem] = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.method, Method):
            raise TypeError("request.method must be a Method")
        if self.body is not None and not isinstance(self.body, (bytes, bytearray)):
            raise TypeError("request.body must be bytes or None")
        object.__setattr__(self, "parameters", tuple((name, value) for name, value in self.parameters))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if isinstance(self.body, bytearray):
            object.__setattr__(self, "body", bytes(self.body))

    @property
    def debug_description(self) -> str:
        headers = "".join(f"{key}: {value}," for key, value in sorted(self.headers.items()))
        parameters = ", ".join(
            name if value is None else f"{name}={value}" for name, value in self.parameters
        )
        return (
            "\n"
            "⌜--------------------\n"
            f"Request: {self.method.value} - {self.path}\n"
            f"Headers: {headers}\n"
            f"Date: {datetime.now(timezone.utc).isoformat()}\n"
            f"Parameters: [{parameters}]\n"
            "⌞--------------------"
        )
