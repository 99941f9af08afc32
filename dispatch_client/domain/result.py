"""Terminal state of one dispatch call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from dispatch_client.domain.errors import RequestError

T = TypeVar("T")


@dataclass(frozen=True)
class Succeeded(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def error_or_none(self) -> None:
        return None


@dataclass(frozen=True)
class Failed:
    error: RequestError

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Collapse the failure channel into a raised RequestError."""
        raise self.error

    def error_or_none(self) -> RequestError:
        return self.error


Result = Union[Succeeded[T], Failed]
