"""JSON decoder implementation using pydantic (injected where Decoder is needed)."""
from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any

from pydantic import BeforeValidator, TypeAdapter, ValidationError, ValidationInfo

from dispatch_client.ports.decoder import DATE_DECODING_CONTEXT_KEY, DateDecoding, ParserError


def _decode_date(value: Any, info: ValidationInfo) -> Any:
    if isinstance(value, datetime):
        return value
    context = info.context or {}
    strategy = DateDecoding(context.get(DATE_DECODING_CONTEXT_KEY, DateDecoding.ISO8601))

    if strategy is DateDecoding.ISO8601:
        if not isinstance(value, str):
            raise ValueError("expected an ISO-8601 date string")
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("expected a numeric timestamp")
    seconds = value / 1000 if strategy is DateDecoding.MILLISECONDS_SINCE_1970 else value
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


# Date field whose literal format follows the decoder's DateDecoding option.
Timestamp = Annotated[datetime, BeforeValidator(_decode_date)]


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class JsonDecoder:
    """Decoder backed by pydantic TypeAdapter.validate_json.

    Any shape pydantic can validate is accepted as target: BaseModel subclasses,
    dataclasses, TypedDicts and plain containers.
    """

    def __init__(self, date_decoding: DateDecoding = DateDecoding.ISO8601) -> None:
        self._date_decoding = DateDecoding(date_decoding)

    @property
    def date_decoding(self) -> DateDecoding:
        return self._date_decoding

    def parse(self, data: bytes, target: Any) -> Any:
        try:
            adapter = _adapter_for(target)
        except TypeError:
            # unhashable target shapes skip the cache
            adapter = TypeAdapter(target)
        try:
            return adapter.validate_json(
                data,
                context={DATE_DECODING_CONTEXT_KEY: self._date_decoding},
            )
        except ValidationError as exc:
            raise ParserError(exc) from exc
