"""Unit tests for the pydantic-backed JSON decoder and the Resource convenience constructor."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel, TypeAdapter

from dispatch_client.domain.requestable import Requestable
from dispatch_client.domain.resource import Resource
from dispatch_client.infrastructure.decoding.json_decoder import JsonDecoder, Timestamp
from dispatch_client.ports.decoder import DateDecoding, Decoder, ParserError
from tests.fakes import Person
from tests.test_data import INVALID_JSON, PERSON_JSON, PERSON_JSON_PRETTY, WRONG_SHAPE_JSON


class Event(BaseModel):
    title: str
    at: Timestamp


@dataclass
class Point:
    x: int
    y: int


def test_json_decoder_satisfies_decoder_port():
    assert isinstance(JsonDecoder(), Decoder)
    assert JsonDecoder().date_decoding is DateDecoding.ISO8601


def test_valid_payload_decodes_into_model():
    assert JsonDecoder().parse(PERSON_JSON_PRETTY, Person) == Person(name="Gordon", age=10, isDone=True)


@pytest.mark.parametrize("payload", [INVALID_JSON, WRONG_SHAPE_JSON, b""], ids=["not-json", "wrong-shape", "empty"])
def test_malformed_payload_raises_parser_error(payload):
    with pytest.raises(ParserError) as exc_info:
        JsonDecoder().parse(payload, Person)
    assert str(exc_info.value).startswith("JSON Decoding Error")
    assert exc_info.value.underlying is not None


@pytest.mark.parametrize(
    "value,target",
    [
        (Person(name="Gordon", age=10, isDone=True), Person),
        (Point(x=1, y=-2), Point),
        ([Person(name="A", age=1, isDone=False), Person(name="B", age=2, isDone=True)], list[Person]),
    ],
    ids=["model", "dataclass", "list"],
)
def test_decode_round_trip(value, target):
    encoded = TypeAdapter(target).dump_json(value)
    assert JsonDecoder().parse(encoded, target) == value


def test_iso8601_dates_are_decoded_by_default():
    event = JsonDecoder().parse(b'{"title": "launch", "at": "2024-11-15T10:30:00Z"}', Event)
    assert event.at == datetime(2024, 11, 15, 10, 30, tzinfo=timezone.utc)


def test_iso8601_strategy_rejects_numeric_dates():
    with pytest.raises(ParserError):
        JsonDecoder().parse(b'{"title": "launch", "at": 1700000000}', Event)


def test_seconds_strategy_decodes_epoch_seconds():
    decoder = JsonDecoder(date_decoding=DateDecoding.SECONDS_SINCE_1970)
    event = decoder.parse(b'{"title": "launch", "at": 86400}', Event)
    assert event.at == datetime(1970, 1, 2, tzinfo=timezone.utc)


def test_milliseconds_strategy_decodes_epoch_milliseconds():
    decoder = JsonDecoder(date_decoding=DateDecoding.MILLISECONDS_SINCE_1970)
    event = decoder.parse(b'{"title": "launch", "at": 86400000}', Event)
    assert event.at == datetime(1970, 1, 2, tzinfo=timezone.utc)


def test_epoch_strategy_rejects_string_dates():
    decoder = JsonDecoder(date_decoding=DateDecoding.SECONDS_SINCE_1970)
    with pytest.raises(ParserError):
        decoder.parse(b'{"title": "launch", "at": "2024-11-15T10:30:00Z"}', Event)


def test_decodable_resource_decodes_with_given_decoder():
    resource = Resource.decodable(Requestable(path="/person"), Person, JsonDecoder())
    assert resource.decode(PERSON_JSON) == Person(name="Gordon", age=10, isDone=True)


def test_decodable_resource_uses_injected_decoder():
    decoder = JsonDecoder(date_decoding=DateDecoding.SECONDS_SINCE_1970)
    resource = Resource.decodable(Requestable(path="/event"), Event, decoder=decoder)
    assert resource.decode(b'{"title": "t", "at": 0}').at == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_custom_decode_function_resource():
    resource = Resource(request=Requestable(path="/text"), decode=lambda data: data.decode())
    assert resource.decode(b"Mock") == "Mock"
