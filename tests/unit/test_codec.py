from __future__ import annotations

import json
import warnings
from datetime import datetime

import pytest

from capture.codec import InnerEvent, build_envelope, encode_event
from capture.errors import EventEncodingError
from capture.models import Event


def test_encode_matches_expected_envelope():
    event = Event.new("event", "distinct_id")
    event.insert_prop("key", "value")

    body = encode_event(event, "api_key")

    expected = json.loads(
        '{"api_key":"api_key","event":"event","properties":{"distinct_id":"distinct_id",'
        '"properties":{"key":"value"}},"timestamp":null}'
    )
    assert json.loads(body) == expected


def test_encode_field_order():
    body = encode_event(Event.new("event", "distinct_id"), "api_key")

    assert list(json.loads(body).keys()) == ["api_key", "event", "properties", "timestamp"]


def test_encode_is_utf8_bytes():
    event = Event.new("café_opened", "usér")
    event.insert_prop("city", "Zürich")

    body = encode_event(event, "k")

    assert isinstance(body, bytes)
    decoded = json.loads(body.decode("utf-8"))
    assert decoded["event"] == "café_opened"
    assert decoded["properties"]["properties"] == {"city": "Zürich"}


def test_encode_with_timestamp_and_many_properties():
    event = Event.new("purchase", "user-9")
    event.insert_prop_many([("sku", "A1"), ("qty", "2"), ("sku", "B2")])
    event.set_timestamp(datetime(2031, 5, 6, 7, 8, 9))

    decoded = json.loads(encode_event(event, "phc_key"))

    assert decoded == {
        "api_key": "phc_key",
        "event": "purchase",
        "properties": {"distinct_id": "user-9", "properties": {"sku": "B2", "qty": "2"}},
        "timestamp": "2031-05-06T07:08:09",
    }


def test_build_envelope_does_not_alias_event_properties():
    event = Event.new("e", "d")
    event.insert_prop("a", "1")

    envelope = build_envelope(event, "k")
    event.insert_prop("b", "2")

    assert isinstance(envelope, InnerEvent)
    assert envelope.properties.properties == {"a": "1"}


def test_non_string_property_value_is_an_encoding_error():
    event = Event.new("e", "d")
    event.insert_prop("count", 3)  # type: ignore[arg-type]

    with pytest.raises(EventEncodingError):
        encode_event(event, "k")


def test_non_string_property_value_raises_without_serializer_warnings():
    event = Event.new("e", "d")
    event.insert_prop("count", 3)  # type: ignore[arg-type]

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        with pytest.raises(EventEncodingError):
            build_envelope(event, "k")
