from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from gasguru._codec import (
    decode_document,
    decode_value,
    encode_fields,
    encode_value,
    format_timestamp,
    parse_timestamp,
)
from gasguru.models import PaymentMethod


def test_encode_scalars() -> None:
    assert encode_value(None) == {"nullValue": None}
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(42) == {"integerValue": "42"}
    assert encode_value(1.5) == {"doubleValue": 1.5}
    assert encode_value("x") == {"stringValue": "x"}
    assert encode_value(PaymentMethod.CARD) == {"stringValue": "card"}


def test_encode_datetime_as_utc_timestamp() -> None:
    paris = timezone(timedelta(hours=2))
    value = datetime(2024, 6, 1, 10, 0, tzinfo=paris)

    assert encode_value(value) == {"timestampValue": "2024-06-01T08:00:00Z"}


def test_encode_nested_map_and_array() -> None:
    fields = encode_fields({"location": {"lat": 45.0, "address": "Lyon"}, "fuelTypes": ["SP95", "Diesel"]})

    assert fields["location"] == {
        "mapValue": {"fields": {"lat": {"doubleValue": 45.0}, "address": {"stringValue": "Lyon"}}}
    }
    assert fields["fuelTypes"] == {"arrayValue": {"values": [{"stringValue": "SP95"}, {"stringValue": "Diesel"}]}}


def test_encode_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        encode_value(object())


def test_parse_timestamp_truncates_nanoseconds() -> None:
    parsed = parse_timestamp("2024-03-01T08:30:00.123456789Z")

    assert parsed == datetime(2024, 3, 1, 8, 30, 0, 123456, tzinfo=UTC)
    assert format_timestamp(parsed) == "2024-03-01T08:30:00.123456Z"


def test_decode_document() -> None:
    document = {
        "name": "projects/p/databases/(default)/documents/fuelPurchases/abc123",
        "fields": {
            "quantity": {"doubleValue": 40},
            "mileage": {"integerValue": "10500"},
            "date": {"timestampValue": "2024-03-01T08:30:00Z"},
            "notes": {"nullValue": None},
            "where": {"geoPointValue": {"latitude": 45.7, "longitude": 4.8}},
            "mystery": {"somethingNew": 1},
        },
    }

    document_id, fields = decode_document(document)

    assert document_id == "abc123"
    assert fields["quantity"] == 40.0
    assert fields["mileage"] == 10500
    assert fields["date"] == datetime(2024, 3, 1, 8, 30, tzinfo=UTC)
    assert fields["notes"] is None
    assert fields["where"] == {"lat": 45.7, "lng": 4.8}
    assert fields["mystery"] is None


def test_decode_empty_containers() -> None:
    assert decode_value({"mapValue": {}}) == {}
    assert decode_value({"arrayValue": {}}) == []
