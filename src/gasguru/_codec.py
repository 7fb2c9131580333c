"""Firestore REST value codec.

Firestore's REST surface wraps every value in a single-key object naming its
type (``{"stringValue": "x"}``, ``{"timestampValue": "2024-01-31T08:00:00Z"}``,
``{"mapValue": {"fields": {...}}}``...). This module converts between those
wrappers and plain Python values. Datetimes always leave as UTC timestamps and
come back as timezone-aware datetimes.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

from gasguru._normalize import ensure_aware

# Firestore emits up to nanosecond precision; datetime stops at microseconds.
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def format_timestamp(value: datetime) -> str:
    """Format *value* as an RFC 3339 UTC timestamp with a ``Z`` suffix."""
    aware = ensure_aware(value).astimezone(UTC)
    text = aware.strftime("%Y-%m-%dT%H:%M:%S")
    if aware.microsecond:
        text += f".{aware.microsecond:06d}"
    return text + "Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Raises :class:`ValueError` for text that is not a timestamp.
    """
    text = _FRACTION_RE.sub(r".\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text)).astimezone(UTC)


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a Python value in its Firestore typed-value object."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, enum.Enum):
        return encode_value(value.value)
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        if math.isnan(value):
            return {"doubleValue": "NaN"}
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, date):
        return {"timestampValue": format_timestamp(datetime(value.year, value.month, value.day, tzinfo=UTC))}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def encode_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a flat or nested mapping as a Firestore ``fields`` object."""
    return {str(key): encode_value(item) for key, item in data.items()}


def decode_value(wrapped: Mapping[str, Any]) -> Any:
    """Unwrap a Firestore typed-value object into a Python value.

    Unknown wrappers decode to ``None`` rather than raising.
    """
    if "nullValue" in wrapped:
        return None
    if "booleanValue" in wrapped:
        return bool(wrapped["booleanValue"])
    if "integerValue" in wrapped:
        return int(wrapped["integerValue"])
    if "doubleValue" in wrapped:
        return float(wrapped["doubleValue"])
    if "stringValue" in wrapped:
        return str(wrapped["stringValue"])
    if "timestampValue" in wrapped:
        return parse_timestamp(str(wrapped["timestampValue"]))
    if "mapValue" in wrapped:
        inner = wrapped["mapValue"] or {}
        return decode_fields(inner.get("fields") or {})
    if "arrayValue" in wrapped:
        inner = wrapped["arrayValue"] or {}
        return [decode_value(item) for item in inner.get("values") or []]
    if "geoPointValue" in wrapped:
        point = wrapped["geoPointValue"] or {}
        return {"lat": float(point.get("latitude", 0.0)), "lng": float(point.get("longitude", 0.0))}
    if "referenceValue" in wrapped:
        return str(wrapped["referenceValue"])
    if "bytesValue" in wrapped:
        return str(wrapped["bytesValue"])
    return None


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key): decode_value(item) for key, item in fields.items() if isinstance(item, Mapping)}


def document_id(name: str) -> str:
    """Return the identifier (last path segment) of a document resource name."""
    return name.rstrip("/").rsplit("/", 1)[-1]


def decode_document(document: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """Decode a Firestore ``Document`` into ``(id, fields)``."""
    name = str(document.get("name", ""))
    return document_id(name), decode_fields(document.get("fields") or {})
