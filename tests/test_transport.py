from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import aiohttp
import pytest

from gasguru._transport import FirestoreTransport
from gasguru.config import GuruConfig
from gasguru.exceptions import GuruApiError, GuruNotFoundError, GuruPermissionError, GuruTransportError

DOCS = "https://firestore.googleapis.com/v1/projects/demo/databases/(default)/documents"


class _FakeResponse:
    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self._text = body if isinstance(body, str) else json.dumps(body)

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    async def text(self) -> str:
        return self._text


@dataclass
class FakeHttpSession:
    responses: list[tuple[int, Any]] = field(default_factory=list)
    requests: list[dict[str, Any]] = field(default_factory=list)
    raise_error: Exception | None = None

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.raise_error is not None:
            raise self.raise_error
        status, body = self.responses.pop(0)
        return _FakeResponse(status, body)


def _transport(http: FakeHttpSession, **overrides: Any) -> FirestoreTransport:
    config = GuruConfig(project_id="demo", api_key="secret-key", **overrides)
    return FirestoreTransport(config, http)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_list_documents_runs_ordered_query() -> None:
    http = FakeHttpSession(
        responses=[
            (
                200,
                [
                    {
                        "document": {
                            "name": f"{DOCS}/fuelPurchases/p1",
                            "fields": {"totalPrice": {"doubleValue": 74.5}},
                        }
                    },
                    {"readTime": "2024-01-01T00:00:00Z"},
                ],
            )
        ]
    )

    documents = await _transport(http).list_documents("fuelPurchases", order_by="date", descending=True)

    assert documents == [("p1", {"totalPrice": 74.5})]
    request = http.requests[0]
    assert request["method"] == "POST"
    assert request["url"] == f"{DOCS}:runQuery"
    query = request["json"]["structuredQuery"]
    assert query["from"] == [{"collectionId": "fuelPurchases"}]
    assert query["orderBy"] == [{"field": {"fieldPath": "date"}, "direction": "DESCENDING"}]
    assert ("key", "secret-key") in request["params"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "value",
    [{"timestampValue": "not-a-date"}, {"integerValue": "12abc"}, {"mapValue": ["bad"]}],
)
async def test_list_documents_reports_undecodable_values(value: dict[str, Any]) -> None:
    document = {"name": f"{DOCS}/fuelPurchases/p1", "fields": {"date": value}}
    http = FakeHttpSession(responses=[(200, [{"document": document}])])

    with pytest.raises(GuruTransportError) as excinfo:
        await _transport(http).list_documents("fuelPurchases")

    assert excinfo.value.collection == "fuelPurchases"


@pytest.mark.asyncio
async def test_get_document_reports_undecodable_values() -> None:
    document = {"name": f"{DOCS}/vehicles/v1", "fields": {"createdAt": {"timestampValue": "2024-13-45"}}}
    http = FakeHttpSession(responses=[(200, document)])

    with pytest.raises(GuruTransportError):
        await _transport(http).get_document("vehicles", "v1")


@pytest.mark.asyncio
async def test_create_document_encodes_fields_and_returns_id() -> None:
    http = FakeHttpSession(responses=[(200, {"name": f"{DOCS}/vehicles/v-1", "fields": {}})])

    new_id = await _transport(http).create_document(
        "vehicles",
        {"name": "Clio", "year": 2020, "createdAt": datetime(2024, 1, 1, tzinfo=UTC)},
        document_id="v-1",
    )

    assert new_id == "v-1"
    request = http.requests[0]
    assert request["url"] == f"{DOCS}/vehicles"
    assert ("documentId", "v-1") in request["params"]
    assert request["json"]["fields"]["year"] == {"integerValue": "2020"}
    assert request["json"]["fields"]["createdAt"] == {"timestampValue": "2024-01-01T00:00:00Z"}


@pytest.mark.asyncio
async def test_update_document_sends_field_mask_and_returns_stored_document() -> None:
    http = FakeHttpSession(
        responses=[
            (
                200,
                {
                    "name": f"{DOCS}/stores/s1",
                    "fields": {"name": {"stringValue": "Leclerc"}, "address": {"stringValue": "Rue A"}},
                },
            )
        ]
    )

    stored = await _transport(http).update_document("stores", "s1", {"name": "Leclerc"})

    assert stored == {"name": "Leclerc", "address": "Rue A"}
    request = http.requests[0]
    assert request["method"] == "PATCH"
    assert ("updateMask.fieldPaths", "name") in request["params"]
    assert ("currentDocument.exists", "true") in request["params"]


@pytest.mark.asyncio
async def test_bearer_token_header_when_id_token_configured() -> None:
    http = FakeHttpSession(responses=[(200, "")])

    await _transport(http, id_token="tok").delete_document("stores", "s1")

    assert http.requests[0]["headers"]["authorization"] == "Bearer tok"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "body", "expected"),
    [
        (404, {"error": {"code": 404, "status": "NOT_FOUND", "message": "No document"}}, GuruNotFoundError),
        (403, {"error": {"code": 403, "status": "PERMISSION_DENIED", "message": "denied"}}, GuruPermissionError),
        (400, {"error": {"code": 400, "status": "INVALID_ARGUMENT", "message": "bad"}}, GuruApiError),
        (502, "<html>bad gateway</html>", GuruTransportError),
    ],
)
async def test_error_responses_map_to_exceptions(status: int, body: Any, expected: type[Exception]) -> None:
    http = FakeHttpSession(responses=[(status, body)])

    with pytest.raises(expected) as excinfo:
        await _transport(http).delete_document("vehicles", "v1")

    assert excinfo.type is expected


@pytest.mark.asyncio
async def test_client_error_becomes_transport_error() -> None:
    http = FakeHttpSession(raise_error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(GuruTransportError, match="refused"):
        await _transport(http).list_documents("vehicles")
