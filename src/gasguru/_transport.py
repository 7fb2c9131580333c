"""Document-store transport over the Firestore REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from gasguru._codec import decode_document, encode_fields
from gasguru._codec import document_id as _name_to_id
from gasguru._constants import USER_AGENT
from gasguru._redact import redact_for_log
from gasguru.config import GuruConfig
from gasguru.exceptions import (
    GuruApiError,
    GuruNotFoundError,
    GuruPermissionError,
    GuruTransportError,
)

_logger = logging.getLogger(__name__)

_NOT_FOUND_STATUSES: frozenset[str] = frozenset({"NOT_FOUND"})
_PERMISSION_STATUSES: frozenset[str] = frozenset({"PERMISSION_DENIED", "UNAUTHENTICATED"})

Document = tuple[str, dict[str, Any]]
"""A decoded document: ``(id, fields)``."""


class DocumentTransport(Protocol):
    """Structural transport interface used by the collection adapters.

    Having a protocol here makes it easy to pass in-memory doubles in tests
    while keeping the production implementation (`FirestoreTransport`)
    concrete.
    """

    async def list_documents(
        self,
        collection: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        ...

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        ...

    async def create_document(
        self,
        collection: str,
        data: Mapping[str, Any],
        *,
        document_id: str | None = None,
    ) -> str:
        ...

    async def update_document(self, collection: str, document_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        ...


def _error_from_response(status: int, text: str, collection: str) -> Exception:
    """Map a non-2xx response to the most specific gasguru exception."""
    try:
        body = json.loads(text) if text else None
    except json.JSONDecodeError:
        body = None

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return GuruTransportError(
            f"HTTP {status} from {collection or 'document store'}: {text[:200]}",
            status_code=status,
            collection=collection,
        )

    code = str(error.get("status") or error.get("code") or status)
    message = f"{collection} request failed: {code} {error.get('message', '')}".strip()
    if code in _NOT_FOUND_STATUSES or status == 404:
        return GuruNotFoundError(message, code=code, collection=collection)
    if code in _PERMISSION_STATUSES or status in (401, 403):
        return GuruPermissionError(message, code=code, collection=collection)
    return GuruApiError(message, code=code, collection=collection)



def _decode(document: Any, collection: str) -> Document:
    """Decode a response document, reporting malformed values as transport failures."""
    try:
        return decode_document(document)
    except (AttributeError, OverflowError, TypeError, ValueError) as exc:
        raise GuruTransportError(f"Undecodable document in {collection}: {exc}", collection=collection) from exc

class FirestoreTransport:
    """Talks to ``projects/*/databases/*/documents`` with an aiohttp session."""

    def __init__(self, config: GuruConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._config.id_token:
            headers["authorization"] = f"Bearer {self._config.id_token}"
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        collection: str,
        params: list[tuple[str, str]] | None = None,
        body: Any = None,
    ) -> Any:
        query = list(params or [])
        if self._config.api_key:
            query.append(("key", self._config.api_key))

        _logger.debug("%s %s %s", method, url, redact_for_log(query))
        if self._config.trace_enabled:
            _logger.debug("Request body %s", redact_for_log(body))

        try:
            async with self._http.request(
                method,
                url,
                params=query,
                json=body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise GuruTransportError(
                f"{method} {collection} failed: {exc}",
                collection=collection,
            ) from exc
        except TimeoutError as exc:
            raise GuruTransportError(
                f"{method} {collection} timed out after {self._config.request_timeout}s",
                collection=collection,
            ) from exc

        if status >= 400:
            raise _error_from_response(status, text, collection)

        if not text.strip():
            return {}
        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GuruTransportError(
                f"Invalid JSON from {collection}: {text[:200]}",
                status_code=status,
                collection=collection,
            ) from exc

        if self._config.trace_enabled:
            _logger.debug("Response body %s", redact_for_log(result))
        return result

    def _collection_url(self, collection: str) -> str:
        return f"{self._config.documents_url}/{collection}"

    def _document_url(self, collection: str, document_id: str) -> str:
        return f"{self._config.documents_url}/{collection}/{document_id}"

    async def list_documents(
        self,
        collection: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        """Run a structured query over *collection*, optionally ordered.

        As with any ordered Firestore query, documents missing the
        ``order_by`` field are not returned.
        """
        query: dict[str, Any] = {"from": [{"collectionId": collection}]}
        if order_by:
            query["orderBy"] = [
                {
                    "field": {"fieldPath": order_by},
                    "direction": "DESCENDING" if descending else "ASCENDING",
                }
            ]
        result = await self._request(
            "POST",
            f"{self._config.documents_url}:runQuery",
            collection=collection,
            body={"structuredQuery": query},
        )
        if not isinstance(result, list):
            raise GuruTransportError(
                f"Unexpected runQuery response for {collection}",
                collection=collection,
            )
        documents: list[Document] = []
        for entry in result:
            document = entry.get("document") if isinstance(entry, dict) else None
            # Entries without a document carry only readTime/skippedResults.
            if isinstance(document, dict):
                documents.append(_decode(document, collection))
        return documents

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        result = await self._request("GET", self._document_url(collection, document_id), collection=collection)
        return _decode(result, collection)[1]

    async def create_document(
        self,
        collection: str,
        data: Mapping[str, Any],
        *,
        document_id: str | None = None,
    ) -> str:
        params = [("documentId", document_id)] if document_id else None
        result = await self._request(
            "POST",
            self._collection_url(collection),
            collection=collection,
            params=params,
            body={"fields": encode_fields(data)},
        )
        name = result.get("name") if isinstance(result, dict) else None
        if not name:
            raise GuruTransportError(f"Create in {collection} returned no document name", collection=collection)
        return _name_to_id(name)

    async def update_document(self, collection: str, document_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Patch only the keys in *data* and return the full stored document."""
        if not data:
            return await self.get_document(collection, document_id)
        params = [("updateMask.fieldPaths", key) for key in data]
        params.append(("currentDocument.exists", "true"))
        result = await self._request(
            "PATCH",
            self._document_url(collection, document_id),
            collection=collection,
            params=params,
            body={"fields": encode_fields(data)},
        )
        return _decode(result, collection)[1]

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._request("DELETE", self._document_url(collection, document_id), collection=collection)
