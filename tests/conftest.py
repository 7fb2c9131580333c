from __future__ import annotations

import copy
import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest

from gasguru.exceptions import GuruNotFoundError, GuruTransportError
from gasguru.notifications import Notification
from gasguru.state import AppState, SnapshotStorage

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@dataclass
class FakeDocumentStore:
    """In-memory stand-in for the document store transport."""

    collections: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    fail: set[tuple[str, str]] = field(default_factory=set)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def seed(self, collection: str, document_id: str, data: Mapping[str, Any]) -> None:
        self.collections.setdefault(collection, {})[document_id] = dict(data)

    def _record(self, op: str, collection: str) -> None:
        self.calls.append((op, collection))
        if (op, collection) in self.fail:
            raise GuruTransportError(f"{op} {collection} failed", status_code=503, collection=collection)

    async def list_documents(
        self,
        collection: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[tuple[str, dict[str, Any]]]:
        self._record("list", collection)
        documents = [(doc_id, copy.deepcopy(data)) for doc_id, data in self.collections.get(collection, {}).items()]
        if order_by:
            documents = [doc for doc in documents if doc[1].get(order_by) is not None]
            documents.sort(key=lambda doc: doc[1][order_by], reverse=descending)
        return documents

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        self._record("get", collection)
        try:
            return copy.deepcopy(self.collections[collection][document_id])
        except KeyError:
            raise GuruNotFoundError(f"{collection}/{document_id} not found", code="NOT_FOUND") from None

    async def create_document(
        self,
        collection: str,
        data: Mapping[str, Any],
        *,
        document_id: str | None = None,
    ) -> str:
        self._record("create", collection)
        new_id = document_id or f"doc-{next(self._ids)}"
        self.collections.setdefault(collection, {})[new_id] = copy.deepcopy(dict(data))
        return new_id

    async def update_document(self, collection: str, document_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        self._record("update", collection)
        documents = self.collections.get(collection, {})
        if document_id not in documents:
            raise GuruNotFoundError(f"{collection}/{document_id} not found", code="NOT_FOUND")
        documents[document_id].update(copy.deepcopy(dict(data)))
        return copy.deepcopy(documents[document_id])

    async def delete_document(self, collection: str, document_id: str) -> None:
        self._record("delete", collection)
        self.collections.get(collection, {}).pop(document_id, None)


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def notifications() -> list[Notification]:
    return []


@pytest.fixture
def snapshot(tmp_path) -> SnapshotStorage:
    return SnapshotStorage(tmp_path / "snapshot")


@pytest.fixture
def state(store: FakeDocumentStore, notifications: list[Notification], snapshot: SnapshotStorage) -> AppState:
    return AppState(store, on_notification=notifications.append, snapshot=snapshot, clock=lambda: NOW)
