"""Shared adapter logic for the six remote collections.

Each adapter translates between the document shape of one named collection
and its record model, and keeps a :class:`CollectionCache` in sync after
every call:

* ``fetch_all`` replaces the cache wholesale; on failure it logs, notifies
  and keeps the previous cache.
* ``create`` writes a new document and inserts the client-side copy.
* ``update`` writes the partial record and swaps in the document the store
  returns after the write.
* ``delete`` removes the document and filters it out of the cache.

Mutations notify and re-raise on failure, leaving the cache unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import ValidationError

from gasguru._cache import CollectionCache
from gasguru._transport import DocumentTransport
from gasguru.exceptions import GuruError, GuruValidationError
from gasguru.models._base import GuruBaseModel
from gasguru.notifications import NotificationCallback, error, log_notification

_logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=GuruBaseModel)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CollectionMessages:
    """User-facing failure descriptions for one collection."""

    fetch: str
    create: str
    update: str
    delete: str


def validation_error_from(exc: ValidationError) -> GuruValidationError:
    """Convert the first pydantic error into a :class:`GuruValidationError`."""
    errors = exc.errors()
    if not errors:
        return GuruValidationError(str(exc))
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return GuruValidationError(f"{field}: {first.get('msg', 'invalid value')}", field=field)


class CollectionAdapter(Generic[RecordT]):
    """CRUD adapter for one remote collection."""

    collection: ClassVar[str]
    model: ClassVar[type[GuruBaseModel]]
    order_by: ClassVar[str] = "name"
    descending: ClassVar[bool] = False
    messages: ClassVar[CollectionMessages]

    def __init__(
        self,
        transport: DocumentTransport,
        cache: CollectionCache[RecordT] | None = None,
        *,
        notify: NotificationCallback | None = None,
        on_change: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._transport = transport
        self.cache: CollectionCache[RecordT] = cache if cache is not None else CollectionCache()
        self._notify = notify or log_notification
        self._on_change = on_change
        self._clock = clock

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _prepare_document(self, data: dict[str, Any]) -> dict[str, Any]:
        """Fill defaults on a decoded document before validation."""
        return data

    def _before_create(self, record: RecordT) -> RecordT:
        return record

    def _before_update(self, changes: dict[str, Any]) -> dict[str, Any]:
        return changes

    def _new_id(self) -> str | None:
        """Identifier chosen by the client, or ``None`` to let the store pick one."""
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _from_document(self, document_id: str, data: dict[str, Any]) -> RecordT:
        record: RecordT = self.model.from_document(document_id, self._prepare_document(dict(data)))  # type: ignore[assignment]
        return record

    def _coerce(self, record: RecordT | Mapping[str, Any]) -> RecordT:
        if isinstance(record, self.model):
            return record  # type: ignore[return-value]
        try:
            coerced: RecordT = self.model.model_validate(dict(record))  # type: ignore[assignment]
        except ValidationError as exc:
            raise validation_error_from(exc) from exc
        return coerced

    def _resolve_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Map snake_case or camelCase keys to field names, rejecting unknown keys."""
        resolved: dict[str, Any] = {}
        for key, value in changes.items():
            field = self.model.field_for_key(key)
            if field is None or field == "id":
                raise GuruValidationError(f"{self.collection} has no field {key!r}", field=key)
            resolved[field] = value
        return resolved

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.collection)

    def _fail(self, action: str, description: str, exc: Exception) -> None:
        _logger.error("Error %s %s: %s", action, self.collection, exc, exc_info=exc)
        self._notify(error(description))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch_all(self) -> list[RecordT]:
        """Reload the whole collection into the cache.

        Never raises: on failure the previous cache is returned unchanged.
        """
        self.cache.loading = True
        try:
            documents = await self._transport.list_documents(
                self.collection,
                order_by=self.order_by,
                descending=self.descending,
            )
            records = [self._from_document(doc_id, data) for doc_id, data in documents]
        except (GuruError, ValidationError) as exc:
            self._fail("fetching", self.messages.fetch, exc)
            return self.cache.records()
        finally:
            self.cache.loading = False

        self.cache.replace_all(records)
        _logger.debug("Fetched %d %s", len(records), self.collection)
        self._changed()
        return self.cache.records()

    async def create(self, record: RecordT | Mapping[str, Any]) -> str:
        """Write a new document and return its identifier."""
        prepared = self._before_create(self._coerce(record))
        self.cache.loading = True
        try:
            document_id = await self._transport.create_document(
                self.collection,
                prepared.to_document(),
                document_id=self._new_id(),
            )
        except GuruError as exc:
            self._fail("adding", self.messages.create, exc)
            raise
        finally:
            self.cache.loading = False

        created: RecordT = prepared.model_copy(update={"id": document_id})
        self.cache.insert(created, front=self.descending)
        self._changed()
        return document_id

    async def update(self, record_id: str, changes: Mapping[str, Any]) -> RecordT:
        """Write *changes* and reconcile the cache with the stored document.

        A ``None`` value clears the field on the stored document.
        """
        resolved = self._before_update(self._resolve_changes(changes))
        try:
            partial = self.model.model_validate(resolved)
        except ValidationError as exc:
            raise validation_error_from(exc) from exc
        payload = partial.model_dump(by_alias=True, include=set(resolved))

        self.cache.loading = True
        try:
            stored = await self._transport.update_document(self.collection, record_id, payload)
            updated = self._from_document(record_id, stored)
        except (GuruError, ValidationError) as exc:
            self._fail("updating", self.messages.update, exc)
            raise
        finally:
            self.cache.loading = False

        if not self.cache.replace(updated):
            self.cache.insert(updated, front=self.descending)
        self._changed()
        return updated

    async def delete(self, record_id: str) -> None:
        self.cache.loading = True
        try:
            await self._transport.delete_document(self.collection, record_id)
        except GuruError as exc:
            self._fail("deleting", self.messages.delete, exc)
            raise
        finally:
            self.cache.loading = False

        self.cache.remove(record_id)
        self._changed()
