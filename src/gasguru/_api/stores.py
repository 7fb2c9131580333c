"""Stores collection.

Stores carry ``createdAt``/``updatedAt`` stamps maintained client-side.
"""

from __future__ import annotations

from typing import Any

from gasguru._api._common import CollectionAdapter, CollectionMessages
from gasguru._constants import STORES
from gasguru.models.station import Store


class StoreAdapter(CollectionAdapter[Store]):
    collection = STORES
    model = Store
    order_by = "name"
    messages = CollectionMessages(
        fetch="Impossible de récupérer les magasins",
        create="Impossible d'ajouter le magasin",
        update="Impossible de mettre à jour le magasin",
        delete="Impossible de supprimer le magasin",
    )

    def _prepare_document(self, data: dict[str, Any]) -> dict[str, Any]:
        now = self._clock()
        if data.get("createdAt") is None:
            data["createdAt"] = now
        if data.get("updatedAt") is None:
            data["updatedAt"] = now
        return data

    def _before_create(self, record: Store) -> Store:
        now = self._clock()
        return record.model_copy(update={"created_at": now, "updated_at": now})

    def _before_update(self, changes: dict[str, Any]) -> dict[str, Any]:
        return {**changes, "updated_at": self._clock()}
