"""Vehicles collection."""

from __future__ import annotations

import uuid

from gasguru._api._common import CollectionAdapter, CollectionMessages
from gasguru._constants import VEHICLES
from gasguru.models.vehicle import Vehicle


class VehicleAdapter(CollectionAdapter[Vehicle]):
    """Vehicles are keyed by a client-generated UUID."""

    collection = VEHICLES
    model = Vehicle
    order_by = "name"
    messages = CollectionMessages(
        fetch="Impossible de récupérer les véhicules",
        create="Impossible d'ajouter le véhicule",
        update="Impossible de mettre à jour le véhicule",
        delete="Impossible de supprimer le véhicule",
    )

    def _new_id(self) -> str:
        return str(uuid.uuid4())
