"""Charging stations collection."""

from __future__ import annotations

from gasguru._api._common import CollectionAdapter, CollectionMessages
from gasguru._constants import CHARGING_STATIONS
from gasguru.models.station import ChargingStation


class ChargingStationAdapter(CollectionAdapter[ChargingStation]):
    collection = CHARGING_STATIONS
    model = ChargingStation
    order_by = "name"
    messages = CollectionMessages(
        fetch="Impossible de récupérer les bornes de recharge",
        create="Impossible d'ajouter la borne de recharge",
        update="Impossible de mettre à jour la borne de recharge",
        delete="Impossible de supprimer la borne de recharge",
    )

    def _before_create(self, record: ChargingStation) -> ChargingStation:
        # New stations are always created active.
        return record.model_copy(update={"is_active": True})
