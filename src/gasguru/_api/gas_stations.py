"""Gas stations collection."""

from __future__ import annotations

from gasguru._api._common import CollectionAdapter, CollectionMessages
from gasguru._constants import GAS_STATIONS
from gasguru.models.station import GasStation


class GasStationAdapter(CollectionAdapter[GasStation]):
    collection = GAS_STATIONS
    model = GasStation
    order_by = "name"
    messages = CollectionMessages(
        fetch="Impossible de récupérer les stations-service",
        create="Impossible d'ajouter la station-service",
        update="Impossible de mettre à jour la station-service",
        delete="Impossible de supprimer la station-service",
    )
