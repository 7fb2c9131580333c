"""Fuel purchases collection, newest first."""

from __future__ import annotations

from gasguru._api._common import CollectionAdapter, CollectionMessages
from gasguru._constants import FUEL_PURCHASES
from gasguru.models.purchase import FuelPurchase


class FuelPurchaseAdapter(CollectionAdapter[FuelPurchase]):
    collection = FUEL_PURCHASES
    model = FuelPurchase
    order_by = "date"
    descending = True
    messages = CollectionMessages(
        fetch="Impossible de récupérer les achats de carburant",
        create="Impossible d'ajouter l'achat de carburant",
        update="Impossible de mettre à jour l'achat de carburant",
        delete="Impossible de supprimer l'achat de carburant",
    )
