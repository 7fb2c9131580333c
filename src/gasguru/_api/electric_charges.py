"""Electric charges collection, newest first."""

from __future__ import annotations

from gasguru._api._common import CollectionAdapter, CollectionMessages
from gasguru._constants import ELECTRIC_CHARGES
from gasguru.models.purchase import ElectricCharge


class ElectricChargeAdapter(CollectionAdapter[ElectricCharge]):
    collection = ELECTRIC_CHARGES
    model = ElectricCharge
    order_by = "date"
    descending = True
    messages = CollectionMessages(
        fetch="Impossible de récupérer les recharges électriques",
        create="Impossible d'ajouter la recharge électrique",
        update="Impossible de mettre à jour la recharge électrique",
        delete="Impossible de supprimer la recharge électrique",
    )
