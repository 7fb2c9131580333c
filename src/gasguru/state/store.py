"""Application state: every collection cache plus the actions that mutate it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from gasguru._api._common import CollectionAdapter
from gasguru._api.charging_stations import ChargingStationAdapter
from gasguru._api.electric_charges import ElectricChargeAdapter
from gasguru._api.fuel_purchases import FuelPurchaseAdapter
from gasguru._api.gas_stations import GasStationAdapter
from gasguru._api.stores import StoreAdapter
from gasguru._api.vehicles import VehicleAdapter
from gasguru._constants import (
    CHARGING_STATIONS,
    ELECTRIC_CHARGES,
    FUEL_PURCHASES,
    GAS_STATIONS,
    PERSISTED_SLICES,
    STORES,
    VEHICLES,
)
from gasguru._transport import DocumentTransport
from gasguru.exceptions import GuruIntegrityError, GuruValidationError
from gasguru.models import ChargingStation, ElectricCharge, FuelPurchase, GasStation, Store, Vehicle
from gasguru.notifications import Notification, NotificationCallback, error, info, log_notification
from gasguru.state.snapshot import SnapshotStorage
from gasguru.validation import (
    validate_charging_station_form,
    validate_electric_charge_form,
    validate_fuel_purchase_form,
    validate_gas_station_form,
    validate_store_form,
    validate_vehicle_form,
)

_logger = logging.getLogger(__name__)

# collection -> [(referencing collection, referencing field, refusal message)]
# Electric charges may outlive their vehicle; they are shown as "Véhicule inconnu".
_REFERENCES: dict[str, list[tuple[str, str, str]]] = {
    VEHICLES: [
        (
            FUEL_PURCHASES,
            "vehicle_id",
            "Ce véhicule est associé à {count} achats de carburant. Veuillez d'abord supprimer ces achats.",
        ),
    ],
    GAS_STATIONS: [
        (
            STORES,
            "gas_station_id",
            "Cette station-service est associée à {count} magasins. Veuillez d'abord modifier ces magasins.",
        ),
    ],
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AppState:
    """Mirror of the six remote collections with their CRUD actions.

    Any caller holding the instance may invoke any action; actions on
    different collections interleave freely on the event loop and nothing
    groups them into transactions.
    """

    def __init__(
        self,
        transport: DocumentTransport,
        *,
        on_notification: NotificationCallback | None = None,
        snapshot: SnapshotStorage | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._notify = on_notification or log_notification
        self._snapshot = snapshot
        self._clock = clock
        common: dict[str, Any] = {"notify": self._notify, "on_change": self._on_change, "clock": clock}
        self._vehicles = VehicleAdapter(transport, **common)
        self._fuel_purchases = FuelPurchaseAdapter(transport, **common)
        self._electric_charges = ElectricChargeAdapter(transport, **common)
        self._gas_stations = GasStationAdapter(transport, **common)
        self._charging_stations = ChargingStationAdapter(transport, **common)
        self._stores = StoreAdapter(transport, **common)
        self._adapters: dict[str, CollectionAdapter[Any]] = {
            adapter.collection: adapter
            for adapter in (
                self._vehicles,
                self._fuel_purchases,
                self._electric_charges,
                self._gas_stations,
                self._charging_stations,
                self._stores,
            )
        }

    # ------------------------------------------------------------------
    # Cached collections
    # ------------------------------------------------------------------

    @property
    def vehicles(self) -> list[Vehicle]:
        return self._vehicles.cache.records()

    @property
    def fuel_purchases(self) -> list[FuelPurchase]:
        return self._fuel_purchases.cache.records()

    @property
    def electric_charges(self) -> list[ElectricCharge]:
        return self._electric_charges.cache.records()

    @property
    def gas_stations(self) -> list[GasStation]:
        return self._gas_stations.cache.records()

    @property
    def charging_stations(self) -> list[ChargingStation]:
        return self._charging_stations.cache.records()

    @property
    def stores(self) -> list[Store]:
        return self._stores.cache.records()

    @property
    def is_loading(self) -> bool:
        return any(adapter.cache.loading for adapter in self._adapters.values())

    def loading(self, collection: str) -> bool:
        return self._adapter(collection).cache.loading

    def get_vehicle(self, vehicle_id: str) -> Vehicle | None:
        return self._vehicles.cache.get(vehicle_id)

    def get_fuel_purchase(self, purchase_id: str) -> FuelPurchase | None:
        return self._fuel_purchases.cache.get(purchase_id)

    def get_electric_charge(self, charge_id: str) -> ElectricCharge | None:
        return self._electric_charges.cache.get(charge_id)

    def get_gas_station(self, station_id: str) -> GasStation | None:
        return self._gas_stations.cache.get(station_id)

    def get_charging_station(self, station_id: str) -> ChargingStation | None:
        return self._charging_stations.cache.get(station_id)

    def get_store(self, store_id: str) -> Store | None:
        return self._stores.cache.get(store_id)

    def _adapter(self, collection: str) -> CollectionAdapter[Any]:
        try:
            return self._adapters[collection]
        except KeyError:
            raise ValueError(f"Unknown collection {collection!r}") from None

    # ------------------------------------------------------------------
    # Local snapshot
    # ------------------------------------------------------------------

    def restore_snapshot(self) -> None:
        """Load the persisted slices into the caches (startup only)."""
        if self._snapshot is None:
            return
        slices = self._snapshot.load()
        for name in PERSISTED_SLICES:
            adapter = self._adapters[name]
            try:
                records = [adapter.model.model_validate(item) for item in slices.get(name, [])]
            except ValidationError:
                _logger.warning("Ignoring invalid %s snapshot", name, exc_info=True)
                continue
            adapter.cache.replace_all(records)
        _logger.debug(
            "Restored snapshot: %d vehicles, %d fuel purchases",
            len(self._vehicles.cache),
            len(self._fuel_purchases.cache),
        )

    def _persist(self) -> None:
        if self._snapshot is None:
            return
        slices = {name: [record.to_snapshot() for record in self._adapters[name].cache] for name in PERSISTED_SLICES}
        try:
            self._snapshot.save(slices)
        except OSError:
            _logger.warning("Could not write snapshot %s", self._snapshot.path, exc_info=True)

    def _on_change(self, collection: str) -> None:
        if collection in PERSISTED_SLICES:
            self._persist()

    # ------------------------------------------------------------------
    # Referential integrity
    # ------------------------------------------------------------------

    def _count_references(self, ref_collection: str, ref_field: str, record_id: str) -> int:
        return sum(1 for record in self._adapters[ref_collection].cache if getattr(record, ref_field, None) == record_id)

    def dependents(self, collection: str, record_id: str) -> int:
        """Count cached records that reference *record_id* in *collection*."""
        return sum(
            self._count_references(ref_collection, ref_field, record_id)
            for ref_collection, ref_field, _message in _REFERENCES.get(collection, [])
        )

    def _check_references(self, collection: str, record_id: str) -> None:
        for ref_collection, ref_field, message in _REFERENCES.get(collection, []):
            count = self._count_references(ref_collection, ref_field, record_id)
            if count > 0:
                description = message.format(count=count)
                self._notify(error(description, title="Suppression impossible"))
                raise GuruIntegrityError(
                    description,
                    collection=collection,
                    record_id=record_id,
                    dependents=count,
                )

    async def _delete(self, collection: str, record_id: str, *, force: bool) -> None:
        if not force:
            self._check_references(collection, record_id)
        await self._adapter(collection).delete(record_id)

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    async def fetch_all(self) -> None:
        """Reload every collection concurrently."""
        await asyncio.gather(*(adapter.fetch_all() for adapter in self._adapters.values()))

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def fetch_vehicles(self) -> list[Vehicle]:
        return await self._vehicles.fetch_all()

    async def add_vehicle(self, vehicle: Vehicle | Mapping[str, Any]) -> str:
        return await self._vehicles.create(vehicle)

    async def update_vehicle(self, vehicle_id: str, changes: Mapping[str, Any]) -> Vehicle:
        return await self._vehicles.update(vehicle_id, changes)

    async def delete_vehicle(self, vehicle_id: str, *, force: bool = False) -> None:
        """Delete a vehicle unless fuel purchases still reference it."""
        await self._delete(VEHICLES, vehicle_id, force=force)

    # ------------------------------------------------------------------
    # Fuel purchases
    # ------------------------------------------------------------------

    async def fetch_fuel_purchases(self) -> list[FuelPurchase]:
        return await self._fuel_purchases.fetch_all()

    async def add_fuel_purchase(self, purchase: FuelPurchase | Mapping[str, Any]) -> str:
        return await self._fuel_purchases.create(purchase)

    async def update_fuel_purchase(self, purchase_id: str, changes: Mapping[str, Any]) -> FuelPurchase:
        return await self._fuel_purchases.update(purchase_id, changes)

    async def delete_fuel_purchase(self, purchase_id: str, *, force: bool = False) -> None:
        await self._delete(FUEL_PURCHASES, purchase_id, force=force)

    # ------------------------------------------------------------------
    # Electric charges
    # ------------------------------------------------------------------

    async def fetch_electric_charges(self) -> list[ElectricCharge]:
        return await self._electric_charges.fetch_all()

    async def add_electric_charge(self, charge: ElectricCharge | Mapping[str, Any]) -> str:
        return await self._electric_charges.create(charge)

    async def update_electric_charge(self, charge_id: str, changes: Mapping[str, Any]) -> ElectricCharge:
        return await self._electric_charges.update(charge_id, changes)

    async def delete_electric_charge(self, charge_id: str, *, force: bool = False) -> None:
        await self._delete(ELECTRIC_CHARGES, charge_id, force=force)

    # ------------------------------------------------------------------
    # Gas stations
    # ------------------------------------------------------------------

    async def fetch_gas_stations(self) -> list[GasStation]:
        return await self._gas_stations.fetch_all()

    async def add_gas_station(self, station: GasStation | Mapping[str, Any]) -> str:
        return await self._gas_stations.create(station)

    async def update_gas_station(self, station_id: str, changes: Mapping[str, Any]) -> GasStation:
        return await self._gas_stations.update(station_id, changes)

    async def delete_gas_station(self, station_id: str, *, force: bool = False) -> None:
        """Delete a gas station unless a store is linked to it."""
        await self._delete(GAS_STATIONS, station_id, force=force)

    # ------------------------------------------------------------------
    # Charging stations
    # ------------------------------------------------------------------

    async def fetch_charging_stations(self) -> list[ChargingStation]:
        return await self._charging_stations.fetch_all()

    async def add_charging_station(self, station: ChargingStation | Mapping[str, Any]) -> str:
        return await self._charging_stations.create(station)

    async def update_charging_station(self, station_id: str, changes: Mapping[str, Any]) -> ChargingStation:
        return await self._charging_stations.update(station_id, changes)

    async def delete_charging_station(self, station_id: str, *, force: bool = False) -> None:
        await self._delete(CHARGING_STATIONS, station_id, force=force)

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------

    async def fetch_stores(self) -> list[Store]:
        return await self._stores.fetch_all()

    async def add_store(self, store: Store | Mapping[str, Any]) -> str:
        return await self._stores.create(store)

    async def update_store(self, store_id: str, changes: Mapping[str, Any]) -> Store:
        return await self._stores.update(store_id, changes)

    async def delete_store(self, store_id: str, *, force: bool = False) -> None:
        await self._delete(STORES, store_id, force=force)

    # ------------------------------------------------------------------
    # Form submission
    # ------------------------------------------------------------------

    def _rejected(self, exc: GuruValidationError) -> None:
        _logger.debug("Form rejected on %s: %s", exc.field, exc)
        self._notify(error(str(exc), title=exc.title))

    async def _submit(
        self,
        collection: str,
        record: Any,
        record_id: str | None,
        success: Notification,
    ) -> str:
        adapter = self._adapter(collection)
        if record_id is None:
            new_id = await adapter.create(record)
        else:
            # Full form: a None value clears the stored field.
            changes = record.model_dump(exclude={"id", "created_at"})
            await adapter.update(record_id, changes)
            new_id = record_id
        self._notify(success)
        return new_id

    async def submit_vehicle(self, form: Mapping[str, Any], *, vehicle_id: str | None = None) -> str | None:
        """Validate a vehicle form, then create or update the vehicle.

        Returns ``None`` without touching the store when validation fails.
        """
        try:
            vehicle = validate_vehicle_form(form, today=self._clock())
        except GuruValidationError as exc:
            self._rejected(exc)
            return None
        message = "Le véhicule a été mis à jour" if vehicle_id else "Le véhicule a été ajouté"
        return await self._submit(VEHICLES, vehicle, vehicle_id, info(message, title="Succès"))

    async def submit_fuel_purchase(self, form: Mapping[str, Any], *, purchase_id: str | None = None) -> str | None:
        try:
            purchase = validate_fuel_purchase_form(form, today=self._clock())
        except GuruValidationError as exc:
            self._rejected(exc)
            return None
        message = "Achat de carburant mis à jour avec succès" if purchase_id else "Achat de carburant ajouté avec succès"
        return await self._submit(FUEL_PURCHASES, purchase, purchase_id, info(message, title="Succès"))

    async def submit_electric_charge(self, form: Mapping[str, Any], *, charge_id: str | None = None) -> str | None:
        try:
            charge = validate_electric_charge_form(form, today=self._clock())
        except GuruValidationError as exc:
            self._rejected(exc)
            return None
        message = (
            "La recharge électrique a été mise à jour avec succès"
            if charge_id
            else "La recharge électrique a été ajoutée avec succès"
        )
        return await self._submit(ELECTRIC_CHARGES, charge, charge_id, info(message, title="Succès"))

    async def submit_gas_station(self, form: Mapping[str, Any], *, station_id: str | None = None) -> str | None:
        try:
            station = validate_gas_station_form(form)
        except GuruValidationError as exc:
            self._rejected(exc)
            return None
        message = "Station-service mise à jour avec succès" if station_id else "Station-service ajoutée avec succès"
        return await self._submit(GAS_STATIONS, station, station_id, info(message, title="Succès"))

    async def submit_charging_station(self, form: Mapping[str, Any], *, station_id: str | None = None) -> str | None:
        try:
            station = validate_charging_station_form(form)
        except GuruValidationError as exc:
            self._rejected(exc)
            return None
        message = "Borne de recharge mise à jour avec succès" if station_id else "Borne de recharge ajoutée avec succès"
        return await self._submit(CHARGING_STATIONS, station, station_id, info(message, title="Succès"))

    async def submit_store(self, form: Mapping[str, Any], *, store_id: str | None = None) -> str | None:
        try:
            store = validate_store_form(form, gas_station_ids={s.id for s in self.gas_stations})
        except GuruValidationError as exc:
            self._rejected(exc)
            return None
        message = "Magasin mis à jour avec succès" if store_id else "Magasin ajouté avec succès"
        return await self._submit(STORES, store, store_id, info(message, title="Succès"))
