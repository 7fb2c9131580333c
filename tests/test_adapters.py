from __future__ import annotations

from datetime import UTC, datetime

import pytest

from gasguru._api.charging_stations import ChargingStationAdapter
from gasguru._api.fuel_purchases import FuelPurchaseAdapter
from gasguru._api.stores import StoreAdapter
from gasguru._api.vehicles import VehicleAdapter
from gasguru.exceptions import GuruTransportError, GuruValidationError
from gasguru.models import FuelPurchase, Vehicle
from gasguru.notifications import Notification

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def _purchase(day: int, **extra) -> dict:
    return {"date": datetime(2024, 5, day, tzinfo=UTC), "quantity": 30.0, "totalPrice": 55.0, **extra}


@pytest.mark.asyncio
async def test_fetch_all_orders_purchases_newest_first(store) -> None:
    store.seed("fuelPurchases", "old", _purchase(1))
    store.seed("fuelPurchases", "new", _purchase(20))
    adapter = FuelPurchaseAdapter(store)

    records = await adapter.fetch_all()

    assert [r.id for r in records] == ["new", "old"]
    assert adapter.cache.loading is False


@pytest.mark.asyncio
async def test_fetch_failure_keeps_previous_cache_and_notifies(store) -> None:
    notified: list[Notification] = []
    store.seed("vehicles", "v1", {"name": "Clio"})
    adapter = VehicleAdapter(store, notify=notified.append)
    await adapter.fetch_all()
    store.fail.add(("list", "vehicles"))

    records = await adapter.fetch_all()

    assert [r.id for r in records] == ["v1"]
    assert notified[-1].description == "Impossible de récupérer les véhicules"
    assert notified[-1].is_error
    assert adapter.cache.loading is False


@pytest.mark.asyncio
async def test_create_vehicle_uses_client_generated_id(store) -> None:
    adapter = VehicleAdapter(store)

    new_id = await adapter.create({"name": "Zoé", "make": "Renault", "model": "Zoé", "fuelType": "electric"})

    assert len(new_id) == 36
    assert store.collections["vehicles"][new_id]["name"] == "Zoé"
    assert adapter.cache.get(new_id) == Vehicle(
        id=new_id, name="Zoé", make="Renault", model="Zoé", fuel_type="electric"
    )


@pytest.mark.asyncio
async def test_create_purchase_is_prepended(store) -> None:
    store.seed("fuelPurchases", "p1", _purchase(1))
    adapter = FuelPurchaseAdapter(store)
    await adapter.fetch_all()

    new_id = await adapter.create(FuelPurchase(date=NOW, quantity=10.0, total_price=20.0))

    assert [r.id for r in adapter.cache] == [new_id, "p1"]


@pytest.mark.asyncio
async def test_create_failure_rethrows_and_leaves_cache(store) -> None:
    notified: list[Notification] = []
    adapter = FuelPurchaseAdapter(store, notify=notified.append)
    store.fail.add(("create", "fuelPurchases"))

    with pytest.raises(GuruTransportError):
        await adapter.create({"quantity": 5})

    assert len(adapter.cache) == 0
    assert notified[0].description == "Impossible d'ajouter l'achat de carburant"


@pytest.mark.asyncio
async def test_charging_station_always_created_active(store) -> None:
    adapter = ChargingStationAdapter(store)

    new_id = await adapter.create({"name": "Ionity", "isActive": False})

    assert store.collections["chargingStations"][new_id]["isActive"] is True


@pytest.mark.asyncio
async def test_update_replaces_cache_entry_with_stored_document(store) -> None:
    store.seed("fuelPurchases", "p1", _purchase(3, stationName="Esso", notes="plein"))
    adapter = FuelPurchaseAdapter(store)
    await adapter.fetch_all()

    updated = await adapter.update("p1", {"stationName": "Total"})

    assert updated.station_name == "Total"
    assert updated.notes == "plein"
    assert adapter.cache.get("p1") == updated
    assert store.collections["fuelPurchases"]["p1"]["stationName"] == "Total"


@pytest.mark.asyncio
async def test_update_with_none_clears_field(store) -> None:
    store.seed("vehicles", "v1", {"name": "Clio", "notes": "old"})
    adapter = VehicleAdapter(store)
    await adapter.fetch_all()

    updated = await adapter.update("v1", {"notes": None})

    assert updated.notes is None
    assert store.collections["vehicles"]["v1"]["notes"] is None


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields_before_remote_call(store) -> None:
    adapter = VehicleAdapter(store)

    with pytest.raises(GuruValidationError):
        await adapter.update("v1", {"colour": "red"})
    with pytest.raises(GuruValidationError):
        await adapter.update("v1", {"id": "other"})

    assert store.calls == []


@pytest.mark.asyncio
async def test_update_failure_leaves_cache_unchanged(store) -> None:
    store.seed("vehicles", "v1", {"name": "Clio"})
    adapter = VehicleAdapter(store)
    await adapter.fetch_all()
    store.fail.add(("update", "vehicles"))

    with pytest.raises(GuruTransportError):
        await adapter.update("v1", {"name": "Megane"})

    assert adapter.cache.get("v1").name == "Clio"  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_delete_removes_from_cache(store) -> None:
    store.seed("vehicles", "v1", {"name": "Clio"})
    changes: list[str] = []
    adapter = VehicleAdapter(store, on_change=changes.append)
    await adapter.fetch_all()

    await adapter.delete("v1")

    assert len(adapter.cache) == 0
    assert "v1" not in store.collections["vehicles"]
    assert changes == ["vehicles", "vehicles"]


@pytest.mark.asyncio
async def test_store_timestamps(store) -> None:
    created = datetime(2024, 1, 1, tzinfo=UTC)
    adapter = StoreAdapter(store, clock=lambda: created)

    new_id = await adapter.create({"name": "Leclerc", "address": "Rue A"})
    stamped = store.collections["stores"][new_id]
    assert stamped["createdAt"] == created
    assert stamped["updatedAt"] == created

    adapter._clock = lambda: NOW  # noqa: SLF001
    updated = await adapter.update(new_id, {"address": "Rue B"})

    assert updated.created_at == created
    assert updated.updated_at == NOW


@pytest.mark.asyncio
async def test_store_fetch_defaults_missing_timestamps(store) -> None:
    store.seed("stores", "s1", {"name": "Lidl"})
    adapter = StoreAdapter(store, clock=lambda: NOW)

    records = await adapter.fetch_all()

    assert records[0].created_at == NOW
    assert records[0].updated_at == NOW
