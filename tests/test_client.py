from __future__ import annotations

from datetime import date

import pytest

from gasguru import GuruClient, GuruConfig, GuruError, GuruIntegrityError
from gasguru.notifications import Notification


def _config(tmp_path, **overrides) -> GuruConfig:
    return GuruConfig(
        project_id="demo",
        snapshot_dir=tmp_path / "snapshot",
        export_dir=tmp_path / "exports",
        **overrides,
    )


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_full_flow_through_client(tmp_path, store) -> None:
    notifications: list[Notification] = []

    async with GuruClient(_config(tmp_path), transport=store, on_notification=notifications.append) as client:
        vehicle_id = await client.state.submit_vehicle(
            {"name": "Clio", "make": "Renault", "model": "Clio V", "year": 2020, "licensePlate": "AB-123-CD"}
        )
        assert vehicle_id is not None
        await client.state.submit_fuel_purchase(
            {
                "vehicleId": vehicle_id,
                "fuelType": "SP95",
                "quantity": 40,
                "pricePerLiter": 1.85,
                "date": "2024-06-01",
            }
        )

        with pytest.raises(GuruIntegrityError):
            await client.state.delete_vehicle(vehicle_id)

        summary = client.dashboard(today=date(2024, 6, 15))
        assert summary.total_spent == 74.0
        assert summary.month_fill_count == 1

        path = client.export_csv(today=date(2024, 6, 15))
        assert path is not None
        assert path.parent == tmp_path / "exports"

    # A new client starts from the local snapshot before any fetch.
    async with GuruClient(_config(tmp_path), transport=store) as client:
        assert [v.id for v in client.state.vehicles] == [vehicle_id]
        assert len(client.state.fuel_purchases) == 1
        assert store.calls.count(("list", "vehicles")) == 0

        await client.refresh()
        assert client.state.get_vehicle(vehicle_id) is not None


@pytest.mark.asyncio
async def test_state_unavailable_outside_context(tmp_path, store) -> None:
    client = GuruClient(_config(tmp_path), transport=store)

    with pytest.raises(GuruError):
        _ = client.state


@pytest.mark.asyncio
async def test_snapshot_disabled(tmp_path, store) -> None:
    async with GuruClient(_config(tmp_path, snapshot_enabled=False), transport=store) as client:
        await client.state.add_vehicle({"name": "Clio"})

    assert not (tmp_path / "snapshot").exists()
