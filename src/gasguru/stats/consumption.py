"""Per-vehicle consumption, distance and spend derivations."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime

from gasguru._constants import CONSUMPTION_MAX_L_100KM, CONSUMPTION_MIN_L_100KM, UNKNOWN_VEHICLE
from gasguru.models import ElectricCharge, FuelPurchase, Vehicle, VehicleSpend, VehicleStats
from gasguru.stats._common import EnergyRecord, amount, dated, quantity_of, ratio

_logger = logging.getLogger(__name__)


def _mileage(purchase: FuelPurchase) -> float | None:
    value = amount(purchase.mileage)
    return value if value > 0 else None


def estimate_consumption(vehicle: Vehicle, purchases: Iterable[FuelPurchase]) -> float:
    """Average L/100km over consecutive fill-ups of *vehicle*.

    Each pair where the odometer went up yields ``quantity / distance * 100``
    for the later fill-up. Values outside (0, 30) are dropped. Without any
    usable pair the vehicle's stored average (or ``0.0``) is returned.
    """
    ordered = dated(p for p in purchases if p.vehicle_id == vehicle.id)
    values: list[float] = []
    for previous, current in zip(ordered, ordered[1:]):
        before, after = _mileage(previous), _mileage(current)  # type: ignore[arg-type]
        if before is None or after is None or after <= before:
            continue
        value = quantity_of(current) / (after - before) * 100
        if CONSUMPTION_MIN_L_100KM < value < CONSUMPTION_MAX_L_100KM:
            values.append(value)
        else:
            _logger.debug("Discarding unrealistic consumption %.1f L/100km for %s", value, vehicle.id)

    if values:
        return math.fsum(values) / len(values)
    return amount(vehicle.average_consumption)


def distance_driven(purchases: Iterable[FuelPurchase]) -> dict[str, float]:
    """Kilometers driven per vehicle id.

    Purchases without an odometer reading are left out of the chain rather
    than counted as zero.
    """
    chains: dict[str, list[FuelPurchase]] = {}
    for purchase in purchases:
        if _mileage(purchase) is None or not isinstance(purchase.date, datetime):
            continue
        chains.setdefault(purchase.vehicle_id, []).append(purchase)

    distances: dict[str, float] = {}
    for vehicle_id, chain in chains.items():
        readings = [_mileage(p) or 0.0 for p in dated(chain)]  # type: ignore[arg-type]
        distances[vehicle_id] = math.fsum(
            after - before for before, after in zip(readings, readings[1:]) if after > before
        )
    return distances


def vehicle_stats(vehicles: Iterable[Vehicle], purchases: Iterable[FuelPurchase]) -> list[VehicleStats]:
    purchases = list(purchases)
    distances = distance_driven(purchases)
    result: list[VehicleStats] = []
    for vehicle in vehicles:
        own = [p for p in purchases if p.vehicle_id == vehicle.id]
        spent = math.fsum(amount(p.total_price) for p in own)
        liters = math.fsum(amount(p.quantity) for p in own)
        result.append(
            VehicleStats(
                vehicle_id=vehicle.id,
                vehicle_name=vehicle.name,
                total_spent=spent,
                total_liters=liters,
                average_consumption=estimate_consumption(vehicle, own),
                average_price=ratio(spent, liters),
                fill_count=len(own),
                distance_km=distances.get(vehicle.id, 0.0),
            )
        )
    return result


def vehicle_spend(vehicles: Iterable[Vehicle], records: Iterable[EnergyRecord]) -> list[VehicleSpend]:
    """Spend per vehicle, biggest first; records of deleted vehicles are grouped."""
    names = {vehicle.id: vehicle.name for vehicle in vehicles}
    totals: dict[str, VehicleSpend] = {}
    for record in records:
        key = record.vehicle_id if record.vehicle_id in names else ""
        current = totals.get(key) or VehicleSpend(vehicle_id=key, name=names.get(key, UNKNOWN_VEHICLE))
        totals[key] = current.model_copy(
            update={
                "value": current.value + amount(record.total_price),
                "quantity": current.quantity + quantity_of(record),
                "sessions": current.sessions + 1,
            }
        )
    return sorted((spend for spend in totals.values() if spend.value > 0), key=lambda s: -s.value)


def charge_energy_used(charge: ElectricCharge) -> float | None:
    """Meter difference across a session, or ``None`` when the readings don't go up."""
    before, after = charge.odometer_before, charge.odometer_after
    if before is None or after is None or after <= before:
        return None
    return after - before


def charge_consumption(charge: ElectricCharge) -> float | None:
    """kWh/100km for a session, taking the meter difference as the distance."""
    distance = charge_energy_used(charge)
    if distance is None or charge.energy_amount <= 0:
        return None
    return charge.energy_amount / distance * 100
