"""List filters used by the purchase list and the statistics pages."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from typing import TypeVar

from gasguru.models import FuelPurchase, Vehicle
from gasguru.stats._common import EnergyRecord

RecordT = TypeVar("RecordT", bound=EnergyRecord)


def filter_by_vehicle(records: Iterable[RecordT], vehicle_ids: Collection[str] = ()) -> list[RecordT]:
    """Keep records of the selected vehicles; an empty selection keeps all."""
    if not vehicle_ids:
        return list(records)
    selected = set(vehicle_ids)
    return [record for record in records if record.vehicle_id in selected]


def filter_by_period(
    records: Iterable[RecordT],
    year: int | None = None,
    month: int | None = None,
) -> list[RecordT]:
    """Keep records of *year*, optionally narrowed to *month* (1-12).

    A month without a year is ignored.
    """
    if year is None:
        return list(records)
    kept: list[RecordT] = []
    for record in records:
        if record.date is None or record.date.year != year:
            continue
        if month is not None and record.date.month != month:
            continue
        kept.append(record)
    return kept


def filter_by_station(records: Iterable[RecordT], station_name: str | None = None) -> list[RecordT]:
    if not station_name or not station_name.strip():
        return list(records)
    wanted = station_name.strip().casefold()
    return [record for record in records if record.station_name.strip().casefold() == wanted]


def search_purchases(
    purchases: Iterable[FuelPurchase],
    vehicles: Sequence[Vehicle],
    query: str,
) -> list[FuelPurchase]:
    """Case-insensitive match on vehicle name or station name."""
    needle = query.strip().casefold()
    if not needle:
        return list(purchases)
    names = {vehicle.id: vehicle.name.casefold() for vehicle in vehicles}
    return [
        purchase
        for purchase in purchases
        if needle in purchase.station_name.casefold() or needle in names.get(purchase.vehicle_id, "")
    ]


def available_years(records: Iterable[EnergyRecord]) -> list[int]:
    return sorted({record.date.year for record in records if record.date is not None}, reverse=True)
