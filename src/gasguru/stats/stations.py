"""Station rankings and the nearest-station scan."""

from __future__ import annotations

import math
from collections.abc import Iterable

from gasguru._constants import EARTH_RADIUS_KM, TOP_STATIONS
from gasguru.models import ChargingStation, GasStation, NearbyStation, StationStats
from gasguru.stats._common import EnergyRecord, amount, quantity_of, ratio


def station_stats(records: Iterable[EnergyRecord], limit: int | None = TOP_STATIONS) -> list[StationStats]:
    """Most visited stations by name, ties broken by spend."""
    visits: dict[str, int] = {}
    spent: dict[str, float] = {}
    quantity: dict[str, float] = {}
    for record in records:
        name = (record.station_name or "").strip()
        if not name:
            continue
        visits[name] = visits.get(name, 0) + 1
        spent[name] = spent.get(name, 0.0) + amount(record.total_price)
        quantity[name] = quantity.get(name, 0.0) + quantity_of(record)

    ranked = sorted(visits, key=lambda name: (-visits[name], -spent[name], name))
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return [
        StationStats(
            station_name=name,
            visit_count=visits[name],
            total_spent=spent[name],
            total_quantity=quantity[name],
            average_price=ratio(spent[name], quantity[name]),
        )
        for name in ranked
    ]


def station_names(records: Iterable[EnergyRecord]) -> list[str]:
    return sorted({record.station_name.strip() for record in records if record.station_name.strip()})


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _coordinates(station: GasStation | ChargingStation) -> tuple[float, float] | None:
    if isinstance(station, ChargingStation):
        if not station.has_coordinates:
            return None
        return station.latitude, station.longitude  # type: ignore[return-value]
    return station.location.lat, station.location.lng


def nearby_stations(
    stations: Iterable[GasStation | ChargingStation],
    lat: float,
    lng: float,
    radius_km: float,
) -> list[NearbyStation]:
    """Stations within *radius_km* of the point, closest first.

    A station exactly on the radius is kept.
    """
    found: list[NearbyStation] = []
    for station in stations:
        coordinates = _coordinates(station)
        if coordinates is None:
            continue
        distance = haversine_km(lat, lng, *coordinates)
        if distance <= radius_km:
            found.append(NearbyStation(station_id=station.id, name=station.name, distance_km=distance))
    found.sort(key=lambda item: item.distance_km)
    return found
