from __future__ import annotations

import pytest

from gasguru.models import ChargingStation, GasStation
from gasguru.stats import haversine_km, nearby_stations

PARIS = (48.8566, 2.3522)
LYON = (45.7640, 4.8357)


def test_haversine_known_distance() -> None:
    assert haversine_km(*PARIS, *LYON) == pytest.approx(391.5, abs=1.0)
    assert haversine_km(*PARIS, *PARIS) == 0.0


def test_nearby_includes_station_exactly_on_radius() -> None:
    lyon = GasStation(id="g-lyon", name="Total Lyon", location={"lat": LYON[0], "lng": LYON[1]})
    radius = haversine_km(*PARIS, *LYON)

    assert [s.station_id for s in nearby_stations([lyon], *PARIS, radius)] == ["g-lyon"]
    assert nearby_stations([lyon], *PARIS, radius - 0.001) == []


def test_nearby_sorted_and_skips_stations_without_coordinates() -> None:
    stations = [
        GasStation(id="far", name="Far", location={"lat": 48.95, "lng": 2.35}),
        ChargingStation(id="near", name="Near", latitude=48.857, longitude=2.353),
        ChargingStation(id="nowhere", name="Nowhere"),
    ]

    found = nearby_stations(stations, *PARIS, 20)

    assert [s.station_id for s in found] == ["near", "far"]
    assert found[0].distance_km < found[1].distance_km
