"""Pure derivations over the cached records.

Nothing here raises on empty or malformed input; results degrade to zeros
and empty lists.
"""

from gasguru.stats.consumption import (
    charge_consumption,
    charge_energy_used,
    distance_driven,
    estimate_consumption,
    vehicle_spend,
    vehicle_stats,
)
from gasguru.stats.filters import (
    available_years,
    filter_by_period,
    filter_by_station,
    filter_by_vehicle,
    search_purchases,
)
from gasguru.stats.monthly import (
    bucket_monthly_spend,
    month_key,
    month_label,
    monthly_electric_stats,
    monthly_fuel_stats,
    parse_month_key,
)
from gasguru.stats.stations import haversine_km, nearby_stations, station_names, station_stats
from gasguru.stats.summary import dashboard_summary, electric_summary, estimate_trip_cost, price_evolution

__all__ = [
    "available_years",
    "bucket_monthly_spend",
    "charge_consumption",
    "charge_energy_used",
    "dashboard_summary",
    "distance_driven",
    "electric_summary",
    "estimate_consumption",
    "estimate_trip_cost",
    "filter_by_period",
    "filter_by_station",
    "filter_by_vehicle",
    "haversine_km",
    "month_key",
    "month_label",
    "monthly_electric_stats",
    "monthly_fuel_stats",
    "nearby_stations",
    "parse_month_key",
    "price_evolution",
    "search_purchases",
    "station_names",
    "station_stats",
    "vehicle_spend",
    "vehicle_stats",
]
