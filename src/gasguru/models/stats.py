"""Result shapes produced by :mod:`gasguru.stats`."""

from __future__ import annotations

from datetime import datetime

from gasguru.models._base import GuruBaseModel


class MonthlySpend(GuruBaseModel):
    """Fuel and electric spend for one ``MM/yyyy`` bucket."""

    month: str
    label: str
    fuel_total: float = 0.0
    electric_total: float = 0.0
    total: float = 0.0


class MonthlyStats(GuruBaseModel):
    month: str
    label: str
    total_spent: float = 0.0
    total_liters: float = 0.0
    average_price: float = 0.0
    fill_count: int = 0


class MonthlyElectricStats(GuruBaseModel):
    month: str
    label: str
    total_spent: float = 0.0
    total_kwh: float = 0.0
    sessions: int = 0


class VehicleStats(GuruBaseModel):
    vehicle_id: str
    vehicle_name: str
    total_spent: float = 0.0
    total_liters: float = 0.0
    average_consumption: float = 0.0
    average_price: float = 0.0
    fill_count: int = 0
    distance_km: float = 0.0


class VehicleSpend(GuruBaseModel):
    """Per-vehicle share of spend, as fed to the pie chart."""

    vehicle_id: str
    name: str
    value: float = 0.0
    quantity: float = 0.0
    sessions: int = 0


class StationStats(GuruBaseModel):
    station_name: str
    visit_count: int = 0
    total_spent: float = 0.0
    total_quantity: float = 0.0
    average_price: float = 0.0


class PricePoint(GuruBaseModel):
    date: datetime
    label: str
    price: float
    station_name: str = ""


class ElectricSummary(GuruBaseModel):
    total_spent: float = 0.0
    total_kwh: float = 0.0
    average_price_per_kwh: float = 0.0
    session_count: int = 0
    station_count: int = 0


class DashboardSummary(GuruBaseModel):
    total_spent: float = 0.0
    total_liters: float = 0.0
    average_price: float = 0.0
    month_spent: float = 0.0
    month_fill_count: int = 0
    purchase_count: int = 0
    vehicle_count: int = 0


class NearbyStation(GuruBaseModel):
    station_id: str
    name: str
    distance_km: float


class CostEstimate(GuruBaseModel):
    total_cost: float
    cost_per_km: float
