"""Data models for tracker records and derived statistics."""

from gasguru.models._base import GuruBaseModel, GuruEnum, GuruTimestamp
from gasguru.models.purchase import ElectricCharge, FuelPurchase, Location, PaymentMethod
from gasguru.models.station import ChargingStation, GasStation, GeoPoint, Store
from gasguru.models.stats import (
    CostEstimate,
    DashboardSummary,
    ElectricSummary,
    MonthlyElectricStats,
    MonthlySpend,
    MonthlyStats,
    NearbyStation,
    PricePoint,
    StationStats,
    VehicleSpend,
    VehicleStats,
)
from gasguru.models.vehicle import FuelType, Vehicle

__all__ = [
    "ChargingStation",
    "CostEstimate",
    "DashboardSummary",
    "ElectricCharge",
    "ElectricSummary",
    "FuelPurchase",
    "FuelType",
    "GasStation",
    "GeoPoint",
    "GuruBaseModel",
    "GuruEnum",
    "GuruTimestamp",
    "Location",
    "MonthlyElectricStats",
    "MonthlySpend",
    "MonthlyStats",
    "NearbyStation",
    "PaymentMethod",
    "PricePoint",
    "StationStats",
    "Store",
    "Vehicle",
    "VehicleSpend",
    "VehicleStats",
]
