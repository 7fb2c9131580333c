"""Fuel purchase and electric charge records."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from gasguru.models._base import GuruBaseModel, GuruEnum, GuruTimestamp


class PaymentMethod(GuruEnum):
    CARD = "card"
    CASH = "cash"
    APP = "app"
    OTHER = "other"


class Location(GuruBaseModel):
    """Where a purchase happened. Zeroed when the user skipped the map."""

    lat: float = 0.0
    lng: float = 0.0
    address: str = ""

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return 0.0 if value in (None, "") else value

    @field_validator("address", mode="before")
    @classmethod
    def _empty_if_missing(cls, value: Any) -> Any:
        return "" if value is None else value


def _default_location(value: Any) -> Any:
    return {} if value is None else value


class FuelPurchase(GuruBaseModel):
    """A fuel purchase (one fill-up).

    ``total_price`` is expected to equal ``quantity * price_per_liter`` but
    the store does not enforce it; the entry form keeps them consistent.
    """

    id: str = ""
    date: GuruTimestamp = None
    quantity: float = 0.0
    """Liters."""
    price_per_liter: float = 0.0
    total_price: float = 0.0
    station_name: str = Field(
        default="",
        validation_alias=AliasChoices("stationName", "station_name", "station"),
        serialization_alias="stationName",
    )
    """Free text, not a reference to a :class:`GasStation`."""
    location: Location = Field(default_factory=Location)
    vehicle_id: str = ""
    payment_method: PaymentMethod | None = None
    mileage: float | None = None
    """Odometer reading in km."""
    fuel_type: str = ""
    notes: str | None = None

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, value: Any) -> Any:
        return _default_location(value)

    @field_validator("station_name", mode="before")
    @classmethod
    def _station_name(cls, value: Any) -> Any:
        return "" if value is None else value


class ElectricCharge(GuruBaseModel):
    """An electric charging session."""

    id: str = ""
    date: GuruTimestamp = None
    vehicle_id: str = ""
    station_name: str = ""
    energy_amount: float = 0.0
    """kWh delivered."""
    price_per_kwh: float = 0.0
    total_price: float = 0.0
    mileage: float | None = None
    charging_power: float | None = None
    """kW."""
    charging_duration: float | None = None
    """Minutes."""
    battery_level_start: float | None = None
    battery_level_end: float | None = None
    odometer_before: float | None = None
    """kWh meter reading before the session."""
    odometer_after: float | None = None
    """kWh meter reading after the session."""
    payment_method: PaymentMethod | None = None
    location: Location = Field(default_factory=Location)
    notes: str | None = None

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, value: Any) -> Any:
        return _default_location(value)

    @field_validator("station_name", mode="before")
    @classmethod
    def _station_name(cls, value: Any) -> Any:
        return "" if value is None else value
