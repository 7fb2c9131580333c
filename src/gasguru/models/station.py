"""Favorite places: gas stations, charging stations and stores."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from gasguru.models._base import GuruBaseModel, GuruTimestamp


class GeoPoint(GuruBaseModel):
    lat: float = 0.0
    lng: float = 0.0

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return 0.0 if value in (None, "") else value


class GasStation(GuruBaseModel):
    """A saved gas station, or a result of the places lookup."""

    id: str = ""
    name: str = ""
    address: str = ""
    location: GeoPoint = Field(default_factory=GeoPoint)
    brand: str | None = None
    fuel_types: list[str] = Field(default_factory=list)
    prices: dict[str, float] | None = None
    """Price per liter keyed by fuel type."""
    last_updated: GuruTimestamp = None
    notes: str | None = None

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("fuel_types", mode="before")
    @classmethod
    def _fuel_types(cls, value: Any) -> Any:
        return [] if value is None else value


class ChargingStation(GuruBaseModel):
    """A saved charging station."""

    id: str = ""
    name: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
    operator: str | None = None
    connector_types: list[str] = Field(default_factory=list)
    """Connector tags such as ``Type 2``, ``CCS`` or ``CHAdeMO``."""
    max_power: float | None = None
    """kW."""
    price_per_kwh: float | None = None
    number_of_chargers: int | None = None
    fast_charging: bool = False
    is_active: bool = True
    latitude: float | None = None
    longitude: float | None = None
    notes: str | None = None

    @field_validator("connector_types", mode="before")
    @classmethod
    def _clean_connectors(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return value
        cleaned: list[str] = []
        for item in value:
            text = str(item).strip()
            if text and text not in cleaned:
                cleaned.append(text)
        return cleaned

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Store(GuruBaseModel):
    """A store, optionally attached to a :class:`GasStation` by id."""

    id: str = ""
    name: str = ""
    address: str = ""
    chain_name: str | None = None
    has_gas_station: bool = False
    gas_station_id: str | None = None
    opening_hours: str | None = None
    notes: str | None = None
    created_at: GuruTimestamp = None
    updated_at: GuruTimestamp = None
