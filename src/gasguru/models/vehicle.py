"""Vehicle model."""

from __future__ import annotations

from pydantic import Field

from gasguru.models._base import GuruBaseModel, GuruEnum


class FuelType(GuruEnum):
    GASOLINE = "gasoline"
    DIESEL = "diesel"
    ELECTRIC = "electric"
    HYBRID = "hybrid"
    LPG = "lpg"
    OTHER = "other"


class Vehicle(GuruBaseModel):
    """A vehicle registered by the user.

    Fuel purchases and electric charges reference it by :attr:`id`.
    """

    id: str = ""
    name: str = ""
    make: str = ""
    model: str = ""
    year: int = 0
    license_plate: str = ""
    fuel_type: FuelType = FuelType.GASOLINE
    average_consumption: float | None = None
    """Stored average consumption in L/100km (kWh/100km for electric vehicles)."""
    tank_capacity: float | None = Field(default=None, ge=0)
    """Tank capacity in liters."""
    notes: str | None = None

    @property
    def is_electric(self) -> bool:
        return self.fuel_type == FuelType.ELECTRIC

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.make} {self.model})".strip()
