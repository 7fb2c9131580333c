"""Helpers shared by the derivation modules."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from gasguru._normalize import safe_float
from gasguru.models import ElectricCharge, FuelPurchase

EnergyRecord = FuelPurchase | ElectricCharge


def amount(value: object) -> float:
    """Numeric field value, ``0.0`` when missing or malformed."""
    parsed = safe_float(value)
    return parsed if parsed is not None else 0.0


def quantity_of(record: EnergyRecord) -> float:
    """Liters for a fuel purchase, kWh for an electric charge."""
    if isinstance(record, ElectricCharge):
        return amount(record.energy_amount)
    return amount(record.quantity)


def unit_price_of(record: EnergyRecord) -> float:
    if isinstance(record, ElectricCharge):
        return amount(record.price_per_kwh)
    return amount(record.price_per_liter)


def dated(records: Iterable[EnergyRecord]) -> list[EnergyRecord]:
    """Records that carry a date, oldest first."""
    kept = [record for record in records if isinstance(record.date, datetime)]
    kept.sort(key=lambda record: record.date)  # type: ignore[arg-type,return-value]
    return kept


def ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0
