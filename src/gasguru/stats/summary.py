"""Headline figures for the dashboard, the electric page and the cost calculator."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date

from gasguru._normalize import safe_float
from gasguru.models import (
    CostEstimate,
    DashboardSummary,
    ElectricCharge,
    ElectricSummary,
    FuelPurchase,
    PricePoint,
    Vehicle,
)
from gasguru.stats._common import EnergyRecord, amount, dated, ratio, unit_price_of


def electric_summary(charges: Iterable[ElectricCharge]) -> ElectricSummary:
    """Totals over *charges*; the average price is the mean of per-session prices."""
    charges = list(charges)
    if not charges:
        return ElectricSummary()
    prices = [amount(charge.price_per_kwh) for charge in charges]
    return ElectricSummary(
        total_spent=math.fsum(amount(charge.total_price) for charge in charges),
        total_kwh=math.fsum(amount(charge.energy_amount) for charge in charges),
        average_price_per_kwh=math.fsum(prices) / len(prices),
        session_count=len(charges),
        station_count=len({c.station_name.strip() for c in charges if c.station_name.strip()}),
    )


def dashboard_summary(
    purchases: Iterable[FuelPurchase],
    vehicles: Iterable[Vehicle],
    today: date,
) -> DashboardSummary:
    purchases = list(purchases)
    spent = math.fsum(amount(p.total_price) for p in purchases)
    liters = math.fsum(amount(p.quantity) for p in purchases)
    this_month = [
        p for p in purchases if p.date is not None and (p.date.year, p.date.month) == (today.year, today.month)
    ]
    return DashboardSummary(
        total_spent=spent,
        total_liters=liters,
        average_price=ratio(spent, liters),
        month_spent=math.fsum(amount(p.total_price) for p in this_month),
        month_fill_count=len(this_month),
        purchase_count=len(purchases),
        vehicle_count=len(list(vehicles)),
    )


def price_evolution(records: Iterable[EnergyRecord]) -> list[PricePoint]:
    """Unit price over time, oldest first. Undated or unpriced records are skipped."""
    points: list[PricePoint] = []
    for record in dated(records):
        price = unit_price_of(record)
        if price <= 0:
            continue
        points.append(
            PricePoint(
                date=record.date,
                label=record.date.strftime("%d/%m"),  # type: ignore[union-attr]
                price=price,
                station_name=record.station_name,
            )
        )
    return points


def estimate_trip_cost(
    distance_km: object,
    consumption_per_100km: object,
    price_per_unit: object,
) -> CostEstimate | None:
    """Fuel or energy cost of a trip, ``None`` when the inputs cannot give one."""
    distance = safe_float(distance_km)
    consumption = safe_float(consumption_per_100km)
    price = safe_float(price_per_unit)
    if distance is None or consumption is None or price is None:
        return None
    if distance <= 0 or consumption <= 0 or price < 0:
        return None
    total = consumption / 100 * distance * price
    return CostEstimate(total_cost=total, cost_per_km=total / distance)
