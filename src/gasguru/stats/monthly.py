"""Calendar-month bucketing of purchases and charges.

Buckets are keyed ``MM/yyyy`` and always returned in chronological order,
whatever the order of the input.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime

from gasguru._constants import FRENCH_MONTHS_SHORT
from gasguru.models import (
    ElectricCharge,
    FuelPurchase,
    MonthlyElectricStats,
    MonthlySpend,
    MonthlyStats,
)
from gasguru.stats._common import amount, ratio


def month_key(value: date | datetime) -> str:
    return f"{value.month:02d}/{value.year:04d}"


def parse_month_key(key: str) -> date | None:
    """Inverse of :func:`month_key`; ``None`` for malformed keys."""
    month_text, _, year_text = key.partition("/")
    try:
        month, year = int(month_text), int(year_text)
    except ValueError:
        return None
    if not 1 <= month <= 12 or year < 1:
        return None
    return date(year, month, 1)


def month_label(key: str) -> str:
    """``03/2024`` -> ``mars 2024``."""
    parsed = parse_month_key(key)
    if parsed is None:
        return key
    return f"{FRENCH_MONTHS_SHORT[parsed.month - 1]} {parsed.year}"


def _chronological(keys: Iterable[str]) -> list[str]:
    return sorted(keys, key=lambda key: parse_month_key(key) or date.min)


def bucket_monthly_spend(
    purchases: Iterable[FuelPurchase],
    charges: Iterable[ElectricCharge] = (),
) -> list[MonthlySpend]:
    """Sum ``total_price`` per month into fuel and electric accumulators."""
    fuel: dict[str, list[float]] = {}
    electric: dict[str, list[float]] = {}
    for purchase in purchases:
        if purchase.date is None:
            continue
        key = month_key(purchase.date)
        fuel.setdefault(key, []).append(amount(purchase.total_price))
    for charge in charges:
        if charge.date is None:
            continue
        key = month_key(charge.date)
        electric.setdefault(key, []).append(amount(charge.total_price))

    buckets: list[MonthlySpend] = []
    for key in _chronological(set(fuel) | set(electric)):
        fuel_total = math.fsum(fuel.get(key, ()))
        electric_total = math.fsum(electric.get(key, ()))
        buckets.append(
            MonthlySpend(
                month=key,
                label=month_label(key),
                fuel_total=fuel_total,
                electric_total=electric_total,
                total=fuel_total + electric_total,
            )
        )
    return buckets


def monthly_fuel_stats(purchases: Iterable[FuelPurchase]) -> list[MonthlyStats]:
    spent: dict[str, list[float]] = {}
    liters: dict[str, list[float]] = {}
    fills: dict[str, int] = {}
    for purchase in purchases:
        if purchase.date is None:
            continue
        key = month_key(purchase.date)
        spent.setdefault(key, []).append(amount(purchase.total_price))
        liters.setdefault(key, []).append(amount(purchase.quantity))
        fills[key] = fills.get(key, 0) + 1

    return [
        MonthlyStats(
            month=key,
            label=month_label(key),
            total_spent=math.fsum(spent[key]),
            total_liters=math.fsum(liters[key]),
            average_price=ratio(math.fsum(spent[key]), math.fsum(liters[key])),
            fill_count=fills[key],
        )
        for key in _chronological(spent)
    ]


def monthly_electric_stats(charges: Iterable[ElectricCharge]) -> list[MonthlyElectricStats]:
    spent: dict[str, list[float]] = {}
    energy: dict[str, list[float]] = {}
    sessions: dict[str, int] = {}
    for charge in charges:
        if charge.date is None:
            continue
        key = month_key(charge.date)
        spent.setdefault(key, []).append(amount(charge.total_price))
        energy.setdefault(key, []).append(amount(charge.energy_amount))
        sessions[key] = sessions.get(key, 0) + 1

    return [
        MonthlyElectricStats(
            month=key,
            label=month_label(key),
            total_spent=math.fsum(spent[key]),
            total_kwh=math.fsum(energy[key]),
            sessions=sessions[key],
        )
        for key in _chronological(spent)
    ]
