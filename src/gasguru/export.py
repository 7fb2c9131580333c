"""CSV export of fuel purchases and electric charges."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from datetime import date
from pathlib import Path

from gasguru._constants import EXPORT_FILENAME_PREFIX, EXPORT_HEADER, UNKNOWN_VEHICLE
from gasguru.models import ElectricCharge, FuelPurchase, Vehicle
from gasguru.notifications import NotificationCallback, error, info, log_notification
from gasguru.stats._common import EnergyRecord, amount

_logger = logging.getLogger(__name__)


def _format_number(value: float, digits: int = 2) -> str:
    return f"{value:.{digits}f}"


def _details(record: EnergyRecord) -> str:
    parts: list[str] = []
    if record.mileage:
        parts.append(f"Kilométrage: {record.mileage:g} km")
    if isinstance(record, ElectricCharge):
        if record.battery_level_start is not None:
            parts.append(f"Batterie début: {record.battery_level_start:g}%")
        if record.battery_level_end is not None:
            parts.append(f"Batterie fin: {record.battery_level_end:g}%")
    return " - ".join(parts)


def _row(record: EnergyRecord, vehicle_names: dict[str, str]) -> list[str]:
    when = record.date.strftime("%d/%m/%Y") if record.date is not None else ""
    vehicle = vehicle_names.get(record.vehicle_id, UNKNOWN_VEHICLE)
    if isinstance(record, ElectricCharge):
        kind, quantity, unit, price = "Électrique", record.energy_amount, "kWh", record.price_per_kwh
        price_text = f"{_format_number(amount(price), 3)} €/kWh"
    else:
        kind, quantity, unit, price = "Carburant", record.quantity, "L", record.price_per_liter
        price_text = f"{_format_number(amount(price), 3)} €/L"
    return [
        when,
        kind,
        vehicle,
        record.station_name,
        f"{_format_number(amount(quantity))} {unit}",
        price_text,
        f"{_format_number(amount(record.total_price))} €",
        _details(record),
    ]


def _sort_key(record: EnergyRecord) -> float:
    return record.date.timestamp() if record.date is not None else float("-inf")


def build_export_rows(
    purchases: Iterable[FuelPurchase],
    charges: Iterable[ElectricCharge],
    vehicles: Iterable[Vehicle],
) -> list[list[str]]:
    """Header plus one row per record, newest first."""
    vehicle_names = {vehicle.id: vehicle.name for vehicle in vehicles}
    records: list[EnergyRecord] = [*purchases, *charges]
    records.sort(key=_sort_key, reverse=True)
    return [list(EXPORT_HEADER), *(_row(record, vehicle_names) for record in records)]


def render_csv(rows: Sequence[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=",", lineterminator="\n")
    # One line per record: embedded line breaks become spaces.
    writer.writerows([" ".join(str(cell).splitlines()) for cell in row] for row in rows)
    return buffer.getvalue()


def export_filename(today: date) -> str:
    return f"{EXPORT_FILENAME_PREFIX}{today.isoformat()}.csv"


def export_csv(
    purchases: Iterable[FuelPurchase],
    charges: Iterable[ElectricCharge],
    vehicles: Iterable[Vehicle],
    *,
    directory: Path,
    today: date,
    notify: NotificationCallback | None = None,
) -> Path | None:
    """Write the export file and return its path.

    With no records nothing is written; a notification is sent and ``None``
    returned.
    """
    notify = notify or log_notification
    rows = build_export_rows(purchases, charges, vehicles)
    if len(rows) == 1:
        notify(error("Aucune donnée à exporter", title="Erreur d'exportation"))
        return None

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(render_csv(rows), encoding="utf-8")
    _logger.info("Exported %d records to %s", len(rows) - 1, path)
    notify(info(f"{len(rows) - 1} enregistrements exportés", title="Exportation réussie"))
    return path
