from __future__ import annotations

from datetime import UTC, date, datetime

from gasguru.export import build_export_rows, export_csv, render_csv
from gasguru.models import ElectricCharge, FuelPurchase, Vehicle
from gasguru.notifications import Notification

VEHICLES = [Vehicle(id="v1", name="Clio"), Vehicle(id="v2", name="Zoé")]


def _records() -> tuple[list[FuelPurchase], list[ElectricCharge]]:
    purchases = [
        FuelPurchase(
            id="p1",
            date=datetime(2024, 3, 5, tzinfo=UTC),
            vehicle_id="v1",
            station_name="Total",
            quantity=40,
            price_per_liter=1.859,
            total_price=74.36,
            mileage=10500,
        ),
        FuelPurchase(id="p2", date=datetime(2024, 1, 2, tzinfo=UTC), vehicle_id="gone", quantity=10, total_price=19),
    ]
    charges = [
        ElectricCharge(
            id="c1",
            date=datetime(2024, 2, 10, tzinfo=UTC),
            vehicle_id="v2",
            station_name="Ionity, A7",
            energy_amount=30,
            price_per_kwh=0.25,
            total_price=7.5,
            mileage=12000,
            battery_level_start=20,
            battery_level_end=80,
        )
    ]
    return purchases, charges


def test_rows_are_sorted_newest_first_with_header() -> None:
    purchases, charges = _records()

    rows = build_export_rows(purchases, charges, VEHICLES)

    assert rows[0] == ["Date", "Type", "Véhicule", "Station", "Quantité/Énergie", "Prix unitaire", "Total", "Détails"]
    assert [row[0] for row in rows[1:]] == ["05/03/2024", "10/02/2024", "02/01/2024"]
    assert rows[1][1:7] == ["Carburant", "Clio", "Total", "40.00 L", "1.859 €/L", "74.36 €"]
    assert rows[2][1] == "Électrique"
    assert rows[2][4] == "30.00 kWh"
    assert "Batterie début: 20%" in rows[2][7]
    assert rows[3][2] == "Véhicule inconnu"


def test_csv_has_one_line_per_record_plus_header() -> None:
    purchases, charges = _records()

    text = render_csv(build_export_rows(purchases, charges, VEHICLES))

    lines = text.splitlines()
    assert len(lines) == 4
    assert '"Ionity, A7"' in lines[2]


def test_line_breaks_in_cells_do_not_split_records() -> None:
    purchases, charges = _records()
    purchases[0] = purchases[0].model_copy(update={"station_name": "Total\nLyon"})
    vehicles = [Vehicle(id="v1", name="Clio\r\nRS"), VEHICLES[1]]

    text = render_csv(build_export_rows(purchases, charges, vehicles))

    lines = text.splitlines()
    assert len(lines) == 4
    assert lines[1].split(",")[2:4] == ["Clio RS", "Total Lyon"]

def test_export_writes_dated_file(tmp_path) -> None:
    purchases, charges = _records()
    notified: list[Notification] = []

    path = export_csv(
        purchases, charges, VEHICLES, directory=tmp_path, today=date(2024, 6, 15), notify=notified.append
    )

    assert path == tmp_path / "achats-energie-2024-06-15.csv"
    assert len(path.read_text(encoding="utf-8").splitlines()) == 4
    assert notified[-1].title == "Exportation réussie"


def test_export_of_nothing_is_refused(tmp_path) -> None:
    notified: list[Notification] = []

    path = export_csv([], [], VEHICLES, directory=tmp_path, today=date(2024, 6, 15), notify=notified.append)

    assert path is None
    assert list(tmp_path.iterdir()) == []
    assert notified[0].description == "Aucune donnée à exporter"
    assert notified[0].is_error
