#!/usr/bin/env python3
"""Dump every collection the gasguru library can fetch.

This script loads all six collections from the document store and prints
the parsed records plus the headline statistics, so you can check that
stored documents map cleanly onto the models.

Usage
-----
Set environment variables and run::

    export GURU_PROJECT_ID="gasoline-guru"
    export GURU_API_KEY="AIza..."
    python scripts/dump_all.py

Options::

    --json                Output as machine-readable JSON
    --output FILE         Write output to FILE instead of stdout
    --skip COLLECTION     Skip a collection (repeatable)
    --export-csv DIR      Also write the CSV export into DIR
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from gasguru import GuruClient, GuruConfig  # noqa: E402
from gasguru._constants import COLLECTIONS  # noqa: E402
from gasguru.notifications import Notification  # noqa: E402
from gasguru.stats import bucket_monthly_spend, electric_summary, station_stats, vehicle_stats  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_record(record: Any, out: list[str]) -> dict[str, Any]:
    """Pretty-print one record and return its JSON form."""
    data = record.model_dump(mode="json", exclude_none=True)
    out.append(f"  - {data.get('id', '?')}")
    for key, value in data.items():
        if key == "id":
            continue
        out.append(f"      {key}: {value}")
    return data


def _on_notification(notification: Notification) -> None:
    print(f"  !! {notification.title}: {notification.description}", file=sys.stderr)


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all gasguru collections for debugging / development.",
    )
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--skip", action="append", default=[], choices=COLLECTIONS, help="Skip a collection")
    parser.add_argument("--export-csv", type=Path, help="Also write the CSV export into DIR")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = GuruConfig.from_env(snapshot_enabled=False)
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "project_id": config.project_id,
        "collections": {},
    }
    out: list[str] = [_section("gasguru dump_all"), f"  time      : {result['timestamp']}"]
    out.append(f"  project   : {config.project_id}")

    async with GuruClient(config, on_notification=_on_notification) as client:
        state = client.state
        fetchers = {
            "vehicles": state.fetch_vehicles,
            "fuelPurchases": state.fetch_fuel_purchases,
            "electricCharges": state.fetch_electric_charges,
            "gasStations": state.fetch_gas_stations,
            "chargingStations": state.fetch_charging_stations,
            "stores": state.fetch_stores,
        }
        for name, fetch in fetchers.items():
            if name in args.skip:
                continue
            records = await fetch()
            out.append(_section(f"{name.upper()}  ({len(records)})"))
            result["collections"][name] = [_print_record(record, out) for record in records]

        out.append(_section("STATISTICS"))
        summary = client.dashboard()
        out.append(f"  total spent      : {summary.total_spent:.2f} €")
        out.append(f"  total liters     : {summary.total_liters:.2f} L")
        out.append(f"  this month       : {summary.month_spent:.2f} € ({summary.month_fill_count} fills)")
        electric = electric_summary(state.electric_charges)
        out.append(f"  electric         : {electric.total_spent:.2f} € / {electric.total_kwh:.1f} kWh")
        for stats in vehicle_stats(state.vehicles, state.fuel_purchases):
            out.append(
                f"  {stats.vehicle_name:<16} : {stats.fill_count} fills, "
                f"{stats.average_consumption:.1f} L/100km, {stats.distance_km:.0f} km"
            )
        for bucket in bucket_monthly_spend(state.fuel_purchases, state.electric_charges):
            out.append(f"  {bucket.label:<16} : {bucket.total:.2f} €")
        for station in station_stats([*state.fuel_purchases, *state.electric_charges]):
            out.append(f"  {station.station_name:<16} : {station.visit_count} visits")
        result["statistics"] = {
            "dashboard": summary.model_dump(mode="json"),
            "electric": electric.model_dump(mode="json"),
        }

        if args.export_csv:
            path = client.export_csv(directory=args.export_csv)
            out.append(f"\n  CSV export: {path}")
            result["export"] = str(path) if path else None

    # ── Output ──
    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    elif args.output:
        Path(args.output).write_text("\n".join(out) + "\n", encoding="utf-8")
        print(f"Dump written to {args.output}")
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
