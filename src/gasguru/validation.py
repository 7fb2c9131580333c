"""Entry-form validation and price arithmetic.

Forms arrive as raw mappings (strings or numbers, snake_case or camelCase
keys). Each ``validate_*_form`` function applies the checks in display
order and raises :class:`GuruValidationError` on the first failure;
nothing here touches the remote store.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from gasguru._api._common import validation_error_from
from gasguru._normalize import coerce_datetime, safe_float, safe_int, safe_str
from gasguru.exceptions import GuruValidationError
from gasguru.models import ChargingStation, ElectricCharge, FuelPurchase, FuelType, GasStation, Store, Vehicle
from gasguru.models._base import GuruBaseModel

REQUIRED_FIELDS_MESSAGE = "Veuillez remplir tous les champs obligatoires"


# ------------------------------------------------------------------
# Price arithmetic
# ------------------------------------------------------------------


def compute_total_price(quantity: float, unit_price: float) -> float:
    return round(quantity * unit_price, 2)


def compute_unit_price(total: float, quantity: float) -> float:
    """Unit price when the user types the total (three decimals)."""
    if quantity <= 0:
        raise GuruValidationError("La quantité doit être positive", field="quantity")
    return round(total / quantity, 3)


def compute_quantity(total: float, unit_price: float) -> float:
    if unit_price <= 0:
        raise GuruValidationError("Le prix unitaire doit être positif", field="pricePerLiter")
    return round(total / unit_price, 2)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _raw(form: Mapping[str, Any], key: str) -> Any:
    if key in form:
        return form[key]
    return form.get(to_camel(key))


def _text(form: Mapping[str, Any], key: str) -> str | None:
    return safe_str(_raw(form, key))


def _number(form: Mapping[str, Any], key: str) -> float | None:
    return safe_float(_raw(form, key))


def _require_text(form: Mapping[str, Any], key: str, message: str = REQUIRED_FIELDS_MESSAGE, title: str = "Erreur") -> str:
    value = _text(form, key)
    if value is None:
        raise GuruValidationError(message, field=to_camel(key), title=title)
    return value


def _optional_number(
    form: Mapping[str, Any],
    key: str,
    *,
    minimum: float = 0.0,
    strict: bool = True,
    message: str,
) -> float | None:
    """Parse an optional numeric field; present values must clear *minimum*."""
    raw = _raw(form, key)
    if safe_str(raw) is None:
        return None
    value = safe_float(raw)
    if value is None or value < minimum or (strict and value == minimum):
        raise GuruValidationError(message, field=to_camel(key))
    return value


def _today(today: date | datetime) -> date:
    return today.date() if isinstance(today, datetime) else today


def _purchase_date(form: Mapping[str, Any], today: date | datetime) -> datetime:
    raw = _raw(form, "date")
    if raw is None or raw == "":
        raise GuruValidationError(REQUIRED_FIELDS_MESSAGE, field="date")
    when = coerce_datetime(raw)
    if when is None:
        raise GuruValidationError("Date invalide", field="date")
    if when.date() > _today(today):
        raise GuruValidationError("La date ne peut pas être dans le futur", field="date")
    return when


def _location(form: Mapping[str, Any]) -> dict[str, Any]:
    raw = _raw(form, "location")
    if isinstance(raw, Mapping):
        return dict(raw)
    return {}


def _connectors(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",")]
    return [str(item) for item in raw or []]


def _build(model: type[GuruBaseModel], data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise validation_error_from(exc) from exc


# ------------------------------------------------------------------
# Forms
# ------------------------------------------------------------------


def validate_fuel_purchase_form(form: Mapping[str, Any], *, today: date | datetime) -> FuelPurchase:
    """Validate the fuel purchase form.

    Vehicle, fuel type, quantity, price per liter and date are required.
    A missing total is computed from quantity and price.
    """
    vehicle_id = _require_text(form, "vehicle_id")
    fuel_type = _require_text(form, "fuel_type")
    quantity = _number(form, "quantity")
    if quantity is None or quantity <= 0:
        raise GuruValidationError("La quantité doit être positive", field="quantity")
    price = _number(form, "price_per_liter")
    if price is None or price <= 0:
        raise GuruValidationError("Le prix par litre doit être positif", field="pricePerLiter")
    total = _number(form, "total_price")
    if total is None:
        total = compute_total_price(quantity, price)
    elif total <= 0:
        raise GuruValidationError("Le prix total doit être positif", field="totalPrice")
    when = _purchase_date(form, today)
    mileage = _optional_number(form, "mileage", message="Veuillez entrer un kilométrage valide")

    return _build(
        FuelPurchase,
        {
            "date": when,
            "vehicle_id": vehicle_id,
            "fuel_type": fuel_type,
            "quantity": quantity,
            "price_per_liter": price,
            "total_price": total,
            "station_name": _text(form, "station_name") or "",
            "location": _location(form),
            "payment_method": _text(form, "payment_method"),
            "mileage": mileage,
            "notes": _text(form, "notes"),
        },
    )


def validate_electric_charge_form(form: Mapping[str, Any], *, today: date | datetime) -> ElectricCharge:
    vehicle_id = _require_text(
        form,
        "vehicle_id",
        "Veuillez sélectionner un véhicule électrique",
        title="Véhicule manquant",
    )
    energy = _number(form, "energy_amount")
    if energy is None or energy <= 0:
        raise GuruValidationError(
            "Veuillez entrer une quantité d'énergie valide",
            field="energyAmount",
            title="Énergie invalide",
        )
    price = _number(form, "price_per_kwh")
    if price is None or price < 0:
        raise GuruValidationError(
            "Veuillez entrer un prix par kWh valide (0 pour gratuit)",
            field="pricePerKwh",
            title="Prix invalide",
        )
    mileage = _number(form, "mileage")
    if mileage is None or mileage <= 0:
        raise GuruValidationError(
            "Veuillez entrer un kilométrage valide",
            field="mileage",
            title="Kilométrage invalide",
        )
    station_name = _require_text(
        form,
        "station_name",
        "Veuillez entrer le nom de la borne de recharge",
        title="Borne manquante",
    )
    when = _purchase_date(form, today)

    levels: dict[str, float | None] = {}
    for key in ("battery_level_start", "battery_level_end"):
        level = _optional_number(form, key, strict=False, message="Le niveau de batterie doit être entre 0 et 100")
        if level is not None and level > 100:
            raise GuruValidationError("Le niveau de batterie doit être entre 0 et 100", field=to_camel(key))
        levels[key] = level

    odometer_before = _optional_number(form, "odometer_before", strict=False, message="Relevé invalide")
    odometer_after = _optional_number(form, "odometer_after", strict=False, message="Relevé invalide")
    if odometer_before is not None and odometer_after is not None and odometer_after < odometer_before:
        raise GuruValidationError(
            "Le relevé après la charge doit être supérieur au relevé avant", field="odometerAfter"
        )

    total = _number(form, "total_price")
    if total is None:
        total = compute_total_price(energy, price)
    elif total < 0:
        raise GuruValidationError("Le prix total ne peut pas être négatif", field="totalPrice")

    return _build(
        ElectricCharge,
        {
            "date": when,
            "vehicle_id": vehicle_id,
            "station_name": station_name,
            "energy_amount": energy,
            "price_per_kwh": price,
            "total_price": total,
            "mileage": mileage,
            "charging_power": _optional_number(form, "charging_power", message="Puissance de charge invalide"),
            "charging_duration": _optional_number(form, "charging_duration", message="Durée de charge invalide"),
            "odometer_before": odometer_before,
            "odometer_after": odometer_after,
            "payment_method": _text(form, "payment_method"),
            "location": _location(form),
            "notes": _text(form, "notes"),
            **levels,
        },
    )


def validate_vehicle_form(form: Mapping[str, Any], *, today: date | datetime | None = None) -> Vehicle:
    name = _require_text(form, "name", "Veuillez entrer un nom pour le véhicule", title="Nom manquant")
    make = _require_text(form, "make", "Veuillez entrer la marque du véhicule", title="Marque manquante")
    model = _require_text(form, "model", "Veuillez entrer le modèle du véhicule", title="Modèle manquant")
    year = safe_int(_raw(form, "year"))
    if not year:
        raise GuruValidationError("Veuillez sélectionner l'année du véhicule", field="year", title="Année manquante")
    latest = _today(today or date.today()).year + 1
    if not 1900 <= year <= latest:
        raise GuruValidationError(f"L'année doit être comprise entre 1900 et {latest}", field="year")
    license_plate = _require_text(
        form,
        "license_plate",
        "Veuillez entrer l'immatriculation du véhicule",
        title="Immatriculation manquante",
    )

    return _build(
        Vehicle,
        {
            "name": name,
            "make": make,
            "model": model,
            "year": year,
            "license_plate": license_plate,
            "fuel_type": _text(form, "fuel_type") or FuelType.GASOLINE,
            "average_consumption": _optional_number(
                form, "average_consumption", message="Consommation moyenne invalide"
            ),
            "tank_capacity": _optional_number(form, "tank_capacity", message="Capacité du réservoir invalide"),
            "notes": _text(form, "notes"),
        },
    )


def validate_gas_station_form(form: Mapping[str, Any]) -> GasStation:
    name = _require_text(form, "name")
    address = _require_text(form, "address")
    raw_types = _raw(form, "fuel_types") or []
    fuel_types = [str(item).strip() for item in raw_types if str(item).strip()]
    location = _raw(form, "location")
    return _build(
        GasStation,
        {
            "name": name,
            "address": address,
            "brand": _text(form, "brand"),
            "fuel_types": fuel_types,
            "location": dict(location) if isinstance(location, Mapping) else {},
            "notes": _text(form, "notes"),
        },
    )


def validate_charging_station_form(form: Mapping[str, Any]) -> ChargingStation:
    name = _require_text(form, "name")
    address = _require_text(form, "address")
    city = _require_text(form, "city")
    postal_code = _require_text(form, "postal_code")
    chargers = _optional_number(form, "number_of_chargers", message="Nombre de points de charge invalide")
    return _build(
        ChargingStation,
        {
            "name": name,
            "address": address,
            "city": city,
            "postal_code": postal_code,
            "operator": _text(form, "operator"),
            "connector_types": _connectors(_raw(form, "connector_types")),
            "max_power": _optional_number(form, "max_power", message="Puissance maximale invalide"),
            "price_per_kwh": _optional_number(form, "price_per_kwh", strict=False, message="Prix par kWh invalide"),
            "number_of_chargers": int(chargers) if chargers is not None else None,
            "fast_charging": bool(_raw(form, "fast_charging")),
            "is_active": _raw(form, "is_active") is not False,
            "latitude": _number(form, "latitude"),
            "longitude": _number(form, "longitude"),
            "notes": _text(form, "notes"),
        },
    )


def validate_store_form(form: Mapping[str, Any], *, gas_station_ids: Collection[str] | None = None) -> Store:
    """Validate the store form; a linked gas station must exist when ids are given."""
    name = _require_text(form, "name")
    address = _require_text(form, "address")
    has_gas_station = bool(_raw(form, "has_gas_station"))
    gas_station_id = _text(form, "gas_station_id") if has_gas_station else None
    if gas_station_id and gas_station_ids is not None and gas_station_id not in gas_station_ids:
        raise GuruValidationError("Station-service inconnue", field="gasStationId")
    return _build(
        Store,
        {
            "name": name,
            "address": address,
            "chain_name": _text(form, "chain_name"),
            "has_gas_station": has_gas_station,
            "gas_station_id": gas_station_id,
            "opening_hours": _text(form, "opening_hours"),
            "notes": _text(form, "notes"),
        },
    )
