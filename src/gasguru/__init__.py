"""gasguru - Async fuel and charging expense tracker backed by a hosted document store."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gasguru")
except PackageNotFoundError:
    __version__ = "0+local"
from gasguru.client import GuruClient
from gasguru.config import GuruConfig
from gasguru.exceptions import (
    GuruApiError,
    GuruConfigError,
    GuruError,
    GuruIntegrityError,
    GuruNotFoundError,
    GuruPermissionError,
    GuruPlacesError,
    GuruTransportError,
    GuruValidationError,
)
from gasguru.models import (
    ChargingStation,
    ElectricCharge,
    FuelPurchase,
    FuelType,
    GasStation,
    Location,
    PaymentMethod,
    Store,
    Vehicle,
)
from gasguru.notifications import Notification, NotificationVariant
from gasguru.state import AppState, SnapshotStorage

__all__ = [
    "__version__",
    "AppState",
    "ChargingStation",
    "ElectricCharge",
    "FuelPurchase",
    "FuelType",
    "GasStation",
    "GuruApiError",
    "GuruClient",
    "GuruConfig",
    "GuruConfigError",
    "GuruError",
    "GuruIntegrityError",
    "GuruNotFoundError",
    "GuruPermissionError",
    "GuruPlacesError",
    "GuruTransportError",
    "GuruValidationError",
    "Location",
    "Notification",
    "NotificationVariant",
    "PaymentMethod",
    "SnapshotStorage",
    "Store",
    "Vehicle",
]
