"""Internal constants shared across the library."""

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"
USER_AGENT = "gasguru/0 (+aiohttp)"

# ------------------------------------------------------------------
# Remote collections
# ------------------------------------------------------------------

VEHICLES = "vehicles"
FUEL_PURCHASES = "fuelPurchases"
ELECTRIC_CHARGES = "electricCharges"
GAS_STATIONS = "gasStations"
CHARGING_STATIONS = "chargingStations"
STORES = "stores"

COLLECTIONS: tuple[str, ...] = (
    VEHICLES,
    FUEL_PURCHASES,
    ELECTRIC_CHARGES,
    GAS_STATIONS,
    CHARGING_STATIONS,
    STORES,
)

# ------------------------------------------------------------------
# Local persistence
# ------------------------------------------------------------------

STORAGE_KEY = "gasoline-guru-storage"
PERSISTED_SLICES: tuple[str, ...] = (VEHICLES, FUEL_PURCHASES)

# ------------------------------------------------------------------
# Derivation constants
# ------------------------------------------------------------------

EARTH_RADIUS_KM = 6371.0
# Pairwise consumption values outside this open interval are unrealistic.
CONSUMPTION_MIN_L_100KM = 0.0
CONSUMPTION_MAX_L_100KM = 30.0
DEFAULT_NEARBY_RADIUS_M = 5000
TOP_STATIONS = 5

UNKNOWN_VEHICLE = "Véhicule inconnu"

EXPORT_HEADER: tuple[str, ...] = (
    "Date",
    "Type",
    "Véhicule",
    "Station",
    "Quantité/Énergie",
    "Prix unitaire",
    "Total",
    "Détails",
)
EXPORT_FILENAME_PREFIX = "achats-energie-"

# Abbreviated French month names, as rendered on chart axes.
FRENCH_MONTHS_SHORT: tuple[str, ...] = (
    "janv.",
    "févr.",
    "mars",
    "avr.",
    "mai",
    "juin",
    "juil.",
    "août",
    "sept.",
    "oct.",
    "nov.",
    "déc.",
)
