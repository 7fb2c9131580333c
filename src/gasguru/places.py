"""Nearby gas station lookup through the Google Places web service.

Results are mapped into :class:`GasStation`; the service carries no fuel
data so ``fuel_types`` is always empty.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from gasguru._constants import DEFAULT_NEARBY_RADIUS_M, USER_AGENT
from gasguru._normalize import safe_float
from gasguru._redact import redact_for_log
from gasguru.config import GuruConfig
from gasguru.exceptions import GuruConfigError, GuruPlacesError
from gasguru.models import GasStation

_logger = logging.getLogger(__name__)

_OK_STATUSES: frozenset[str] = frozenset({"OK", "ZERO_RESULTS"})


def station_from_place(place: dict[str, Any]) -> GasStation:
    """Map one Places result to a :class:`GasStation`."""
    location = (place.get("geometry") or {}).get("location") or {}
    return GasStation(
        id=str(place.get("place_id") or ""),
        name=str(place.get("name") or ""),
        address=str(place.get("vicinity") or place.get("formatted_address") or ""),
        location={"lat": safe_float(location.get("lat")) or 0.0, "lng": safe_float(location.get("lng")) or 0.0},
        fuel_types=[],
    )


class PlacesClient:
    """Read-only lookups of gas stations around a point or by name."""

    def __init__(self, config: GuruConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    @property
    def enabled(self) -> bool:
        return bool(self._config.places_api_key)

    async def _get(self, endpoint: str, params: dict[str, str]) -> list[GasStation]:
        if not self._config.places_api_key:
            raise GuruConfigError("GURU_PLACES_API_KEY is not set")
        url = f"{self._config.places_base_url}/{endpoint}/json"
        query = {**params, "key": self._config.places_api_key}
        _logger.debug("GET %s %s", url, redact_for_log(query))

        try:
            async with self._http.get(
                url,
                params=query,
                headers={"accept": "application/json", "user-agent": USER_AGENT},
                timeout=self._timeout,
            ) as resp:
                if resp.status >= 400:
                    raise GuruPlacesError(f"Places {endpoint} returned HTTP {resp.status}")
                payload = await resp.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise GuruPlacesError(f"Places {endpoint} failed: {exc}") from exc
        except TimeoutError as exc:
            raise GuruPlacesError(f"Places {endpoint} timed out") from exc

        if not isinstance(payload, dict):
            raise GuruPlacesError(f"Unexpected Places {endpoint} response")
        status = str(payload.get("status", ""))
        if status not in _OK_STATUSES:
            detail = payload.get("error_message") or status or "no status"
            raise GuruPlacesError(f"Places {endpoint} failed: {detail}")

        results = payload.get("results") or []
        stations = [station_from_place(place) for place in results if isinstance(place, dict)]
        _logger.debug("Places %s returned %d stations", endpoint, len(stations))
        return stations

    async def nearby_gas_stations(
        self,
        lat: float,
        lng: float,
        radius_m: int = DEFAULT_NEARBY_RADIUS_M,
    ) -> list[GasStation]:
        return await self._get(
            "nearbysearch",
            {"location": f"{lat},{lng}", "radius": str(radius_m), "type": "gas_station"},
        )

    async def search_gas_stations(self, query: str) -> list[GasStation]:
        """Text search, scoped to fuel stations."""
        text = query.strip()
        if not text:
            return []
        return await self._get("textsearch", {"query": f"station service {text}", "type": "gas_station"})
