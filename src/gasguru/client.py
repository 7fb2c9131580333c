"""High-level async client for the fuel and charging tracker."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import aiohttp

from gasguru._transport import DocumentTransport, FirestoreTransport
from gasguru.config import GuruConfig
from gasguru.exceptions import GuruError
from gasguru.export import export_csv
from gasguru.models import DashboardSummary, GasStation, NearbyStation
from gasguru.notifications import NotificationCallback, log_notification
from gasguru.places import PlacesClient
from gasguru.state import AppState, SnapshotStorage
from gasguru.stats import dashboard_summary, nearby_stations

_logger = logging.getLogger(__name__)


class GuruClient:
    """Composition root owning the HTTP session, transport and state.

    Usage::

        async with GuruClient(GuruConfig.from_env()) as client:
            await client.refresh()
            for vehicle in client.state.vehicles:
                ...
    """

    def __init__(
        self,
        config: GuruConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: DocumentTransport | None = None,
        on_notification: NotificationCallback | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._notify = on_notification or log_notification
        self._state: AppState | None = None
        self._places: PlacesClient | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GuruClient:
        needs_http = self._transport is None or bool(self._config.places_api_key)
        if needs_http and self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        if self._transport is None:
            assert self._http_session is not None  # noqa: S101
            self._transport = FirestoreTransport(self._config, self._http_session)
        if self._http_session is not None:
            self._places = PlacesClient(self._config, self._http_session)

        snapshot = SnapshotStorage(self._config.snapshot_dir) if self._config.snapshot_enabled else None
        self._state = AppState(self._transport, on_notification=self._notify, snapshot=snapshot)
        self._state.restore_snapshot()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._places = None
        self._state = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        if self._state is None:
            raise GuruError("Client not initialized. Use 'async with GuruClient(...) as client:'")
        return self._state

    @property
    def places(self) -> PlacesClient:
        if self._places is None:
            raise GuruError("Places lookup unavailable: client not initialized or no HTTP session")
        return self._places

    # ------------------------------------------------------------------
    # Conveniences over the state
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """Reload every collection from the store."""
        await self.state.fetch_all()

    def dashboard(self, today: date | None = None) -> DashboardSummary:
        state = self.state
        return dashboard_summary(state.fuel_purchases, state.vehicles, today or datetime.now(UTC).date())

    def nearby_saved_stations(self, lat: float, lng: float, radius_km: float) -> list[NearbyStation]:
        """Saved gas and charging stations within *radius_km*, closest first."""
        state = self.state
        return nearby_stations([*state.gas_stations, *state.charging_stations], lat, lng, radius_km)

    async def nearby_gas_stations(self, lat: float, lng: float) -> list[GasStation]:
        return await self.places.nearby_gas_stations(lat, lng)

    def export_csv(self, *, directory: Path | None = None, today: date | None = None) -> Path | None:
        """Write the purchase and charge history as CSV; ``None`` when there is nothing to export."""
        state = self.state
        return export_csv(
            state.fuel_purchases,
            state.electric_charges,
            state.vehicles,
            directory=directory or self._config.export_dir,
            today=today or datetime.now(UTC).date(),
            notify=self._notify,
        )
