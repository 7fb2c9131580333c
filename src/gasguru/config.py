"""Client configuration for gasguru."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from gasguru._constants import FIRESTORE_BASE_URL, PLACES_BASE_URL
from gasguru.exceptions import GuruConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class GuruConfig:
    """Client configuration.

    Parameters
    ----------
    project_id : str
        Firebase/GCP project hosting the Firestore database.
    api_key : str or None
        Web API key, sent as the ``key`` query parameter.
    id_token : str or None
        Firebase Auth ID token, sent as a bearer token when present.
    database : str
        Firestore database id.
    base_url : str
        Firestore REST base URL (override for the emulator).
    request_timeout : float
        Total timeout in seconds for one HTTP request.
    snapshot_enabled : bool
        Persist the ``vehicles``/``fuelPurchases`` snapshot locally.
    snapshot_dir : Path
        Directory holding the local snapshot file.
    places_api_key : str or None
        Google Places web-service key. The places lookup is disabled without it.
    places_base_url : str
        Places web-service base URL.
    export_dir : Path
        Default directory for CSV exports.
    trace_enabled : bool
        Log redacted request/response payloads at DEBUG level.
    """

    project_id: str = ""
    api_key: str | None = None
    id_token: str | None = None
    database: str = "(default)"
    base_url: str = FIRESTORE_BASE_URL
    request_timeout: float = 30.0
    snapshot_enabled: bool = True
    snapshot_dir: Path = dataclasses.field(default_factory=lambda: Path.home() / ".gasguru")
    places_api_key: str | None = None
    places_base_url: str = PLACES_BASE_URL
    export_dir: Path = dataclasses.field(default_factory=Path.cwd)
    trace_enabled: bool = False

    @property
    def documents_url(self) -> str:
        """Root URL of the documents resource for this project/database."""
        if not self.project_id:
            raise GuruConfigError("project_id is required (set GURU_PROJECT_ID)")
        return f"{self.base_url.rstrip('/')}/projects/{self.project_id}/databases/{self.database}/documents"

    @classmethod
    def from_env(cls, **overrides: Any) -> GuruConfig:
        """Create configuration from environment variables.

        Reads ``GURU_PROJECT_ID`` and the optional ``GURU_*`` variables.
        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "GURU_PROJECT_ID": "project_id",
            "GURU_API_KEY": "api_key",
            "GURU_ID_TOKEN": "id_token",
            "GURU_DATABASE": "database",
            "GURU_BASE_URL": "base_url",
            "GURU_PLACES_API_KEY": "places_api_key",
            "GURU_PLACES_BASE_URL": "places_base_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("GURU_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise GuruConfigError(f"GURU_REQUEST_TIMEOUT must be a number, got {timeout_env!r}") from exc

        snapshot_dir = env.get("GURU_SNAPSHOT_DIR")
        if snapshot_dir is not None:
            config_kwargs["snapshot_dir"] = Path(snapshot_dir).expanduser()

        export_dir = env.get("GURU_EXPORT_DIR")
        if export_dir is not None:
            config_kwargs["export_dir"] = Path(export_dir).expanduser()

        if "snapshot_enabled" not in overrides:
            config_kwargs["snapshot_enabled"] = _env_bool(env.get("GURU_SNAPSHOT_ENABLED"), True)

        if "trace_enabled" not in overrides:
            config_kwargs["trace_enabled"] = _env_bool(env.get("GURU_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
