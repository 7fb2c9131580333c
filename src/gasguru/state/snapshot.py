"""Local JSON snapshot of the vehicles and fuel purchases slices.

The snapshot lives in a single file named after a fixed storage key and is
overwritten after every change to either slice. Only those two slices are
kept; the other collections are re-fetched on every start.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from gasguru._constants import PERSISTED_SLICES, STORAGE_KEY

_logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 0


class SnapshotStorage:
    """File-backed key/value slot holding one JSON snapshot."""

    def __init__(self, directory: Path, *, key: str = STORAGE_KEY) -> None:
        self._directory = Path(directory)
        self._key = key

    @property
    def path(self) -> Path:
        return self._directory / f"{self._key}.json"

    def load(self) -> dict[str, list[dict[str, Any]]]:
        """Return the persisted slices, or empty slices when nothing usable is stored."""
        empty: dict[str, list[dict[str, Any]]] = {name: [] for name in PERSISTED_SLICES}
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return empty
        except OSError:
            _logger.warning("Could not read snapshot %s", self.path, exc_info=True)
            return empty

        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            _logger.warning("Ignoring corrupt snapshot %s", self.path)
            return empty

        state = payload.get("state") if isinstance(payload, dict) else None
        if not isinstance(state, dict):
            _logger.warning("Ignoring snapshot %s without a state object", self.path)
            return empty

        for name in PERSISTED_SLICES:
            items = state.get(name)
            if isinstance(items, list):
                empty[name] = [item for item in items if isinstance(item, dict)]
        return empty

    def save(self, slices: Mapping[str, Sequence[Mapping[str, Any]]]) -> None:
        """Overwrite the snapshot with *slices* (only persisted slice names are kept)."""
        state = {name: [dict(item) for item in slices.get(name, ())] for name in PERSISTED_SLICES}
        payload = {"state": state, "version": SNAPSHOT_VERSION}
        self._directory.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
