from __future__ import annotations

from pathlib import Path

import pytest

from gasguru.config import GuruConfig
from gasguru.exceptions import GuruConfigError


def test_from_env_reads_guru_variables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GURU_PROJECT_ID", "gasoline-guru")
    monkeypatch.setenv("GURU_API_KEY", "k")
    monkeypatch.setenv("GURU_REQUEST_TIMEOUT", "12.5")
    monkeypatch.setenv("GURU_SNAPSHOT_DIR", str(tmp_path))
    monkeypatch.setenv("GURU_SNAPSHOT_ENABLED", "no")
    monkeypatch.setenv("GURU_TRACE_ENABLED", "1")

    config = GuruConfig.from_env()

    assert config.project_id == "gasoline-guru"
    assert config.api_key == "k"
    assert config.request_timeout == 12.5
    assert config.snapshot_dir == tmp_path
    assert config.snapshot_enabled is False
    assert config.trace_enabled is True
    assert config.documents_url == (
        "https://firestore.googleapis.com/v1/projects/gasoline-guru/databases/(default)/documents"
    )


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GURU_PROJECT_ID", "from-env")
    monkeypatch.setenv("GURU_TRACE_ENABLED", "true")

    config = GuruConfig.from_env(project_id="explicit", trace_enabled=False)

    assert config.project_id == "explicit"
    assert config.trace_enabled is False


def test_invalid_timeout_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GURU_REQUEST_TIMEOUT", "soon")

    with pytest.raises(GuruConfigError):
        GuruConfig.from_env()


def test_documents_url_requires_project() -> None:
    with pytest.raises(GuruConfigError):
        _ = GuruConfig().documents_url


def test_emulator_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GURU_PROJECT_ID", raising=False)
    monkeypatch.setenv("GURU_BASE_URL", "http://localhost:8080/v1/")

    config = GuruConfig.from_env(project_id="demo", database="tracker")

    assert config.documents_url == "http://localhost:8080/v1/projects/demo/databases/tracker/documents"
