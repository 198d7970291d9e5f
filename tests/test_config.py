from __future__ import annotations

import pytest

from backend.app.config import (
    DEFAULT_DATA_DIR,
    load_cors_origins,
    load_data_config,
    load_server_config,
)


def test_data_config_defaults(monkeypatch):
    monkeypatch.delenv("CENSUS_DATA_DIR", raising=False)
    monkeypatch.delenv("CENSUS_CITIES_DIRNAME", raising=False)

    config = load_data_config()

    assert config.data_dir == DEFAULT_DATA_DIR
    assert config.states_dir == DEFAULT_DATA_DIR / "states"
    assert config.cities_dir == DEFAULT_DATA_DIR / "mi_cities"


def test_data_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CENSUS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CENSUS_CITIES_DIRNAME", "  ")

    config = load_data_config()

    assert config.data_dir == tmp_path
    assert config.cities_dirname == "mi_cities"


def test_server_config_port(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_server_config()

    assert config.port == 8080
    assert config.log_level == "DEBUG"


def test_server_config_rejects_bad_port(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT must be an integer"):
        load_server_config()


def test_cors_origins(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, ,https://example.org")
    assert load_cors_origins() == ["http://localhost:5173", "https://example.org"]

    monkeypatch.setenv("CORS_ORIGINS", " , ")
    assert load_cors_origins() == ["*"]
