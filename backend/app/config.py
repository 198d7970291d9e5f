from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_DATA_DIR = _PROJECT_ROOT / "data"
DEFAULT_CITIES_DIRNAME = "mi_cities"
STATES_DIRNAME = "states"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class DataConfig:
    data_dir: Path
    cities_dirname: str = DEFAULT_CITIES_DIRNAME

    @property
    def states_dir(self) -> Path:
        return self.data_dir / STATES_DIRNAME

    @property
    def cities_dir(self) -> Path:
        return self.data_dir / self.cities_dirname


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def _env(name: str, default: str) -> str:
    return (os.getenv(name, default) or default).strip() or default


def load_data_config() -> DataConfig:
    raw_dir = os.getenv("CENSUS_DATA_DIR", "").strip()
    return DataConfig(
        data_dir=Path(raw_dir) if raw_dir else DEFAULT_DATA_DIR,
        cities_dirname=_env("CENSUS_CITIES_DIRNAME", DEFAULT_CITIES_DIRNAME),
    )


def load_server_config() -> ServerConfig:
    raw_port = _env("PORT", "3000")
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise ValueError(f"PORT must be an integer. Got: {raw_port!r}") from exc
    return ServerConfig(
        host=_env("HOST", "0.0.0.0"),
        port=port,
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )


def load_cors_origins() -> list[str]:
    raw_origins = os.getenv("CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
    return origins or ["*"]


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or _env("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
    )
