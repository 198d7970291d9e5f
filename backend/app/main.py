from __future__ import annotations

import logging

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .census_transform import transform_census_records
from .config import (
    DataConfig,
    configure_logging,
    load_cors_origins,
    load_data_config,
    load_server_config,
)
from .record_store import list_identifiers, load_records, resolve_record_path
from .schemas import CityListResponse, ErrorResponse, StateListResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="Census Profile API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_data_config() -> DataConfig:
    return load_data_config()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get(
    "/api/list/cities",
    response_model=CityListResponse,
    responses={500: {"model": ErrorResponse}},
)
def list_cities(config: DataConfig = Depends(get_data_config)):
    try:
        return {"cities": list_identifiers(config.cities_dir)}
    except OSError as exc:
        logger.error("Unable to read cities directory %s: %s", config.cities_dir, exc)
        return _error(500, "Unable to read cities directory")


@app.get(
    "/api/list/states",
    response_model=StateListResponse,
    responses={500: {"model": ErrorResponse}},
)
def list_states(config: DataConfig = Depends(get_data_config)):
    try:
        return {"states": list_identifiers(config.states_dir)}
    except OSError as exc:
        logger.error("Unable to read states directory %s: %s", config.states_dir, exc)
        return _error(500, "Unable to read states directory")


@app.get("/api/{identifier}", responses={404: {"model": ErrorResponse}})
async def census_profile(identifier: str, config: DataConfig = Depends(get_data_config)):
    """Return the reshaped Census document for a state code or city name.

    Two-letter identifiers load ``states/XX.json``; anything else loads
    ``<cities dir>/<identifier>.json``. The file is read in a worker thread and
    transformed on every request.
    """
    path = resolve_record_path(identifier, config)
    records = await run_in_threadpool(load_records, path)
    if records is None:
        logger.info("No census data for %r (looked in %s)", identifier, path)
        return _error(404, "Data not found")
    return transform_census_records(records).to_payload()


def run() -> None:
    server = load_server_config()
    configure_logging(server.log_level)
    logger.info("Census API server starting on %s:%d", server.host, server.port)
    uvicorn.run(app, host=server.host, port=server.port, log_level=server.log_level.lower())


if __name__ == "__main__":
    run()
