"""File-backed record source: one JSON file per state or city."""
from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import DataConfig
from .schemas import RawRecord

logger = logging.getLogger(__name__)

STATE_CODE_PATTERN = re.compile(r"[A-Za-z]{2}")
RECORD_FILE_SUFFIX = ".json"


class EntityKind(str, Enum):
    STATE = "state"
    CITY = "city"


def resolve_entity(identifier: str) -> EntityKind:
    if STATE_CODE_PATTERN.fullmatch(identifier):
        return EntityKind.STATE
    return EntityKind.CITY


def resolve_record_path(identifier: str, config: DataConfig) -> Path:
    if resolve_entity(identifier) is EntityKind.STATE:
        return config.states_dir / f"{identifier.upper()}{RECORD_FILE_SUFFIX}"
    return config.cities_dir / f"{identifier.lower()}{RECORD_FILE_SUFFIX}"


def parse_records(payload: Any, *, source: str = "<payload>") -> list[RawRecord] | None:
    if isinstance(payload, dict):
        items = list(payload.values())
    elif isinstance(payload, list):
        items = payload
    else:
        logger.error("Unexpected record payload type %s in %s", type(payload).__name__, source)
        return None

    records: list[RawRecord] = []
    for item in items:
        try:
            records.append(RawRecord.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed record in %s: %s", source, exc.errors()[0]["msg"])
    return records


def load_records(path: Path) -> list[RawRecord] | None:
    """Read a record file; None means the entity has no usable data."""
    if not path.is_file():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Error reading record file %s: %s", path, exc)
        return None
    return parse_records(payload, source=str(path))


def list_identifiers(directory: Path) -> list[str]:
    return sorted(
        entry.name[: -len(RECORD_FILE_SUFFIX)]
        for entry in directory.iterdir()
        if entry.name.endswith(RECORD_FILE_SUFFIX)
    )
