from __future__ import annotations

import re

_STRIPPED_CHARS = re.compile(r"[,()]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def normalize_key(label: str) -> str:
    """Turn a human-readable Census label into a snake_case key.

    "Population per square mile, 2020" -> "population_per_square_mile_2020"
    """
    key = label.lower()
    key = _STRIPPED_CHARS.sub("", key)
    key = _WHITESPACE_RUN.sub("_", key)
    key = _HYPHEN_RUN.sub("_", key)
    return key.strip()
