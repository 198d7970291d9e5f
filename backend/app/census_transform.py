from __future__ import annotations

import logging
import math
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .census_keys import normalize_key
from .schemas import (
    AgeDistribution,
    CensusDocument,
    CensusNumber,
    Miscellaneous,
    PopulationCensus,
    RawRecord,
    YearlyFigures,
)

logger = logging.getLogger(__name__)

SENTINEL_TOKENS = {"X", "NA", "S"}

_DECIMAL_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class Section(str, Enum):
    POPULATION_CENSUS = "population_census"
    POPULATION_ESTIMATES = "population_estimates"
    POPULATION_CHANGE = "population_change"
    AGE_DISTRIBUTION = "age_distribution"
    RACE_DISTRIBUTION = "race_distribution"
    MISCELLANEOUS = "miscellaneous"


@dataclass(frozen=True)
class Destination:
    section: Section
    slot: str


@dataclass(frozen=True)
class ClassificationRule:
    """Routes a label to a destination.

    A rule matches when the label contains every substring in ``all_of`` and,
    if ``any_of`` is non-empty, at least one substring from ``any_of``.
    """

    destination: Destination
    all_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()

    def matches(self, label: str) -> bool:
        if not all(part in label for part in self.all_of):
            return False
        if self.any_of:
            return any(part in label for part in self.any_of)
        return True


def _rule(section: Section, slot: str, *substrings: str) -> ClassificationRule:
    return ClassificationRule(Destination(section, slot), all_of=substrings)


def _bucket(slot: str, *substrings: str) -> ClassificationRule:
    return ClassificationRule(Destination(Section.MISCELLANEOUS, slot), any_of=substrings)


# (pattern, canonical name). "White alone, not Hispanic" has to stay ahead of
# "White alone" or the shorter pattern swallows it.
RACE_PATTERNS: tuple[tuple[str, str], ...] = (
    ("White alone, not Hispanic", "White alone, not Hispanic"),
    ("White alone", "White alone"),
    ("Black alone", "Black alone"),
    ("American Indian and Alaska Native", "American Indian and Alaska Native"),
    ("Asian alone", "Asian alone"),
    ("Native Hawaiian", "Native Hawaiian and Other Pacific Islander"),
    ("Two or More Races", "Two or More Races"),
    ("Hispanic or Latino", "Hispanic or Latino"),
)

MISCELLANEOUS_BUCKETS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("population_base", ("Population estimates base",)),
    ("demographics", ("Female persons", "Veterans,", "Foreign-born persons")),
    (
        "housing",
        (
            "Housing Units",
            "Owner-occupied housing unit rate",
            "Median value of owner-occupied housing units",
            "Median selected monthly owner costs",
            "Median gross rent",
            "Building Permits",
            "Households,",
            "Persons per household",
            "Living in the same house",
        ),
    ),
    (
        "education",
        (
            "Language other than English",
            "Households with a computer",
            "Households with a broadband Internet subscription",
            "High school graduate",
            "Bachelor's degree",
        ),
    ),
    ("health", ("With a disability", "health insurance", "Persons in poverty")),
    (
        "labor_economics",
        (
            "In civilian labor force",
            "Total accommodation and food services sales",
            "Total health care and social assistance",
            "Total transportation and warehousing",
            "Total retail sales",
            "Mean travel time to work",
            "Median households income",
            "Per capita income",
        ),
    ),
    ("business", ("employer", "employment", "payroll", "firms")),
    (
        "geographic",
        ("Population per square mile", "Land area in square miles", "FIPS Code"),
    ),
)

OTHER_BUCKET = Destination(Section.MISCELLANEOUS, "other")

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    _rule(Section.POPULATION_CENSUS, "2010", "Population, Census, April 1, 2010"),
    _rule(Section.POPULATION_CENSUS, "2020", "Population, Census, April 1, 2020"),
    _rule(Section.POPULATION_ESTIMATES, "2023", "Population estimates, July 1, 2023"),
    _rule(Section.POPULATION_ESTIMATES, "2024", "Population estimates, July 1, 2024"),
    _rule(Section.POPULATION_CHANGE, "2023", "Population, percent change", "July 1, 2023"),
    _rule(Section.POPULATION_CHANGE, "2024", "Population, percent change", "July 1, 2024"),
    _rule(Section.AGE_DISTRIBUTION, "under5", "Persons under 5 years, percent"),
    _rule(Section.AGE_DISTRIBUTION, "under18", "Persons under 18 years, percent"),
    _rule(Section.AGE_DISTRIBUTION, "over65", "Persons 65 years and over, percent"),
    *(
        _rule(Section.RACE_DISTRIBUTION, normalize_key(name), pattern)
        for pattern, name in RACE_PATTERNS
    ),
    *(_bucket(slot, *substrings) for slot, substrings in MISCELLANEOUS_BUCKETS),
)


def parse_number(raw: Any) -> CensusNumber | None:
    """Parse a Census value string; sentinels and junk become None."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return raw if math.isfinite(raw) else None
    if not raw or not isinstance(raw, str):
        return None
    if raw.strip().upper() in SENTINEL_TOKENS:
        return None

    cleaned = raw.replace(",", "").strip()
    if not _DECIMAL_NUMBER.fullmatch(cleaned):
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer() and abs(number) < 2**53:
        return int(number)
    return number


def classify_label(label: str) -> Destination:
    for rule in CLASSIFICATION_RULES:
        if rule.matches(label):
            return rule.destination
    return OTHER_BUCKET


def _as_records(records: Iterable[Any] | Mapping[Any, Any]) -> list[RawRecord]:
    items = records.values() if isinstance(records, Mapping) else records
    return [item if isinstance(item, RawRecord) else RawRecord.model_validate(item) for item in items]


def count_destinations(records: Iterable[Any] | Mapping[Any, Any]) -> Counter[Destination]:
    return Counter(classify_label(record.label) for record in _as_records(records))


def _age_remainder(under5: CensusNumber, under18: CensusNumber, over65: CensusNumber) -> CensusNumber:
    total = under5 + under18 + over65
    return 100 - total if total <= 100 else 0


def transform_census_records(records: Iterable[Any] | Mapping[Any, Any]) -> CensusDocument:
    """Reshape flat label/value records into a CensusDocument.

    Each record is classified exactly once against CLASSIFICATION_RULES
    (first match wins); labels matching nothing go to miscellaneous.other.
    A mapping input is treated as a bag of its values.
    """
    raw_records = _as_records(records)

    slots: dict[Destination, CensusNumber | None] = {}
    race: dict[str, CensusNumber | None] = {}
    buckets: dict[str, dict[str, CensusNumber | None]] = {
        name: {} for name in Miscellaneous.model_fields
    }

    for record in raw_records:
        destination = classify_label(record.label)
        value = parse_number(record.value)

        if destination.section is Section.RACE_DISTRIBUTION:
            race[destination.slot] = value
        elif destination.section is Section.MISCELLANEOUS:
            buckets[destination.slot][normalize_key(record.label)] = value
        else:
            slots[destination] = value

    def slot_value(section: Section, slot: str) -> CensusNumber | None:
        return slots.get(Destination(section, slot))

    under5 = slot_value(Section.AGE_DISTRIBUTION, "under5") or 0
    under18 = slot_value(Section.AGE_DISTRIBUTION, "under18") or 0
    over65 = slot_value(Section.AGE_DISTRIBUTION, "over65") or 0

    document = CensusDocument(
        population_census=PopulationCensus(
            census_2010=slot_value(Section.POPULATION_CENSUS, "2010"),
            census_2020=slot_value(Section.POPULATION_CENSUS, "2020"),
        ),
        population_estimates=YearlyFigures(
            year_2023=slot_value(Section.POPULATION_ESTIMATES, "2023"),
            year_2024=slot_value(Section.POPULATION_ESTIMATES, "2024"),
        ),
        population_change=YearlyFigures(
            year_2023=slot_value(Section.POPULATION_CHANGE, "2023"),
            year_2024=slot_value(Section.POPULATION_CHANGE, "2024"),
        ),
        age_distribution=AgeDistribution(
            under5=under5,
            under18=under18,
            over65=over65,
            other=_age_remainder(under5, under18, over65),
        ),
        race_distribution=race,
        miscellaneous=Miscellaneous(**buckets),
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Transformed %d census records: %s",
            len(raw_records),
            ", ".join(
                f"{destination.section.value}.{destination.slot}={count}"
                for destination, count in sorted(
                    count_destinations(raw_records).items(),
                    key=lambda item: (item[0].section.value, item[0].slot),
                )
            ),
        )
    return document
