from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

CensusNumber = Union[int, float]


class RawRecord(BaseModel):
    """One label/value pair as stored in a state or city file."""

    model_config = ConfigDict(extra="ignore")

    label: str
    value: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value: Any) -> str | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value
        return None


class ErrorResponse(BaseModel):
    error: str


class PopulationCensus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    census_2010: CensusNumber | None = Field(default=None, alias="2010")
    census_2020: CensusNumber | None = Field(default=None, alias="2020")


class YearlyFigures(BaseModel):
    """Estimates or percent changes keyed by year; null years are left out."""

    model_config = ConfigDict(populate_by_name=True)

    year_2023: CensusNumber | None = Field(default=None, alias="2023")
    year_2024: CensusNumber | None = Field(default=None, alias="2024")

    @model_serializer(mode="wrap")
    def omit_missing_years(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class AgeDistribution(BaseModel):
    under5: CensusNumber = 0
    under18: CensusNumber = 0
    over65: CensusNumber = 0
    other: CensusNumber = 100


class Miscellaneous(BaseModel):
    population_base: dict[str, CensusNumber | None] = Field(default_factory=dict)
    demographics: dict[str, CensusNumber | None] = Field(default_factory=dict)
    housing: dict[str, CensusNumber | None] = Field(default_factory=dict)
    education: dict[str, CensusNumber | None] = Field(default_factory=dict)
    health: dict[str, CensusNumber | None] = Field(default_factory=dict)
    labor_economics: dict[str, CensusNumber | None] = Field(default_factory=dict)
    business: dict[str, CensusNumber | None] = Field(default_factory=dict)
    geographic: dict[str, CensusNumber | None] = Field(default_factory=dict)
    other: dict[str, CensusNumber | None] = Field(default_factory=dict)


class CensusDocument(BaseModel):
    population_census: PopulationCensus = Field(default_factory=PopulationCensus)
    population_estimates: YearlyFigures = Field(default_factory=YearlyFigures)
    population_change: YearlyFigures = Field(default_factory=YearlyFigures)
    age_distribution: AgeDistribution = Field(default_factory=AgeDistribution)
    race_distribution: dict[str, CensusNumber | None] = Field(default_factory=dict)
    miscellaneous: Miscellaneous = Field(default_factory=Miscellaneous)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CityListResponse(BaseModel):
    cities: list[str]


class StateListResponse(BaseModel):
    states: list[str]
